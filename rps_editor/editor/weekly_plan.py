"""Weekly plan (rencana pembelajaran) editor."""

from typing import Any, Dict, List

from rps_editor.editor.base import CollectionEditor
from rps_editor.editor.fields import NON_NEGATIVE, PERCENT, week_rule
from rps_editor.editor.lookup import PLACEHOLDER, resolve_code
from rps_editor.schemas.rps import WeeklyPlanEntry

DEFAULT_METODE = "Tatap Muka: Ceramah, Diskusi"
DEFAULT_WAKTU_MENIT = 150
LAST_WEEK = 16


def format_sub_topik(sub_topik: List[str]) -> str:
    return ", ".join(sub_topik) if sub_topik else PLACEHOLDER


class WeeklyPlanEditor(CollectionEditor[WeeklyPlanEntry]):
    name = "rencana_pembelajaran"
    entry_type = WeeklyPlanEntry
    weight_field = "bobot_persen"
    int_fields = {
        "minggu_ke": week_rule(),
        "waktu_menit": NON_NEGATIVE,
        "bobot_persen": PERCENT,
    }
    list_fields = frozenset({"sub_topik"})

    @property
    def entries(self) -> List[WeeklyPlanEntry]:
        return self.state.rencana_pembelajaran

    def _commit(self, entries: List[WeeklyPlanEntry]) -> None:
        self.state.set_rencana_pembelajaran(entries)

    def new_entry(self) -> WeeklyPlanEntry:
        weeks = [entry.minggu_ke for entry in self.entries]
        next_week = min(max(weeks) + 1, LAST_WEEK) if weeks else 1
        return WeeklyPlanEntry(
            minggu_ke=next_week,
            sub_cpmk_id="",
            topik="",
            sub_topik=[],
            metode_pembelajaran=DEFAULT_METODE,
            waktu_menit=DEFAULT_WAKTU_MENIT,
            teknik_kriteria="",
            bobot_persen=0,
        )

    def render_view(self) -> List[Dict[str, Any]]:
        sub_cpmk = self.state.all_sub_cpmk()
        ordered = sorted(self.entries, key=lambda entry: entry.minggu_ke)
        return [
            {
                "id": entry.id,
                "minggu_ke": entry.minggu_ke,
                "sub_cpmk": resolve_code(sub_cpmk, entry.sub_cpmk_id),
                "topik": entry.topik or PLACEHOLDER,
                "sub_topik": format_sub_topik(entry.sub_topik),
                "metode_pembelajaran": entry.metode_pembelajaran or PLACEHOLDER,
                "waktu_menit": entry.waktu_menit,
                "teknik_kriteria": entry.teknik_kriteria or PLACEHOLDER,
                "bobot_persen": entry.bobot_persen,
            }
            for entry in ordered
        ]
