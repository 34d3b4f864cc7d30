"""Achievement-analysis (analisis ketercapaian) editor."""

from typing import Any, Dict, List

from rps_editor.editor.base import CollectionEditor
from rps_editor.editor.fields import PERCENT, week_rule
from rps_editor.editor.lookup import PLACEHOLDER, join_codes, resolve_code
from rps_editor.schemas.rps import AchievementAnalysis

JENIS_ASSESSMENT_OPTIONS = [
    "Tes Tertulis",
    "Tes Lisan",
    "Penugasan",
    "Praktikum",
    "Presentasi",
    "Portofolio",
    "Observasi",
    "Proyek",
]


def format_week_range(entry: AchievementAnalysis) -> str:
    if entry.minggu_selesai is None or entry.minggu_selesai == entry.minggu_mulai:
        return f"Minggu {entry.minggu_mulai}"
    return f"Minggu {entry.minggu_mulai} - {entry.minggu_selesai}"


class AnalysisEditor(CollectionEditor[AchievementAnalysis]):
    name = "analisis_ketercapaian"
    entry_type = AchievementAnalysis
    weight_field = "bobot_kontribusi"
    int_fields = {
        "minggu_mulai": week_rule(),
        "bobot_kontribusi": PERCENT,
    }
    optional_int_fields = {"minggu_selesai": week_rule()}
    list_fields = frozenset({"cpmk_ids", "sub_cpmk_ids"})
    reference_fields = frozenset({"cpmk_ids", "sub_cpmk_ids"})

    @property
    def entries(self) -> List[AchievementAnalysis]:
        return self.state.analisis_ketercapaian

    def _commit(self, entries: List[AchievementAnalysis]) -> None:
        self.state.set_analisis_ketercapaian(entries)

    def new_entry(self) -> AchievementAnalysis:
        return AchievementAnalysis(
            minggu_mulai=1,
            minggu_selesai=16,
            cpl_id="",
            cpmk_ids=[],
            sub_cpmk_ids=[],
            topik_materi="",
            jenis_assessment="",
            bobot_kontribusi=0,
        )

    def render_view(self) -> List[Dict[str, Any]]:
        sub_cpmk = self.state.all_sub_cpmk()
        return [
            {
                "id": entry.id,
                "minggu": format_week_range(entry),
                "cpl": resolve_code(self.state.cpl_list, entry.cpl_id),
                "cpmk": join_codes(self.state.cpmk, entry.cpmk_ids),
                "sub_cpmk": join_codes(sub_cpmk, entry.sub_cpmk_ids),
                "topik_materi": entry.topik_materi or PLACEHOLDER,
                "jenis_assessment": entry.jenis_assessment or PLACEHOLDER,
                "bobot_kontribusi": entry.bobot_kontribusi,
            }
            for entry in self.entries
        ]
