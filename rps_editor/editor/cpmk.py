"""CPMK (course outcome) editor."""

from typing import Any, Dict, List

from rps_editor.editor.base import CollectionEditor
from rps_editor.editor.lookup import PLACEHOLDER, resolve_codes
from rps_editor.schemas.rps import CourseOutcome


def cpmk_code(position: int) -> str:
    return f"CPMK-{position:02d}"


class CourseOutcomeEditor(CollectionEditor[CourseOutcome]):
    """Adds and removes CPMK together with their Sub-CPMK group.

    The list never drops below one CPMK.
    """

    name = "cpmk"
    entry_type = CourseOutcome
    list_fields = frozenset({"cpl_ids"})
    reference_fields = frozenset({"cpl_ids"})
    locked_fields = frozenset({"id", "sub_cpmk"})

    @property
    def entries(self) -> List[CourseOutcome]:
        return self.state.cpmk

    def _commit(self, entries: List[CourseOutcome]) -> None:
        self.state.set_cpmk(entries)

    def new_entry(self) -> CourseOutcome:
        return CourseOutcome(kode=cpmk_code(len(self.entries) + 1), sub_cpmk=[])

    def remove(self, index: int) -> None:
        if len(self.entries) <= 1:
            return
        super().remove(index)

    def render_view(self) -> List[Dict[str, Any]]:
        cards = []
        for cpmk in self.entries:
            cpl_codes = resolve_codes(self.state.cpl_list, cpmk.cpl_ids)
            cards.append(
                {
                    "id": cpmk.id,
                    "kode": cpmk.kode,
                    "deskripsi": cpmk.deskripsi or PLACEHOLDER,
                    "cpl": cpl_codes or [PLACEHOLDER],
                    "jumlah_sub_cpmk": len(cpmk.sub_cpmk),
                }
            )
        return cards
