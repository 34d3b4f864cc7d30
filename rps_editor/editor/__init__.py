"""In-memory RPS aggregate editor.

``RPSEditor`` bundles the state container with one editor per collection and
is the only entry point the service layer uses.
"""

from typing import Any, Dict, Sequence

from rps_editor.editor.analysis import AnalysisEditor
from rps_editor.editor.base import CollectionEditor
from rps_editor.editor.bibliography import BibliographyEditor
from rps_editor.editor.cpmk import CourseOutcomeEditor
from rps_editor.editor.fields import UnknownFieldError
from rps_editor.editor.form import FormEditor
from rps_editor.editor.state import EditorState
from rps_editor.editor.sub_cpmk import SubOutcomeEditor
from rps_editor.editor.tasks import TaskEditor
from rps_editor.editor.weekly_plan import WeeklyPlanEditor
from rps_editor.schemas.rps import LearningOutcome, RPSAggregate


class UnknownCollectionError(ValueError):
    """No flat collection is registered under that name."""


class RPSEditor:
    def __init__(
        self,
        aggregate: RPSAggregate,
        cpl_list: Sequence[LearningOutcome] = (),
        read_only: bool = False,
    ) -> None:
        self.state = EditorState(aggregate, cpl_list, read_only=read_only)
        self.form = FormEditor(self.state)
        self.cpmk = CourseOutcomeEditor(self.state)
        self.sub_cpmk = SubOutcomeEditor(self.state)
        self.rencana_pembelajaran = WeeklyPlanEditor(self.state)
        self.rencana_tugas = TaskEditor(self.state)
        self.analisis_ketercapaian = AnalysisEditor(self.state)
        self.bahan_bacaan = BibliographyEditor(self.state)
        self._collections: Dict[str, CollectionEditor] = {
            editor.name: editor
            for editor in (
                self.cpmk,
                self.rencana_pembelajaran,
                self.rencana_tugas,
                self.analisis_ketercapaian,
                self.bahan_bacaan,
            )
        }

    def collection(self, name: str) -> CollectionEditor:
        """Flat collection editor by name; hyphenated URL slugs are accepted."""

        editor = self._collections.get(name.replace("-", "_"))
        if editor is None:
            raise UnknownCollectionError(f"unknown collection {name!r}")
        return editor

    def totals(self) -> Dict[str, int]:
        return {
            "bobot_rencana_pembelajaran": self.rencana_pembelajaran.total_weight(),
            "bobot_rencana_tugas": self.rencana_tugas.total_weight(),
            "bobot_analisis_ketercapaian": self.analisis_ketercapaian.total_weight(),
        }

    def render_view(self) -> Dict[str, Any]:
        """Read-only rendering of every tab with resolved references."""

        return {
            "info": self.form.render_view(),
            "cpmk": self.cpmk.render_view(),
            "subcpmk": self.sub_cpmk.render_view(),
            "rencana": self.rencana_pembelajaran.render_view(),
            "tugas": self.rencana_tugas.render_view(),
            "analisis": self.analisis_ketercapaian.render_view(),
            "pustaka": self.bahan_bacaan.render_view(),
            "totals": self.totals(),
        }

    def snapshot(self) -> RPSAggregate:
        return self.state.snapshot()


__all__ = [
    "EditorState",
    "RPSEditor",
    "UnknownCollectionError",
    "UnknownFieldError",
]
