"""Aggregate state container.

Holds one RPS aggregate and the read-only CPL list it refers to. Every
mutation goes through a whole-collection setter: editors compute the next
collection value and hand it over, they never patch entries in place.
"""

from __future__ import annotations

from typing import List, Sequence

from rps_editor.schemas.rps import (
    AchievementAnalysis,
    BibliographyEntry,
    CourseOutcome,
    LearningOutcome,
    RPSAggregate,
    RPSFormData,
    SubOutcome,
    TaskAssignment,
    WeeklyPlanEntry,
)


class EditorState:
    """Single source of truth for one RPS while it is being edited."""

    def __init__(
        self,
        aggregate: RPSAggregate,
        cpl_list: Sequence[LearningOutcome] = (),
        read_only: bool = False,
    ) -> None:
        self._aggregate = aggregate.model_copy(deep=True)
        self.cpl_list: List[LearningOutcome] = list(cpl_list)
        self.read_only = read_only

    @property
    def rps_id(self) -> str | None:
        return self._aggregate.id

    @property
    def form(self) -> RPSFormData:
        return self._aggregate.form

    @property
    def cpmk(self) -> List[CourseOutcome]:
        return self._aggregate.cpmk

    @property
    def sub_cpmk(self) -> List[List[SubOutcome]]:
        """Sub-CPMK groups, position ``i`` belonging to CPMK ``i``."""

        return [cpmk.sub_cpmk for cpmk in self._aggregate.cpmk]

    @property
    def rencana_pembelajaran(self) -> List[WeeklyPlanEntry]:
        return self._aggregate.rencana_pembelajaran

    @property
    def rencana_tugas(self) -> List[TaskAssignment]:
        return self._aggregate.rencana_tugas

    @property
    def analisis_ketercapaian(self) -> List[AchievementAnalysis]:
        return self._aggregate.analisis_ketercapaian

    @property
    def bahan_bacaan(self) -> List[BibliographyEntry]:
        return self._aggregate.bahan_bacaan

    def all_sub_cpmk(self) -> List[SubOutcome]:
        """Flattened Sub-CPMK list in CPMK order."""

        return [sub for group in self.sub_cpmk for sub in group]

    def set_form(self, form: RPSFormData) -> None:
        self._aggregate = self._aggregate.model_copy(update={"form": form})

    def set_cpmk(self, entries: Sequence[CourseOutcome]) -> None:
        self._aggregate = self._aggregate.model_copy(update={"cpmk": list(entries)})

    def set_sub_cpmk(self, groups: Sequence[Sequence[SubOutcome]]) -> None:
        if len(groups) != len(self._aggregate.cpmk):
            raise ValueError(
                f"expected {len(self._aggregate.cpmk)} Sub-CPMK groups, got {len(groups)}"
            )
        self.set_cpmk(
            [
                cpmk.model_copy(update={"sub_cpmk": list(group)})
                for cpmk, group in zip(self._aggregate.cpmk, groups)
            ]
        )

    def set_rencana_pembelajaran(self, entries: Sequence[WeeklyPlanEntry]) -> None:
        self._aggregate = self._aggregate.model_copy(
            update={"rencana_pembelajaran": list(entries)}
        )

    def set_rencana_tugas(self, entries: Sequence[TaskAssignment]) -> None:
        self._aggregate = self._aggregate.model_copy(update={"rencana_tugas": list(entries)})

    def set_analisis_ketercapaian(self, entries: Sequence[AchievementAnalysis]) -> None:
        self._aggregate = self._aggregate.model_copy(
            update={"analisis_ketercapaian": list(entries)}
        )

    def set_bahan_bacaan(self, entries: Sequence[BibliographyEntry]) -> None:
        self._aggregate = self._aggregate.model_copy(update={"bahan_bacaan": list(entries)})

    def snapshot(self) -> RPSAggregate:
        """Detached copy of the current aggregate."""

        return self._aggregate.model_copy(deep=True)
