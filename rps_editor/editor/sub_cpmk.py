"""Sub-CPMK editor.

Entries are addressed by ``(cpmk_index, sub_index)``; each group lives inside
its parent CPMK, so there is no separate array to keep aligned.
"""

import logging
from typing import Any, Dict, List

from rps_editor.editor.base import FieldCoercion
from rps_editor.editor.fields import ORDINAL
from rps_editor.editor.lookup import PLACEHOLDER
from rps_editor.editor.state import EditorState
from rps_editor.schemas.rps import SubOutcome

logger = logging.getLogger(__name__)


def sub_cpmk_code(position: int) -> str:
    return f"Sub-CPMK-{position:02d}"


class SubOutcomeEditor(FieldCoercion):
    name = "sub_cpmk"
    entry_type = SubOutcome
    int_fields = {"urutan": ORDINAL}
    locked_fields = frozenset({"id", "cpmk_id"})

    def __init__(self, state: EditorState) -> None:
        self.state = state

    def group(self, cpmk_index: int) -> List[SubOutcome]:
        groups = self.state.sub_cpmk
        if not 0 <= cpmk_index < len(groups):
            return []
        return groups[cpmk_index]

    def _replace_group(self, cpmk_index: int, group: List[SubOutcome]) -> None:
        groups = [list(g) for g in self.state.sub_cpmk]
        groups[cpmk_index] = group
        self.state.set_sub_cpmk(groups)

    def add(self, cpmk_index: int) -> None:
        if self.state.read_only or not 0 <= cpmk_index < len(self.state.cpmk):
            return
        parent = self.state.cpmk[cpmk_index]
        group = self.group(cpmk_index)
        position = len(group) + 1
        entry = SubOutcome(
            cpmk_id=parent.id or "",
            kode=sub_cpmk_code(position),
            deskripsi="",
            urutan=position,
        )
        self._replace_group(cpmk_index, [*group, entry])
        logger.debug("sub_cpmk: added %s under %s", entry.kode, parent.kode)

    def update(self, cpmk_index: int, sub_index: int, field: str, value: Any) -> None:
        coerced = self.coerce(field, value)
        group = self.group(cpmk_index)
        if self.state.read_only or not 0 <= sub_index < len(group):
            return
        updated = list(group)
        updated[sub_index] = group[sub_index].model_copy(update={field: coerced})
        self._replace_group(cpmk_index, updated)

    def remove(self, cpmk_index: int, sub_index: int) -> None:
        group = self.group(cpmk_index)
        if self.state.read_only or not 0 <= sub_index < len(group):
            return
        self._replace_group(cpmk_index, [s for i, s in enumerate(group) if i != sub_index])

    def move(self, cpmk_index: int, sub_index: int, target_cpmk_index: int) -> None:
        """Re-parent a Sub-CPMK, appending it to the target CPMK's group."""

        groups = [list(g) for g in self.state.sub_cpmk]
        if (
            self.state.read_only
            or not 0 <= cpmk_index < len(groups)
            or not 0 <= target_cpmk_index < len(groups)
            or not 0 <= sub_index < len(groups[cpmk_index])
            or cpmk_index == target_cpmk_index
        ):
            return
        moved = groups[cpmk_index].pop(sub_index)
        target = self.state.cpmk[target_cpmk_index]
        groups[target_cpmk_index].append(moved.model_copy(update={"cpmk_id": target.id or ""}))
        self.state.set_sub_cpmk(groups)

    def count(self) -> int:
        return sum(len(group) for group in self.state.sub_cpmk)

    def render_view(self) -> List[Dict[str, Any]]:
        """Cards grouped per CPMK, each group ordered by ``urutan``."""

        groups = []
        for cpmk, group in zip(self.state.cpmk, self.state.sub_cpmk):
            ordered = sorted(group, key=lambda sub: sub.urutan)
            groups.append(
                {
                    "cpmk_kode": cpmk.kode or PLACEHOLDER,
                    "sub_cpmk": [
                        {
                            "id": sub.id,
                            "kode": sub.kode,
                            "deskripsi": sub.deskripsi or PLACEHOLDER,
                            "urutan": sub.urutan,
                        }
                        for sub in ordered
                    ],
                }
            )
        return groups
