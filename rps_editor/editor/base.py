"""Shared add/update/remove/toggle behaviour of the collection editors."""

from __future__ import annotations

import enum
import logging
from typing import Any, ClassVar, Dict, FrozenSet, Generic, List, Mapping, Optional, TypeVar

from pydantic import BaseModel

from rps_editor.editor.fields import (
    IntRule,
    UnknownFieldError,
    coerce_bool,
    coerce_enum,
    coerce_int,
    coerce_optional_int,
    coerce_str_list,
    coerce_text,
)
from rps_editor.editor.state import EditorState

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class FieldCoercion:
    """Declares how each editable field of ``entry_type`` parses its input."""

    entry_type: ClassVar[type[BaseModel]]
    int_fields: ClassVar[Dict[str, IntRule]] = {}
    optional_int_fields: ClassVar[Dict[str, IntRule]] = {}
    enum_fields: ClassVar[Dict[str, type[enum.Enum]]] = {}
    list_fields: ClassVar[FrozenSet[str]] = frozenset()
    bool_fields: ClassVar[FrozenSet[str]] = frozenset()
    # Managed by the API or by another editor
    locked_fields: ClassVar[FrozenSet[str]] = frozenset({"id"})

    @classmethod
    def coerce(cls, field: str, value: Any) -> Any:
        if field in cls.locked_fields or field not in cls.entry_type.model_fields:
            raise UnknownFieldError(f"{cls.entry_type.__name__} has no editable field {field!r}")
        if field in cls.int_fields:
            return coerce_int(value, cls.int_fields[field])
        if field in cls.optional_int_fields:
            return coerce_optional_int(value, cls.optional_int_fields[field])
        if field in cls.enum_fields:
            return coerce_enum(value, cls.enum_fields[field])
        if field in cls.list_fields:
            return coerce_str_list(value)
        if field in cls.bool_fields:
            return coerce_bool(value)
        return coerce_text(value)

    @classmethod
    def build(cls, raw: Mapping[str, Any], **managed: Any) -> Any:
        """Entry from loosely typed API data.

        Editable fields go through the same coercion as user input; absent or
        null fields keep the model default. ``managed`` supplies the locked
        fields (``id`` and friends) verbatim.
        """

        values: Dict[str, Any] = {}
        for field in cls.entry_type.model_fields:
            if field in cls.locked_fields or raw.get(field) is None:
                continue
            try:
                values[field] = cls.coerce(field, raw[field])
            except ValueError:
                logger.warning(
                    "%s.%s: ignoring invalid value %r", cls.entry_type.__name__, field, raw[field]
                )
        values.update(managed)
        return cls.entry_type(**values)


class CollectionEditor(FieldCoercion, Generic[T]):
    """Editor over one flat child collection of the aggregate.

    Subclasses bind the collection (``entries``/``_commit``), build defaulted
    entries and render the read-only cards.
    """

    name: ClassVar[str]
    weight_field: ClassVar[Optional[str]] = None
    reference_fields: ClassVar[FrozenSet[str]] = frozenset()

    def __init__(self, state: EditorState) -> None:
        self.state = state

    @property
    def entries(self) -> List[T]:
        raise NotImplementedError

    def _commit(self, entries: List[T]) -> None:
        raise NotImplementedError

    def new_entry(self) -> T:
        raise NotImplementedError

    def render_view(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def add(self) -> None:
        if self.state.read_only:
            return
        self._commit([*self.entries, self.new_entry()])
        logger.debug("%s: added entry #%d", self.name, len(self.entries))

    def update(self, index: int, field: str, value: Any) -> None:
        coerced = self.coerce(field, value)
        entries = self.entries
        if self.state.read_only or not 0 <= index < len(entries):
            return
        updated = list(entries)
        updated[index] = entries[index].model_copy(update={field: coerced})
        self._commit(updated)

    def remove(self, index: int) -> None:
        entries = self.entries
        if self.state.read_only or not 0 <= index < len(entries):
            return
        self._commit([entry for i, entry in enumerate(entries) if i != index])

    def toggle_reference(self, index: int, ref_id: str, field: Optional[str] = None) -> None:
        """Add ``ref_id`` to a many-to-many field if absent, else drop it."""

        field = field or self._default_reference_field()
        if field not in self.reference_fields:
            raise UnknownFieldError(f"{self.name} has no reference field {field!r}")
        entries = self.entries
        if self.state.read_only or not 0 <= index < len(entries):
            return
        current: List[str] = list(getattr(entries[index], field) or [])
        if ref_id in current:
            current = [item for item in current if item != ref_id]
        else:
            current.append(ref_id)
        updated = list(entries)
        updated[index] = entries[index].model_copy(update={field: current})
        self._commit(updated)

    def total_weight(self) -> int:
        """Sum of the weight field; display only, never clamped to 100."""

        if self.weight_field is None:
            return 0
        return sum(getattr(entry, self.weight_field) or 0 for entry in self.entries)

    def _default_reference_field(self) -> str:
        if len(self.reference_fields) != 1:
            raise UnknownFieldError(f"{self.name} needs an explicit reference field")
        return next(iter(self.reference_fields))
