"""Cross-reference resolution for display.

Collections are small (tens of entries), so lookups are plain linear scans.
A reference that does not resolve renders as ``PLACEHOLDER``.
"""

from typing import Iterable, List, Optional, Protocol, Sequence, TypeVar


PLACEHOLDER = "-"


class Coded(Protocol):
    id: Optional[str]
    kode: str


T = TypeVar("T", bound=Coded)


def find_by_id(items: Iterable[T], ref_id: Optional[str]) -> Optional[T]:
    if not ref_id:
        return None
    for item in items:
        if item.id is not None and str(item.id) == str(ref_id):
            return item
    return None


def resolve_code(items: Iterable[T], ref_id: Optional[str]) -> str:
    item = find_by_id(items, ref_id)
    return item.kode if item is not None and item.kode else PLACEHOLDER


def resolve_codes(items: Sequence[T], ref_ids: Iterable[str]) -> List[str]:
    return [resolve_code(items, ref_id) for ref_id in ref_ids]


def join_codes(items: Sequence[T], ref_ids: Sequence[str]) -> str:
    if not ref_ids:
        return PLACEHOLDER
    return ", ".join(resolve_codes(items, ref_ids))

