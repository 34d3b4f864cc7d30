"""Bibliography (pustaka / bahan bacaan) editor."""

from datetime import date
from typing import Any, Dict, List

from rps_editor.editor.base import CollectionEditor
from rps_editor.editor.fields import NON_NEGATIVE, ORDINAL
from rps_editor.models.enums import JENIS_BAHAN_LABELS, JenisBahan
from rps_editor.schemas.rps import BibliographyEntry


def format_reference(entry: BibliographyEntry) -> str:
    """``Author. Title (Year). Publisher``, skipping missing parts."""

    reference = entry.judul
    if entry.penulis:
        reference = f"{entry.penulis}. {reference}"
    if entry.tahun:
        reference += f" ({entry.tahun})"
    if entry.penerbit:
        reference += f". {entry.penerbit}"
    return reference


def split_mandatory(
    entries: List[BibliographyEntry],
) -> tuple[List[BibliographyEntry], List[BibliographyEntry]]:
    """(mandatory, supplementary), each keeping the original order."""

    return (
        [entry for entry in entries if entry.is_wajib],
        [entry for entry in entries if not entry.is_wajib],
    )


class BibliographyEditor(CollectionEditor[BibliographyEntry]):
    name = "bahan_bacaan"
    entry_type = BibliographyEntry
    int_fields = {"tahun": NON_NEGATIVE, "urutan": ORDINAL}
    enum_fields = {"jenis": JenisBahan}
    bool_fields = frozenset({"is_wajib"})

    @property
    def entries(self) -> List[BibliographyEntry]:
        return self.state.bahan_bacaan

    def _commit(self, entries: List[BibliographyEntry]) -> None:
        self.state.set_bahan_bacaan(entries)

    def new_entry(self) -> BibliographyEntry:
        return BibliographyEntry(
            tahun=date.today().year,
            jenis=JenisBahan.BUKU,
            is_wajib=False,
            urutan=len(self.entries) + 1,
        )

    def _card(self, entry: BibliographyEntry) -> Dict[str, Any]:
        return {
            "id": entry.id,
            "referensi": format_reference(entry),
            "jenis": JENIS_BAHAN_LABELS[entry.jenis],
            "isbn": entry.isbn or None,
            "halaman": entry.halaman or None,
            "url": entry.url or None,
            "urutan": entry.urutan,
        }

    def render_view(self) -> List[Dict[str, Any]]:
        mandatory, supplementary = split_mandatory(self.entries)
        return [
            {"kelompok": "wajib", "entries": [self._card(e) for e in mandatory]},
            {"kelompok": "pendukung", "entries": [self._card(e) for e in supplementary]},
        ]
