"""Closed value sets used across the RPS form."""

import enum


class SemesterType(str, enum.Enum):
    """Semester parity."""
    GANJIL = "ganjil"    # odd
    GENAP = "genap"      # even


class JenisTugas(str, enum.Enum):
    """Task assignment type."""
    INDIVIDU = "individu"
    KELOMPOK = "kelompok"


class JenisBahan(str, enum.Enum):
    """Bibliography entry kind."""
    BUKU = "buku"
    JURNAL = "jurnal"
    ARTIKEL = "artikel"
    WEBSITE = "website"
    MODUL = "modul"


class CPLStatus(str, enum.Enum):
    """Learning outcome publication status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class EditorMode(str, enum.Enum):
    """Whether a session accepts edits."""
    EDIT = "edit"
    VIEW = "view"


class RPSTab(str, enum.Enum):
    """Form tabs, in the order the user walks through them."""
    INFO = "info"
    CPMK = "cpmk"
    SUBCPMK = "subcpmk"
    RENCANA = "rencana"
    TUGAS = "tugas"
    ANALISIS = "analisis"
    PUSTAKA = "pustaka"


TAB_ORDER = list(RPSTab)

JENIS_TUGAS_LABELS = {
    JenisTugas.INDIVIDU: "Individu",
    JenisTugas.KELOMPOK: "Kelompok",
}

JENIS_BAHAN_LABELS = {
    JenisBahan.BUKU: "Buku",
    JenisBahan.JURNAL: "Jurnal",
    JenisBahan.ARTIKEL: "Artikel",
    JenisBahan.WEBSITE: "Website",
    JenisBahan.MODUL: "Modul",
}
