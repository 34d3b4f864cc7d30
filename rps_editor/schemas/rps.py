"""RPS aggregate contracts.

Field names follow the external curriculum API (snake_case, Indonesian
domain terms) so that hydration and persistence stay a thin mapping. Every
child entry carries an optional ``id``: ``None`` until the API assigns one on
first save.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from rps_editor.models.enums import JenisBahan, JenisTugas, SemesterType


DEFAULT_METODE_PEMBELAJARAN = ["Ceramah", "Diskusi", "Praktikum"]
DEFAULT_MEDIA_PEMBELAJARAN = ["Laptop", "Projector", "LMS"]


class LearningOutcome(BaseModel):
    """CPL supplied by the API; read-only inside the editor."""

    id: str
    kode: str
    nama: str = ""
    deskripsi: str = ""


class MataKuliah(BaseModel):
    """Course record the RPS belongs to. Only what the document needs."""

    id: str
    kode: str = ""
    nama: str = ""
    sks: int = 0
    semester: int = 0
    jenis: str = ""
    prasyarat: List[str] = Field(default_factory=list)


class DraftEntry(BaseModel):
    """Child entry of the aggregate, new or already persisted."""

    id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.id is None


class SubOutcome(DraftEntry):
    """Sub-CPMK, owned by exactly one CPMK."""

    cpmk_id: str = ""
    kode: str = ""
    deskripsi: str = ""
    urutan: int = 1


class CourseOutcome(DraftEntry):
    """CPMK with its CPL mapping and its Sub-CPMK group."""

    kode: str = ""
    deskripsi: str = ""
    cpl_ids: List[str] = Field(default_factory=list)
    sub_cpmk: List[SubOutcome] = Field(default_factory=list)


class WeeklyPlanEntry(DraftEntry):
    """One week of the lesson plan (rencana pembelajaran)."""

    minggu_ke: int = 1
    sub_cpmk_id: str = ""
    topik: str = ""
    sub_topik: List[str] = Field(default_factory=list)
    metode_pembelajaran: str = ""
    waktu_menit: int = 0
    teknik_kriteria: str = ""
    bobot_persen: int = 0


class TaskAssignment(DraftEntry):
    """Graded task (rencana tugas)."""

    nomor_tugas: int = 1
    judul: str = ""
    sub_cpmk_id: str = ""
    indikator_keberhasilan: str = ""
    batas_waktu_minggu: int = 1
    petunjuk_pengerjaan: str = ""
    jenis_tugas: JenisTugas = JenisTugas.INDIVIDU
    luaran_tugas: str = ""
    kriteria_penilaian: str = ""
    teknik_penilaian: str = ""
    bobot: int = 0
    daftar_rujukan: str = ""


class AchievementAnalysis(DraftEntry):
    """Achievement-analysis row (analisis ketercapaian)."""

    minggu_mulai: int = 1
    minggu_selesai: Optional[int] = None
    cpl_id: str = ""
    cpmk_ids: List[str] = Field(default_factory=list)
    sub_cpmk_ids: List[str] = Field(default_factory=list)
    topik_materi: str = ""
    jenis_assessment: str = ""
    bobot_kontribusi: int = 0


class BibliographyEntry(DraftEntry):
    """Reading material (bahan bacaan / pustaka)."""

    judul: str = ""
    penulis: str = ""
    tahun: int = 0
    penerbit: str = ""
    jenis: JenisBahan = JenisBahan.BUKU
    isbn: str = ""
    halaman: str = ""
    url: str = ""
    is_wajib: bool = False
    urutan: int = 1


class RPSFormData(BaseModel):
    """Top-level fields of the RPS (Info Dasar tab)."""

    mata_kuliah_id: str = ""
    tahun_ajaran: str = ""
    semester_type: SemesterType = SemesterType.GANJIL
    tanggal_penyusunan: str = ""
    penyusun_nama: str = ""
    penyusun_nidn: str = ""
    koordinator_rmk_nama: str = ""
    koordinator_rmk_nidn: str = ""
    kaprodi_nama: str = ""
    kaprodi_nidn: str = ""
    fakultas: str = ""
    program_studi: str = ""
    deskripsi_mk: str = ""
    capaian_pembelajaran: str = ""
    metode_pembelajaran: List[str] = Field(default_factory=list)
    media_pembelajaran: List[str] = Field(default_factory=list)


class RPSAggregate(BaseModel):
    """One RPS document: form fields plus its child collections.

    Sub-CPMK entries are owned by their CPMK, so the Sub-CPMK groups can never
    drift out of alignment with the CPMK list.
    """

    id: Optional[str] = None
    form: RPSFormData = Field(default_factory=RPSFormData)
    cpmk: List[CourseOutcome] = Field(default_factory=list)
    rencana_pembelajaran: List[WeeklyPlanEntry] = Field(default_factory=list)
    rencana_tugas: List[TaskAssignment] = Field(default_factory=list)
    analisis_ketercapaian: List[AchievementAnalysis] = Field(default_factory=list)
    bahan_bacaan: List[BibliographyEntry] = Field(default_factory=list)


def new_aggregate(tahun_ajaran: str, today: Optional[date] = None) -> RPSAggregate:
    """Blank RPS as presented by the create page."""

    today = today or date.today()
    return RPSAggregate(
        form=RPSFormData(
            tahun_ajaran=tahun_ajaran,
            semester_type=SemesterType.GANJIL,
            tanggal_penyusunan=today.isoformat(),
            metode_pembelajaran=list(DEFAULT_METODE_PEMBELAJARAN),
            media_pembelajaran=list(DEFAULT_MEDIA_PEMBELAJARAN),
        ),
        cpmk=[CourseOutcome(kode="CPMK-01")],
        bahan_bacaan=[BibliographyEntry(tahun=today.year, is_wajib=True, urutan=1)],
    )
