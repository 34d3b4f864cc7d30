"""Task (rencana tugas) editor."""

from typing import Any, Dict, List

from rps_editor.editor.base import CollectionEditor
from rps_editor.editor.fields import ORDINAL, PERCENT, week_rule
from rps_editor.editor.lookup import PLACEHOLDER, find_by_id
from rps_editor.models.enums import JENIS_TUGAS_LABELS, JenisTugas
from rps_editor.schemas.rps import TaskAssignment

DEFAULT_BATAS_WAKTU_MINGGU = 4
DEFAULT_TEKNIK_PENILAIAN = "Rubrik"
DEFAULT_BOBOT = 10


class TaskEditor(CollectionEditor[TaskAssignment]):
    name = "rencana_tugas"
    entry_type = TaskAssignment
    weight_field = "bobot"
    int_fields = {
        "nomor_tugas": ORDINAL,
        "batas_waktu_minggu": week_rule(),
        "bobot": PERCENT,
    }
    enum_fields = {"jenis_tugas": JenisTugas}

    @property
    def entries(self) -> List[TaskAssignment]:
        return self.state.rencana_tugas

    def _commit(self, entries: List[TaskAssignment]) -> None:
        self.state.set_rencana_tugas(entries)

    def new_entry(self) -> TaskAssignment:
        return TaskAssignment(
            nomor_tugas=len(self.entries) + 1,
            judul="",
            sub_cpmk_id="",
            batas_waktu_minggu=DEFAULT_BATAS_WAKTU_MINGGU,
            jenis_tugas=JenisTugas.INDIVIDU,
            teknik_penilaian=DEFAULT_TEKNIK_PENILAIAN,
            bobot=DEFAULT_BOBOT,
        )

    def _parent_codes(self, sub_cpmk_id: str) -> tuple[str, str]:
        """(Sub-CPMK code, owning CPMK code) for a task's reference."""

        for cpmk in self.state.cpmk:
            sub = find_by_id(cpmk.sub_cpmk, sub_cpmk_id)
            if sub is not None:
                return sub.kode or PLACEHOLDER, cpmk.kode or PLACEHOLDER
        return PLACEHOLDER, PLACEHOLDER

    def render_view(self) -> List[Dict[str, Any]]:
        ordered = sorted(self.entries, key=lambda entry: entry.nomor_tugas)
        cards = []
        for task in ordered:
            sub_kode, cpmk_kode = self._parent_codes(task.sub_cpmk_id)
            cards.append(
                {
                    "id": task.id,
                    "nomor_tugas": task.nomor_tugas,
                    "judul": task.judul or PLACEHOLDER,
                    "sub_cpmk": sub_kode,
                    "cpmk": cpmk_kode,
                    "jenis_tugas": JENIS_TUGAS_LABELS[task.jenis_tugas],
                    "batas_waktu": (
                        f"Minggu ke-{task.batas_waktu_minggu}"
                        if task.batas_waktu_minggu
                        else PLACEHOLDER
                    ),
                    "indikator_keberhasilan": task.indikator_keberhasilan or PLACEHOLDER,
                    "petunjuk_pengerjaan": task.petunjuk_pengerjaan or PLACEHOLDER,
                    "luaran_tugas": task.luaran_tugas or PLACEHOLDER,
                    "kriteria_penilaian": task.kriteria_penilaian or PLACEHOLDER,
                    "teknik_penilaian": task.teknik_penilaian or PLACEHOLDER,
                    "bobot": task.bobot,
                    "daftar_rujukan": task.daftar_rujukan or PLACEHOLDER,
                }
            )
        return cards
