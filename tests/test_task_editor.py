import pytest

from rps_editor.editor import RPSEditor
from rps_editor.models.enums import JenisTugas
from rps_editor.schemas.rps import RPSAggregate


def test_add_uses_task_defaults(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.rencana_tugas.add()

    task = editor.state.rencana_tugas[-1]
    assert task.nomor_tugas == 2
    assert task.batas_waktu_minggu == 4
    assert task.jenis_tugas == JenisTugas.INDIVIDU
    assert task.teknik_penilaian == "Rubrik"
    assert task.bobot == 10
    assert editor.rencana_tugas.total_weight() == 30


def test_update_coerces_fields(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.rencana_tugas.update(0, "jenis_tugas", "kelompok")
    editor.rencana_tugas.update(0, "batas_waktu_minggu", "0")
    editor.rencana_tugas.update(0, "bobot", "101")

    task = editor.state.rencana_tugas[0]
    assert task.jenis_tugas == JenisTugas.KELOMPOK
    assert task.batas_waktu_minggu == 1
    assert task.bobot == 100


def test_unknown_task_type_is_rejected(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    with pytest.raises(ValueError):
        editor.rencana_tugas.update(0, "jenis_tugas", "tim")


def test_view_resolves_parent_codes(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.rencana_tugas.add()

    first, second = editor.rencana_tugas.render_view()

    assert first["sub_cpmk"] == "Sub-CPMK-02"
    assert first["cpmk"] == "CPMK-01"
    assert first["jenis_tugas"] == "Individu"
    assert first["batas_waktu"] == "Minggu ke-4"
    assert first["daftar_rujukan"] == "-"
    assert second["sub_cpmk"] == "-"
    assert second["cpmk"] == "-"
