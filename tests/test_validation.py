from rps_editor.editor import EditorState
from rps_editor.models.enums import RPSTab
from rps_editor.schemas.cpl import CPLForm
from rps_editor.schemas.rps import AchievementAnalysis, BibliographyEntry, RPSAggregate, new_aggregate
from rps_editor.services.validation import (
    next_tab,
    previous_tab,
    validate_cpl_form,
    validate_full,
    validate_step,
    validate_through,
)


def _cpl(kode: str = "CPL-01", nama: str = "Sikap", deskripsi: str = "Bertakwa kepada Tuhan") -> dict:
    return {"kode": kode, "nama": nama, "deskripsi": deskripsi}


def test_valid_cpl_form() -> None:
    assert validate_cpl_form(_cpl()) == {}
    assert validate_cpl_form(CPLForm(**_cpl(deskripsi="abcdefghij"))) == {}


def test_cpl_form_required_fields() -> None:
    errors = validate_cpl_form(_cpl(kode="  ", nama="", deskripsi=""))

    assert errors == {
        "kode": "Kode CPL wajib diisi",
        "nama": "Nama CPL wajib diisi",
        "deskripsi": "Deskripsi CPL wajib diisi",
    }


def test_cpl_form_minimum_lengths() -> None:
    errors = validate_cpl_form(_cpl(kode="A", nama="ab", deskripsi="pendek"))

    assert errors["kode"] == "Kode CPL minimal 2 karakter"
    assert errors["nama"] == "Nama CPL minimal 3 karakter"
    assert errors["deskripsi"] == "Deskripsi CPL minimal 10 karakter"


def test_cpl_form_rejects_filler_text() -> None:
    errors = validate_cpl_form(_cpl(kode="---", deskripsi="----------"))

    assert errors["kode"] == "Kode CPL tidak valid"
    assert errors["deskripsi"] == "Deskripsi CPL tidak valid"


def test_cpl_code_character_set() -> None:
    errors = validate_cpl_form(_cpl(kode="CPL 01"))

    assert errors == {"kode": "Kode CPL hanya boleh berisi huruf, angka, dan tanda hubung"}


def test_info_step_requires_course_year_and_description() -> None:
    aggregate = new_aggregate("")
    messages = validate_step(EditorState(aggregate), RPSTab.INFO)

    assert messages == [
        "Pilih mata kuliah",
        "Tahun ajaran wajib diisi",
        "Deskripsi mata kuliah wajib diisi",
    ]


def test_cpmk_step(aggregate: RPSAggregate) -> None:
    empty = aggregate.model_copy(update={"cpmk": []})
    assert validate_step(EditorState(empty), RPSTab.CPMK) == ["Minimal harus ada 1 CPMK"]

    blank = new_aggregate("2024/2025")
    assert validate_step(EditorState(blank), RPSTab.CPMK) == ["1 CPMK belum memiliki deskripsi"]

    assert validate_step(EditorState(aggregate), RPSTab.CPMK) == []


def test_optional_steps_always_pass() -> None:
    state = EditorState(new_aggregate("2024/2025"))

    assert validate_step(state, RPSTab.SUBCPMK) == []
    assert validate_step(state, RPSTab.TUGAS) == []


def test_rencana_step_needs_a_topic() -> None:
    state = EditorState(new_aggregate("2024/2025"))

    assert validate_step(state, RPSTab.RENCANA) == [
        "Minimal harus ada 1 rencana pembelajaran dengan topik"
    ]


def test_analisis_step_reports_reversed_ranges(aggregate: RPSAggregate) -> None:
    aggregate.analisis_ketercapaian.append(AchievementAnalysis(minggu_mulai=9, minggu_selesai=3))
    aggregate.analisis_ketercapaian.append(AchievementAnalysis(minggu_mulai=9))

    messages = validate_step(EditorState(aggregate), RPSTab.ANALISIS)

    assert messages == ["1 analisis memiliki minggu mulai setelah minggu selesai"]


def test_pustaka_step_needs_author_for_titled_entries(aggregate: RPSAggregate) -> None:
    aggregate.bahan_bacaan.append(BibliographyEntry(judul="Tanpa Penulis"))
    aggregate.bahan_bacaan.append(BibliographyEntry())

    messages = validate_step(EditorState(aggregate), RPSTab.PUSTAKA)

    assert messages == ["1 bahan bacaan belum lengkap (perlu penulis)"]


def test_full_validation_passes_for_complete_rps(aggregate: RPSAggregate) -> None:
    assert validate_full(EditorState(aggregate)) == {}


def test_full_validation_requires_cpl_mapping(aggregate: RPSAggregate) -> None:
    aggregate.cpmk[1].cpl_ids = []

    errors = validate_full(EditorState(aggregate))

    assert errors == {"cpmk": ["Semua CPMK harus dipetakan ke minimal 1 CPL"]}


def test_full_validation_collects_every_tab() -> None:
    errors = validate_full(EditorState(new_aggregate("2024/2025")))

    assert set(errors) == {"info", "cpmk", "rencana"}
    assert "Semua CPMK harus dipetakan ke minimal 1 CPL" in errors["cpmk"]


def test_validate_through_stops_at_tab() -> None:
    aggregate = new_aggregate("2024/2025")
    aggregate.form.mata_kuliah_id = "mk-1"
    aggregate.form.deskripsi_mk = "Deskripsi"
    aggregate.cpmk[0].deskripsi = "Menjelaskan konsep"
    state = EditorState(aggregate)

    assert validate_through(state, RPSTab.SUBCPMK) == {}
    assert set(validate_through(state, RPSTab.PUSTAKA)) == {"rencana"}


def test_tab_order_helpers() -> None:
    assert next_tab(RPSTab.INFO) == RPSTab.CPMK
    assert next_tab(RPSTab.PUSTAKA) is None
    assert previous_tab(RPSTab.INFO) is None
    assert previous_tab(RPSTab.TUGAS) == RPSTab.RENCANA
