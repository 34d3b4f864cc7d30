import random

import pytest

from rps_editor.editor import RPSEditor, UnknownFieldError
from rps_editor.schemas.rps import RPSAggregate, new_aggregate


def _editor(**kwargs) -> RPSEditor:
    return RPSEditor(new_aggregate("2024/2025"), **kwargs)


def test_add_assigns_sequential_code_and_empty_group() -> None:
    editor = _editor()
    editor.cpmk.add()
    editor.cpmk.add()

    assert [c.kode for c in editor.state.cpmk] == ["CPMK-01", "CPMK-02", "CPMK-03"]
    assert all(c.is_new for c in editor.state.cpmk)
    assert editor.state.sub_cpmk == [[], [], []]


def test_sub_cpmk_groups_follow_cpmk_add_and_remove() -> None:
    editor = _editor()
    rng = random.Random(7)
    for _ in range(200):
        if rng.random() < 0.55:
            editor.cpmk.add()
            editor.sub_cpmk.add(len(editor.state.cpmk) - 1)
        else:
            editor.cpmk.remove(rng.randrange(-1, len(editor.state.cpmk) + 1))
        assert len(editor.state.sub_cpmk) == len(editor.state.cpmk)
        assert len(editor.state.cpmk) >= 1


def test_removing_cpmk_drops_its_sub_cpmk(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.cpmk.remove(0)

    assert [c.kode for c in editor.state.cpmk] == ["CPMK-02"]
    assert [[s.id for s in group] for group in editor.state.sub_cpmk] == [["sub-3"]]


def test_last_cpmk_cannot_be_removed() -> None:
    editor = _editor()
    editor.cpmk.remove(0)

    assert len(editor.state.cpmk) == 1


def test_toggle_cpl_reference(cpl_list) -> None:
    editor = _editor(cpl_list=cpl_list)
    editor.cpmk.toggle_reference(0, "cpl-2")
    editor.cpmk.toggle_reference(0, "cpl-1")
    assert editor.state.cpmk[0].cpl_ids == ["cpl-2", "cpl-1"]

    editor.cpmk.toggle_reference(0, "cpl-2")
    assert editor.state.cpmk[0].cpl_ids == ["cpl-1"]


def test_update_description_and_out_of_range_is_noop() -> None:
    editor = _editor()
    editor.cpmk.update(0, "deskripsi", "Mampu menganalisis algoritma")
    before = editor.snapshot()

    editor.cpmk.update(5, "deskripsi", "ignored")
    editor.cpmk.update(-1, "deskripsi", "ignored")

    assert editor.state.cpmk[0].deskripsi == "Mampu menganalisis algoritma"
    assert editor.snapshot() == before


def test_managed_fields_are_not_editable() -> None:
    editor = _editor()
    with pytest.raises(UnknownFieldError):
        editor.cpmk.update(0, "sub_cpmk", [])
    with pytest.raises(UnknownFieldError):
        editor.cpmk.update(0, "id", "cpmk-9")
    with pytest.raises(UnknownFieldError):
        editor.cpmk.update(0, "bobot", 10)


def test_read_only_editor_does_not_change(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate, read_only=True)
    before = editor.snapshot()

    editor.cpmk.add()
    editor.cpmk.remove(0)
    editor.cpmk.update(0, "deskripsi", "x")
    editor.cpmk.toggle_reference(0, "cpl-3")

    assert editor.snapshot() == before


def test_view_resolves_cpl_codes_with_placeholder(aggregate: RPSAggregate, cpl_list) -> None:
    editor = RPSEditor(aggregate, cpl_list)
    editor.cpmk.toggle_reference(1, "cpl-missing")

    cards = editor.cpmk.render_view()

    assert cards[0]["cpl"] == ["CPL-01", "CPL-02"]
    assert cards[0]["jumlah_sub_cpmk"] == 2
    assert cards[1]["cpl"] == ["CPL-03", "-"]


def test_editor_works_on_a_copy(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.cpmk.update(0, "deskripsi", "Baru")

    assert aggregate.cpmk[0].deskripsi == "Menjelaskan konsep struktur data"
