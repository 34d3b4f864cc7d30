from rps_editor.editor import RPSEditor
from rps_editor.schemas.rps import RPSAggregate, new_aggregate


def test_add_numbers_within_parent_group(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.sub_cpmk.add(1)

    group = editor.sub_cpmk.group(1)
    assert [s.kode for s in group] == ["Sub-CPMK-01", "Sub-CPMK-02"]
    assert group[-1].urutan == 2
    assert group[-1].cpmk_id == "cpmk-2"
    assert group[-1].is_new


def test_add_under_new_cpmk_has_empty_parent_id() -> None:
    editor = RPSEditor(new_aggregate("2024/2025"))
    editor.sub_cpmk.add(0)

    assert editor.sub_cpmk.group(0)[0].cpmk_id == ""
    assert editor.sub_cpmk.count() == 1


def test_add_to_missing_cpmk_is_noop(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    before = editor.snapshot()
    editor.sub_cpmk.add(9)

    assert editor.snapshot() == before


def test_update_and_remove(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.sub_cpmk.update(0, 1, "deskripsi", "Menjelaskan queue prioritas")
    editor.sub_cpmk.update(0, 1, "urutan", "abc")

    sub = editor.sub_cpmk.group(0)[1]
    assert sub.deskripsi == "Menjelaskan queue prioritas"
    assert sub.urutan == 1

    editor.sub_cpmk.remove(0, 0)
    assert [s.id for s in editor.sub_cpmk.group(0)] == ["sub-2"]

    before = editor.snapshot()
    editor.sub_cpmk.remove(0, 5)
    editor.sub_cpmk.update(3, 0, "deskripsi", "ignored")
    assert editor.snapshot() == before


def test_move_reparents(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.sub_cpmk.move(0, 0, 1)

    assert [s.id for s in editor.sub_cpmk.group(0)] == ["sub-2"]
    assert [s.id for s in editor.sub_cpmk.group(1)] == ["sub-3", "sub-1"]
    assert editor.sub_cpmk.group(1)[1].cpmk_id == "cpmk-2"


def test_view_groups_sorted_by_order(aggregate: RPSAggregate) -> None:
    editor = RPSEditor(aggregate)
    editor.sub_cpmk.update(0, 0, "urutan", 5)

    groups = editor.sub_cpmk.render_view()

    assert [g["cpmk_kode"] for g in groups] == ["CPMK-01", "CPMK-02"]
    assert [s["id"] for s in groups[0]["sub_cpmk"]] == ["sub-2", "sub-1"]
