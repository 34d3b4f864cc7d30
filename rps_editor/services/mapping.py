"""Mapping between the curriculum API's RPS documents and ``RPSAggregate``.

The API has gone through a few payload revisions, so hydration accepts the
older field names (``tahun_akademik``, ``pertemuan``, ``bobot_nilai`` ...) and
both Sub-CPMK layouts: nested under each CPMK, or a top-level list that is
either flat (grouped by ``cpmk_id``) or parallel to the CPMK list.
Serialisation always produces the current, nested layout.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from rps_editor.editor.analysis import AnalysisEditor
from rps_editor.editor.bibliography import BibliographyEditor
from rps_editor.editor.cpmk import CourseOutcomeEditor
from rps_editor.editor.fields import parse_int
from rps_editor.editor.form import FormEditor
from rps_editor.editor.sub_cpmk import SubOutcomeEditor
from rps_editor.editor.tasks import TaskEditor
from rps_editor.editor.weekly_plan import WeeklyPlanEditor
from rps_editor.models.enums import JenisBahan
from rps_editor.schemas.rps import (
    CourseOutcome,
    DraftEntry,
    LearningOutcome,
    MataKuliah,
    RPSAggregate,
    SubOutcome,
)

logger = logging.getLogger(__name__)

FORM_ALIASES = {
    "tahun_ajaran": "tahun_akademik",
    "deskripsi_mk": "deskripsi",
    "metode_pembelajaran": "metode",
}
WEEKLY_PLAN_ALIASES = {
    "minggu_ke": "pertemuan",
    "topik": "materi",
    "metode_pembelajaran": "metode",
    "waktu_menit": "waktu",
    "teknik_kriteria": "kriteria_penilaian",
    "bobot_persen": "bobot_nilai",
}
# Older API revisions split bibliography by kind instead of a flag
LEGACY_BAHAN_KIND = {"utama": True, "pendukung": False}


def unwrap(payload: Any) -> Any:
    """Strip the ``{success, message, data}`` response envelope if present."""

    if isinstance(payload, Mapping) and "data" in payload and (
        "success" in payload or "message" in payload
    ):
        return payload["data"]
    return payload


def _id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _with_aliases(raw: Mapping[str, Any], aliases: Mapping[str, str]) -> Dict[str, Any]:
    data = dict(raw)
    for field, legacy in aliases.items():
        if data.get(field) is None and data.get(legacy) is not None:
            data[field] = data[legacy]
    return data


def _records(value: Any) -> List[Mapping[str, Any]]:
    return [item for item in value or [] if isinstance(item, Mapping)]


def _hydrate_sub_cpmk(raw: Mapping[str, Any], parent_id: Optional[str]) -> SubOutcome:
    return SubOutcomeEditor.build(
        raw, id=_id(raw.get("id")), cpmk_id=parent_id or _id(raw.get("cpmk_id")) or ""
    )


def _sub_cpmk_groups(
    document: Mapping[str, Any], cpmk_rows: List[Mapping[str, Any]]
) -> List[List[Mapping[str, Any]]]:
    """Raw Sub-CPMK rows for each CPMK position, whatever the source layout."""

    nested = [_records(row.get("sub_cpmk")) for row in cpmk_rows]
    top_level = document.get("sub_cpmk") or []
    if not top_level or any(nested):
        return nested

    if all(isinstance(group, list) for group in top_level):
        # parallel layout: position i belongs to CPMK i
        groups = [_records(group) for group in top_level[: len(cpmk_rows)]]
        return groups + [[] for _ in range(len(cpmk_rows) - len(groups))]

    positions = {_id(row.get("id")): i for i, row in enumerate(cpmk_rows) if row.get("id")}
    groups: List[List[Mapping[str, Any]]] = [[] for _ in cpmk_rows]
    for row in _records(top_level):
        position = positions.get(_id(row.get("cpmk_id")))
        if position is None:
            logger.warning(
                "dropping Sub-CPMK %r: parent %r not in document",
                row.get("kode"),
                row.get("cpmk_id"),
            )
            continue
        groups[position].append(row)
    return groups


def _hydrate_cpmk(document: Mapping[str, Any]) -> List[CourseOutcome]:
    rows = _records(document.get("cpmk"))
    # keep document order for rows without an explicit position
    order = {id(row): parse_int(row.get("urutan")) or i + 1 for i, row in enumerate(rows)}
    rows = sorted(rows, key=lambda row: order[id(row)])
    outcomes = []
    for row, sub_rows in zip(rows, _sub_cpmk_groups(document, rows)):
        cpmk_id = _id(row.get("id"))
        outcomes.append(
            CourseOutcomeEditor.build(
                row,
                id=cpmk_id,
                sub_cpmk=[_hydrate_sub_cpmk(sub, cpmk_id) for sub in sub_rows],
            )
        )
    return outcomes


def _hydrate_bibliography(raw: Mapping[str, Any]):
    data = dict(raw)
    legacy_kind = str(data.get("jenis") or "").lower()
    if legacy_kind in LEGACY_BAHAN_KIND:
        data["jenis"] = JenisBahan.BUKU.value
        if data.get("is_wajib") is None:
            data["is_wajib"] = LEGACY_BAHAN_KIND[legacy_kind]
    return BibliographyEditor.build(data, id=_id(raw.get("id")))


def hydrate(payload: Any) -> RPSAggregate:
    """Aggregate from a persisted RPS document; absent fields are defaulted."""

    document = unwrap(payload) or {}
    if not isinstance(document, Mapping):
        raise ValueError(f"RPS document must be an object, got {type(document).__name__}")

    form_data = _with_aliases(document, FORM_ALIASES)
    if form_data.get("mata_kuliah_id") is None and isinstance(document.get("mata_kuliah"), Mapping):
        form_data["mata_kuliah_id"] = document["mata_kuliah"].get("id")

    return RPSAggregate(
        id=_id(document.get("id")),
        form=FormEditor.build(form_data),
        cpmk=_hydrate_cpmk(document),
        rencana_pembelajaran=[
            WeeklyPlanEditor.build(_with_aliases(row, WEEKLY_PLAN_ALIASES), id=_id(row.get("id")))
            for row in _records(document.get("rencana_pembelajaran"))
        ],
        rencana_tugas=[
            TaskEditor.build(row, id=_id(row.get("id")))
            for row in _records(document.get("rencana_tugas"))
        ],
        analisis_ketercapaian=[
            AnalysisEditor.build(row, id=_id(row.get("id")))
            for row in _records(document.get("analisis_ketercapaian"))
        ],
        bahan_bacaan=[_hydrate_bibliography(row) for row in _records(document.get("bahan_bacaan"))],
    )


def hydrate_cpl_list(payload: Any) -> List[LearningOutcome]:
    """CPL list from ``/cpl/active``; paginated bodies are unwrapped too."""

    rows = unwrap(payload)
    if isinstance(rows, Mapping):
        rows = rows.get("data") or rows.get("items") or []
    return [
        LearningOutcome(
            id=str(row["id"]),
            kode=str(row.get("kode") or ""),
            nama=str(row.get("nama") or ""),
            deskripsi=str(row.get("deskripsi") or ""),
        )
        for row in _records(rows)
        if row.get("id") is not None
    ]


def hydrate_mata_kuliah(payload: Any) -> Optional[MataKuliah]:
    """Course record embedded in an RPS document, if the API sent one."""

    document = unwrap(payload) or {}
    if not isinstance(document, Mapping):
        return None
    course = document.get("mata_kuliah")
    if isinstance(course, Mapping) and course.get("id") is not None:
        return MataKuliah.model_validate({**course, "id": str(course["id"])})
    if document.get("mata_kuliah_id") is None:
        return None
    # flattened RPS list shape
    return MataKuliah(
        id=str(document["mata_kuliah_id"]),
        kode=str(document.get("kode_mk") or ""),
        nama=str(document.get("mata_kuliah_nama") or ""),
        sks=int(document.get("sks") or 0),
        semester=int(document.get("semester") or 0),
    )


def _dump(entry: DraftEntry, exclude: Iterable[str] = ()) -> Dict[str, Any]:
    data = entry.model_dump(mode="json", exclude=set(exclude))
    if entry.id is None:
        data.pop("id", None)
    return data


def serialize(aggregate: RPSAggregate) -> Dict[str, Any]:
    """Create/update request body for the whole aggregate.

    Persisted entries keep their ``id``; new entries omit it so the API
    assigns one. CPMK order is sent as ``urutan``.
    """

    body: Dict[str, Any] = aggregate.form.model_dump(mode="json")
    if aggregate.id is not None:
        body["id"] = aggregate.id

    cpmk_rows = []
    for position, cpmk in enumerate(aggregate.cpmk, start=1):
        row = _dump(cpmk, exclude={"sub_cpmk"})
        row["urutan"] = position
        row["sub_cpmk"] = []
        for sub in cpmk.sub_cpmk:
            sub_row = _dump(sub)
            if not sub_row.get("cpmk_id"):
                sub_row.pop("cpmk_id", None)
            row["sub_cpmk"].append(sub_row)
        cpmk_rows.append(row)
    body["cpmk"] = cpmk_rows

    body["rencana_pembelajaran"] = [_dump(entry) for entry in aggregate.rencana_pembelajaran]
    body["rencana_tugas"] = [_dump(entry) for entry in aggregate.rencana_tugas]
    body["analisis_ketercapaian"] = [_dump(entry) for entry in aggregate.analisis_ketercapaian]
    body["bahan_bacaan"] = [_dump(entry) for entry in aggregate.bahan_bacaan]
    return body
