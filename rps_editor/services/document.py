"""Flat data for the printable RPS template.

Pure transform: the aggregate, the CPL list and the optional course record go
in, a JSON-ready dict comes out. Missing values become ``"-"`` so the template
never renders an empty cell.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from rps_editor.editor.bibliography import format_reference
from rps_editor.editor.form import semester_label
from rps_editor.editor.lookup import PLACEHOLDER, find_by_id
from rps_editor.schemas.rps import (
    LearningOutcome,
    MataKuliah,
    RPSAggregate,
    SubOutcome,
)

BULAN = [
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
]


def format_tanggal(value: str) -> str:
    """ISO date as ``19 Oktober 2026``; anything unparseable is passed through."""

    if not value:
        return PLACEHOLDER
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{parsed.day} {BULAN[parsed.month - 1]} {parsed.year}"


def _sub_cpmk_label(sub: Optional[SubOutcome]) -> str:
    return f"{sub.kode}: {sub.deskripsi}" if sub else PLACEHOLDER


def build_document_data(
    aggregate: RPSAggregate,
    cpl_list: Sequence[LearningOutcome],
    mata_kuliah: Optional[MataKuliah] = None,
    perguruan_tinggi: str = "",
) -> Dict[str, Any]:
    form = aggregate.form
    sub_cpmk = [sub for cpmk in aggregate.cpmk for sub in cpmk.sub_cpmk]

    assigned_ids = {cpl_id for cpmk in aggregate.cpmk for cpl_id in cpmk.cpl_ids}
    assigned_cpl = [cpl for cpl in cpl_list if cpl.id in assigned_ids]

    cpmk_list = []
    for cpmk in aggregate.cpmk:
        codes = [cpl.kode for cpl in (find_by_id(cpl_list, i) for i in cpmk.cpl_ids) if cpl]
        cpmk_list.append(
            {
                "kode": cpmk.kode,
                "deskripsi": cpmk.deskripsi,
                "cpl_codes": ", ".join(codes) or PLACEHOLDER,
            }
        )

    sub_cpmk_list = []
    korelasi_matrix = []
    for position, cpmk in enumerate(aggregate.cpmk):
        for sub in cpmk.sub_cpmk:
            sub_cpmk_list.append(
                {"kode": sub.kode, "deskripsi": sub.deskripsi, "cpmk_kode": cpmk.kode}
            )
            korelasi_matrix.append(
                {
                    "sub_cpmk_kode": sub.kode,
                    "cpmk_correlations": [
                        "v" if i == position else "" for i in range(len(aggregate.cpmk))
                    ],
                }
            )

    topics: List[str] = []
    for entry in aggregate.rencana_pembelajaran:
        topic = entry.topik.strip()
        if topic and topic not in topics:
            topics.append(topic)

    rencana_pembelajaran = []
    for entry in aggregate.rencana_pembelajaran:
        topik_materi = entry.topik
        if entry.sub_topik:
            topik_materi += "\n" + "\n".join(entry.sub_topik)
        rencana_pembelajaran.append(
            {
                "minggu": str(entry.minggu_ke),
                "sub_cpmk": _sub_cpmk_label(find_by_id(sub_cpmk, entry.sub_cpmk_id)),
                "indikator": entry.teknik_kriteria or PLACEHOLDER,
                "topik_materi": topik_materi,
                "metode_pembelajaran": entry.metode_pembelajaran or PLACEHOLDER,
                "waktu": f"{entry.waktu_menit} menit",
                "teknik_kriteria": entry.teknik_kriteria or PLACEHOLDER,
                "bobot": entry.bobot_persen or 0,
            }
        )

    rencana_tugas = [
        {
            "nomor": task.nomor_tugas,
            "judul": task.judul,
            "sub_cpmk": _sub_cpmk_label(find_by_id(sub_cpmk, task.sub_cpmk_id)),
            "indikator": task.indikator_keberhasilan or PLACEHOLDER,
            "batas_waktu": (
                f"Minggu ke-{task.batas_waktu_minggu}" if task.batas_waktu_minggu else PLACEHOLDER
            ),
            "petunjuk": task.petunjuk_pengerjaan or PLACEHOLDER,
            "luaran": task.luaran_tugas or PLACEHOLDER,
            "kriteria": task.kriteria_penilaian or PLACEHOLDER,
            "teknik_penilaian": task.teknik_penilaian or PLACEHOLDER,
            "bobot": task.bobot or 0,
            "daftar_rujukan": task.daftar_rujukan or PLACEHOLDER,
        }
        for task in aggregate.rencana_tugas
    ]

    return {
        "perguruan_tinggi": perguruan_tinggi or PLACEHOLDER,
        "fakultas": form.fakultas or "Fakultas",
        "program_studi": form.program_studi or "Program Studi",
        "nama_mata_kuliah": mata_kuliah.nama if mata_kuliah and mata_kuliah.nama else PLACEHOLDER,
        "kode_mk": mata_kuliah.kode if mata_kuliah and mata_kuliah.kode else PLACEHOLDER,
        "rumpun_mk": PLACEHOLDER,
        "sks_teori": mata_kuliah.sks if mata_kuliah else 0,
        "sks_praktikum": 0,
        "semester": semester_label(form),
        "tanggal_penyusunan": format_tanggal(form.tanggal_penyusunan),
        "penyusun_nama": form.penyusun_nama or PLACEHOLDER,
        "penyusun_nidn": form.penyusun_nidn or PLACEHOLDER,
        "koordinator_rmk_nama": form.koordinator_rmk_nama or PLACEHOLDER,
        "koordinator_rmk_nidn": form.koordinator_rmk_nidn or PLACEHOLDER,
        "kaprodi_nama": form.kaprodi_nama or PLACEHOLDER,
        "kaprodi_nidn": form.kaprodi_nidn or PLACEHOLDER,
        "deskripsi_mk": form.deskripsi_mk or PLACEHOLDER,
        "capaian_pembelajaran": form.capaian_pembelajaran or PLACEHOLDER,
        "cpl_list": [{"kode": cpl.kode, "deskripsi": cpl.deskripsi} for cpl in assigned_cpl],
        "cpmk_list": cpmk_list,
        "sub_cpmk_list": sub_cpmk_list,
        "korelasi_matrix": korelasi_matrix,
        "topik_list": [{"nomor": i, "topik": topic} for i, topic in enumerate(topics, start=1)],
        "referensi_list": [
            {"nomor": i, "referensi": format_reference(entry), "is_wajib": entry.is_wajib}
            for i, entry in enumerate(aggregate.bahan_bacaan, start=1)
        ],
        "dosen_nama": form.penyusun_nama or PLACEHOLDER,
        "mata_kuliah_prasyarat": (
            ", ".join(mata_kuliah.prasyarat) if mata_kuliah and mata_kuliah.prasyarat else PLACEHOLDER
        ),
        "rencana_pembelajaran": rencana_pembelajaran,
        "rencana_tugas": rencana_tugas,
        "metode_pembelajaran": list(form.metode_pembelajaran),
        "media_pembelajaran": list(form.media_pembelajaran),
    }
