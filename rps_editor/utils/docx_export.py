"""Word rendering of the RPS document data."""

from __future__ import annotations

from io import BytesIO
from typing import Any, Dict, List, Sequence

from docx import Document as DocxDocument
from docx.document import Document

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _table(doc: Document, header: Sequence[str], rows: List[Sequence[Any]]) -> None:
    table = doc.add_table(rows=1, cols=len(header))
    table.style = "Table Grid"
    for cell, title in zip(table.rows[0].cells, header):
        cell.text = title
    for row in rows:
        cells = table.add_row().cells
        for cell, value in zip(cells, row):
            cell.text = str(value)


def _field_lines(doc: Document, fields: Sequence[tuple[str, Any]]) -> None:
    for label, value in fields:
        paragraph = doc.add_paragraph()
        paragraph.add_run(f"{label}: ").bold = True
        paragraph.add_run(str(value))


def render_rps_docx(data: Dict[str, Any]) -> bytes:
    """Build the RPS as a ``.docx`` from ``build_document_data`` output."""

    doc = DocxDocument()
    doc.add_heading("RENCANA PEMBELAJARAN SEMESTER", level=0)
    doc.add_paragraph(
        f"{data['perguruan_tinggi']}\n{data['fakultas']}\n{data['program_studi']}"
    )

    _field_lines(
        doc,
        [
            ("Mata Kuliah", data["nama_mata_kuliah"]),
            ("Kode MK", data["kode_mk"]),
            ("Rumpun MK", data["rumpun_mk"]),
            ("SKS", f"T={data['sks_teori']} P={data['sks_praktikum']}"),
            ("Semester", data["semester"]),
            ("Tanggal Penyusunan", data["tanggal_penyusunan"]),
            ("Penyusun", f"{data['penyusun_nama']} ({data['penyusun_nidn']})"),
            (
                "Koordinator RMK",
                f"{data['koordinator_rmk_nama']} ({data['koordinator_rmk_nidn']})",
            ),
            ("Ketua Program Studi", f"{data['kaprodi_nama']} ({data['kaprodi_nidn']})"),
        ],
    )

    doc.add_heading("Capaian Pembelajaran Lulusan (CPL)", level=1)
    _table(doc, ["Kode", "Deskripsi"], [(c["kode"], c["deskripsi"]) for c in data["cpl_list"]])

    doc.add_heading("Capaian Pembelajaran Mata Kuliah (CPMK)", level=1)
    _table(
        doc,
        ["Kode", "Deskripsi", "CPL"],
        [(c["kode"], c["deskripsi"], c["cpl_codes"]) for c in data["cpmk_list"]],
    )

    doc.add_heading("Sub-CPMK", level=1)
    _table(
        doc,
        ["Kode", "Deskripsi", "CPMK"],
        [(s["kode"], s["deskripsi"], s["cpmk_kode"]) for s in data["sub_cpmk_list"]],
    )

    if data["korelasi_matrix"]:
        doc.add_heading("Korelasi Sub-CPMK terhadap CPMK", level=2)
        cpmk_codes = [c["kode"] for c in data["cpmk_list"]]
        _table(
            doc,
            ["Sub-CPMK", *cpmk_codes],
            [(row["sub_cpmk_kode"], *row["cpmk_correlations"]) for row in data["korelasi_matrix"]],
        )

    doc.add_heading("Deskripsi Singkat Mata Kuliah", level=1)
    doc.add_paragraph(data["deskripsi_mk"])

    doc.add_heading("Bahan Kajian / Materi Pembelajaran", level=1)
    for topic in data["topik_list"]:
        doc.add_paragraph(f"{topic['nomor']}. {topic['topik']}")

    doc.add_heading("Pustaka", level=1)
    for reference in data["referensi_list"]:
        kind = "Utama" if reference["is_wajib"] else "Pendukung"
        doc.add_paragraph(f"{reference['nomor']}. {reference['referensi']} ({kind})")

    _field_lines(
        doc,
        [
            ("Dosen Pengampu", data["dosen_nama"]),
            ("Mata Kuliah Prasyarat", data["mata_kuliah_prasyarat"]),
            ("Metode Pembelajaran", ", ".join(data["metode_pembelajaran"]) or "-"),
            ("Media Pembelajaran", ", ".join(data["media_pembelajaran"]) or "-"),
        ],
    )

    doc.add_heading("Rencana Pembelajaran Mingguan", level=1)
    _table(
        doc,
        ["Minggu", "Sub-CPMK", "Indikator", "Materi", "Metode", "Waktu", "Bobot (%)"],
        [
            (
                row["minggu"],
                row["sub_cpmk"],
                row["indikator"],
                row["topik_materi"],
                row["metode_pembelajaran"],
                row["waktu"],
                row["bobot"],
            )
            for row in data["rencana_pembelajaran"]
        ],
    )

    doc.add_heading("Rencana Tugas", level=1)
    for task in data["rencana_tugas"]:
        doc.add_heading(f"Tugas {task['nomor']}: {task['judul']}", level=2)
        _field_lines(
            doc,
            [
                ("Sub-CPMK", task["sub_cpmk"]),
                ("Indikator", task["indikator"]),
                ("Batas Waktu", task["batas_waktu"]),
                ("Petunjuk Pengerjaan", task["petunjuk"]),
                ("Luaran Tugas", task["luaran"]),
                ("Kriteria Penilaian", task["kriteria"]),
                ("Teknik Penilaian", task["teknik_penilaian"]),
                ("Bobot (%)", task["bobot"]),
                ("Daftar Rujukan", task["daftar_rujukan"]),
            ],
        )

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
