from io import BytesIO

from docx import Document

from rps_editor.schemas.rps import MataKuliah, RPSAggregate, new_aggregate
from rps_editor.services.document import build_document_data
from rps_editor.utils.docx_export import render_rps_docx


def _read(content: bytes):
    return Document(BytesIO(content))


def test_docx_contains_header_and_outcomes(aggregate: RPSAggregate, cpl_list) -> None:
    course = MataKuliah(id="mk-7", kode="IF201", nama="Struktur Data", sks=3)
    data = build_document_data(aggregate, cpl_list, course, perguruan_tinggi="Universitas XYZ")

    doc = _read(render_rps_docx(data))

    text = "\n".join(p.text for p in doc.paragraphs)
    assert "RENCANA PEMBELAJARAN SEMESTER" in text
    assert "Universitas XYZ" in text
    assert "Mata Kuliah: Struktur Data" in text
    assert "Batas Waktu: Minggu ke-4" in text
    assert "1. Cormen. Introduction to Algorithms (2009). MIT Press (Utama)" in text

    cpl_table = doc.tables[0]
    assert [cell.text for cell in cpl_table.rows[0].cells] == ["Kode", "Deskripsi"]
    assert len(cpl_table.rows) == 4


def test_correlation_table_has_one_column_per_cpmk(aggregate: RPSAggregate, cpl_list) -> None:
    doc = _read(render_rps_docx(build_document_data(aggregate, cpl_list)))

    korelasi = doc.tables[3]
    assert [cell.text for cell in korelasi.rows[0].cells] == ["Sub-CPMK", "CPMK-01", "CPMK-02"]
    assert [cell.text for cell in korelasi.rows[3].cells] == ["Sub-CPMK-01", "", "v"]


def test_blank_rps_renders() -> None:
    doc = _read(render_rps_docx(build_document_data(new_aggregate("2024/2025"), [])))

    text = "\n".join(p.text for p in doc.paragraphs)
    assert "Semester: Ganjil 2024/2025" in text
    # CPL, CPMK, Sub-CPMK and weekly plan tables; no correlation matrix
    assert len(doc.tables) == 4
