import itertools
import json
import os
from typing import Any, Dict, List, Optional, Tuple

os.environ.setdefault("RPS_DATABASE_URL", "sqlite:///:memory:")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rps_editor.db import Base
from rps_editor.dependencies import get_db, get_rps_api
from rps_editor.main import app
from rps_editor.schemas.rps import LearningOutcome
from rps_editor.services.mapping import hydrate
from rps_editor.services.rps_api import RPSApiClient

API_BASE_URL = "http://curriculum.test/api/v1"

# Use in-memory SQLite for testing to ensure isolation
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CPL_ROWS = [
    {"id": "cpl-1", "kode": "CPL-01", "nama": "Sikap", "deskripsi": "Bertakwa kepada Tuhan YME"},
    {"id": "cpl-2", "kode": "CPL-02", "nama": "Pengetahuan", "deskripsi": "Menguasai konsep teoretis"},
    {"id": "cpl-3", "kode": "CPL-03", "nama": "Keterampilan", "deskripsi": "Mampu merancang sistem"},
]


def envelope(data: Any, message: str = "OK") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


class FakeCurriculumApi:
    """In-memory stand-in for the curriculum REST API."""

    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.cpl: List[Dict[str, Any]] = [dict(row) for row in CPL_ROWS]
        self.requests: List[httpx.Request] = []
        self.fail_next: Optional[Tuple[int, Dict[str, Any]]] = None
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def _assign_ids(self, body: Dict[str, Any], rps_id: str) -> Dict[str, Any]:
        document = dict(body, id=rps_id)
        for cpmk in document.get("cpmk", []):
            cpmk.setdefault("id", self._next_id("cpmk"))
            for sub in cpmk.get("sub_cpmk", []):
                sub.setdefault("id", self._next_id("sub"))
                sub["cpmk_id"] = cpmk["id"]
        for key, prefix in (
            ("rencana_pembelajaran", "rp"),
            ("rencana_tugas", "tugas"),
            ("analisis_ketercapaian", "analisis"),
            ("bahan_bacaan", "bb"),
        ):
            for row in document.get(key, []):
                row.setdefault("id", self._next_id(prefix))
        return document

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next is not None:
            status_code, body = self.fail_next
            self.fail_next = None
            return httpx.Response(status_code, json=body)

        path = request.url.path.removeprefix("/api/v1")
        body = json.loads(request.content) if request.content else None

        if request.method == "GET" and path == "/cpl/active":
            return httpx.Response(200, json=envelope(self.cpl))
        if request.method == "POST" and path == "/cpl":
            created = dict(body, id=self._next_id("cpl"))
            return httpx.Response(201, json=envelope(created, "CPL berhasil dibuat"))
        if request.method == "PUT" and path.startswith("/cpl/"):
            return httpx.Response(200, json=envelope(dict(body, id=path.split("/")[-1])))

        if request.method == "POST" and path == "/rps":
            document = self._assign_ids(body, self._next_id("rps"))
            self.documents[document["id"]] = document
            return httpx.Response(201, json=envelope(document, "RPS berhasil dibuat"))
        if path.startswith("/rps/"):
            rps_id = path.split("/")[-1]
            if rps_id not in self.documents:
                return httpx.Response(
                    404, json={"success": False, "message": "RPS tidak ditemukan", "data": None}
                )
            if request.method == "GET":
                return httpx.Response(200, json=envelope(self.documents[rps_id]))
            if request.method == "PUT":
                document = self._assign_ids(body, rps_id)
                self.documents[rps_id] = document
                return httpx.Response(200, json=envelope(document, "RPS berhasil diperbarui"))

        return httpx.Response(404, json={"success": False, "message": f"no route {path}"})


@pytest.fixture()
def cpl_list() -> List[LearningOutcome]:
    return [LearningOutcome.model_validate(row) for row in CPL_ROWS]


@pytest.fixture()
def fake_api() -> FakeCurriculumApi:
    return FakeCurriculumApi()


@pytest.fixture()
def api_client(fake_api: FakeCurriculumApi):
    client = RPSApiClient(API_BASE_URL, token="secret", transport=httpx.MockTransport(fake_api.handler))
    try:
        yield client
    finally:
        client.close()


@pytest.fixture(scope="function")
def session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(session, api_client):
    """
    Create a TestClient that uses the overridden database and API dependencies.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass

    def override_get_rps_api():
        yield api_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rps_api] = override_get_rps_api
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def sample_document() -> Dict[str, Any]:
    """A persisted RPS in the current API layout."""

    return {
        "id": "rps-100",
        "mata_kuliah_id": "mk-7",
        "tahun_ajaran": "2024/2025",
        "semester_type": "genap",
        "tanggal_penyusunan": "2024-02-05",
        "penyusun_nama": "Dr. Sari Wulandari",
        "penyusun_nidn": "0012345678",
        "koordinator_rmk_nama": "",
        "koordinator_rmk_nidn": "",
        "kaprodi_nama": "Ir. Bambang Santoso",
        "kaprodi_nidn": "0098765432",
        "fakultas": "Fakultas Teknik",
        "program_studi": "Informatika",
        "deskripsi_mk": "Mata kuliah ini membahas struktur data dasar.",
        "capaian_pembelajaran": "",
        "metode_pembelajaran": ["Ceramah", "Diskusi"],
        "media_pembelajaran": ["LMS"],
        "cpmk": [
            {
                "id": "cpmk-1",
                "kode": "CPMK-01",
                "deskripsi": "Menjelaskan konsep struktur data",
                "cpl_ids": ["cpl-1", "cpl-2"],
                "urutan": 1,
                "sub_cpmk": [
                    {
                        "id": "sub-1",
                        "cpmk_id": "cpmk-1",
                        "kode": "Sub-CPMK-01",
                        "deskripsi": "Menjelaskan array dan list",
                        "urutan": 1,
                    },
                    {
                        "id": "sub-2",
                        "cpmk_id": "cpmk-1",
                        "kode": "Sub-CPMK-02",
                        "deskripsi": "Menjelaskan stack dan queue",
                        "urutan": 2,
                    },
                ],
            },
            {
                "id": "cpmk-2",
                "kode": "CPMK-02",
                "deskripsi": "Mengimplementasikan pohon biner",
                "cpl_ids": ["cpl-3"],
                "urutan": 2,
                "sub_cpmk": [
                    {
                        "id": "sub-3",
                        "cpmk_id": "cpmk-2",
                        "kode": "Sub-CPMK-01",
                        "deskripsi": "Membangun BST",
                        "urutan": 1,
                    }
                ],
            },
        ],
        "rencana_pembelajaran": [
            {
                "id": "rp-1",
                "minggu_ke": 1,
                "sub_cpmk_id": "sub-1",
                "topik": "Array",
                "sub_topik": ["Deklarasi", "Traversal"],
                "metode_pembelajaran": "Tatap Muka: Ceramah, Diskusi",
                "waktu_menit": 150,
                "teknik_kriteria": "Kuis",
                "bobot_persen": 10,
            },
            {
                "id": "rp-2",
                "minggu_ke": 2,
                "sub_cpmk_id": "sub-3",
                "topik": "Pohon Biner",
                "sub_topik": [],
                "metode_pembelajaran": "Praktikum",
                "waktu_menit": 100,
                "teknik_kriteria": "",
                "bobot_persen": 15,
            },
        ],
        "rencana_tugas": [
            {
                "id": "tugas-1",
                "nomor_tugas": 1,
                "judul": "Implementasi Stack",
                "sub_cpmk_id": "sub-2",
                "indikator_keberhasilan": "Program berjalan",
                "batas_waktu_minggu": 4,
                "petunjuk_pengerjaan": "Kerjakan mandiri",
                "jenis_tugas": "individu",
                "luaran_tugas": "Kode sumber",
                "kriteria_penilaian": "Ketepatan",
                "teknik_penilaian": "Rubrik",
                "bobot": 20,
                "daftar_rujukan": "",
            }
        ],
        "analisis_ketercapaian": [
            {
                "id": "analisis-1",
                "minggu_mulai": 1,
                "minggu_selesai": 8,
                "cpl_id": "cpl-2",
                "cpmk_ids": ["cpmk-1"],
                "sub_cpmk_ids": ["sub-1", "sub-2"],
                "topik_materi": "Struktur data linear",
                "jenis_assessment": "Tes Tertulis",
                "bobot_kontribusi": 40,
            }
        ],
        "bahan_bacaan": [
            {
                "id": "bb-1",
                "judul": "Introduction to Algorithms",
                "penulis": "Cormen",
                "tahun": 2009,
                "penerbit": "MIT Press",
                "jenis": "buku",
                "isbn": "978-0262033848",
                "halaman": "",
                "url": "",
                "is_wajib": True,
                "urutan": 1,
            },
            {
                "id": "bb-2",
                "judul": "Data Structures Notes",
                "penulis": "Anon",
                "tahun": 2020,
                "penerbit": "",
                "jenis": "website",
                "isbn": "",
                "halaman": "",
                "url": "https://example.org/ds",
                "is_wajib": False,
                "urutan": 2,
            },
        ],
    }


@pytest.fixture()
def document() -> Dict[str, Any]:
    return sample_document()


@pytest.fixture()
def aggregate(document):
    return hydrate(document)
