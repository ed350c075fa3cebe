"""
Pytest configuration and fixtures for PDF Host Backend tests.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pdf_host_test_uploads_")
os.environ["SNAPSHOT_PATH"] = str(Path(tempfile.mkdtemp(prefix="pdf_host_test_snapshot_")) / "pdfFilesData.json")
os.environ["MONGO_URI"] = "mongodb://127.0.0.1:1/test"

from pdf_host_backend.blob_store import LocalBlobStore
from pdf_host_backend.errors import StoreWriteFailure
from pdf_host_backend.main import app, get_record_service
from pdf_host_backend.service import RecordService
from pdf_host_backend.snapshot import SnapshotCache


class InMemoryMetadataStore:
    """Stand-in for MongoMetadataStore keeping documents in a dict."""

    def __init__(self, ready: bool = True) -> None:
        self.ready = ready
        self.documents: Dict[str, Dict[str, Any]] = {}

    async def insert(self, document: Dict[str, Any]) -> None:
        self.documents[document["_id"]] = dict(document)

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.documents.get(record_id)

    async def find_all(self) -> List[Dict[str, Any]]:
        return list(self.documents.values())

    async def delete_by_id(self, record_id: str) -> bool:
        return self.documents.pop(record_id, None) is not None


class RejectingMetadataStore(InMemoryMetadataStore):
    async def insert(self, document: Dict[str, Any]) -> None:
        raise StoreWriteFailure()


@pytest.fixture(scope="session", autouse=True)
def test_dirs():
    """Cleanup directories created for the imported app."""
    yield
    shutil.rmtree(os.environ["UPLOAD_DIR"], ignore_errors=True)
    shutil.rmtree(Path(os.environ["SNAPSHOT_PATH"]).parent, ignore_errors=True)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return InMemoryMetadataStore()


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads")


@pytest.fixture
def snapshot(tmp_path):
    return SnapshotCache(tmp_path / "pdfFilesData.json")


@pytest.fixture
def service(store, blob_store, snapshot):
    return RecordService(store, blob_store, snapshot)


@pytest.fixture
def client(service):
    """Create a test client whose routes use the in-memory store."""
    app.dependency_overrides[get_record_service] = lambda: service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_pdf():
    """Minimal PDF bytes."""
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [] /Count 0 >>
endobj
trailer
<< /Size 3 /Root 1 0 R >>
%%EOF"""


@pytest.fixture
def sample_metadata():
    return {
        "materialNo": "M-42",
        "Accession_number": {"Vol": 3, "Year": 1998, "Collection_type": "manual"},
        "Location": "Shelf B",
        "Page_no": 120,
        "No_of_copies": 2,
        "Remarks": "",
    }


@pytest.fixture
def rejecting_client(blob_store):
    """Test client whose metadata store refuses every insert."""
    service = RecordService(RejectingMetadataStore(), blob_store)
    app.dependency_overrides[get_record_service] = lambda: service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
