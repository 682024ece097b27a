# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from docvault.config import Settings
from docvault.database import create_db_engine
from docvault.main import create_app
from docvault.services import BlobStore, DocumentService, MetadataStore
from docvault.utils.logging import configure_logging

SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"


def make_pdf(size: int = 1024) -> bytes:
    """Fake PDF payload of exactly `size` bytes"""
    header = b"%PDF-1.4\n"
    if size <= len(header):
        return header[:size]
    return header + b"0" * (size - len(header))


@pytest.fixture(scope="session", autouse=True)
def test_log_dir(tmp_path_factory):
    """Keep log files out of the working directory"""
    log_dir = tmp_path_factory.mktemp("logs")
    configure_logging(Settings(_env_file=None, STORAGE_PATH=log_dir.parent / "storage", LOGS_PATH=log_dir))
    return log_dir


@pytest.fixture
def pdf_bytes():
    return make_pdf


@pytest.fixture
def test_settings(tmp_path):
    """Isolated settings with storage under tmp_path and an in-memory database"""
    return Settings(
        _env_file=None,
        DATABASE_URL=SQLALCHEMY_TEST_DATABASE_URL,
        STORAGE_PATH=tmp_path / "storage",
        CHUNK_SIZE=256,
    )


@pytest.fixture
def engine():
    engine = create_db_engine(SQLALCHEMY_TEST_DATABASE_URL)
    yield engine
    engine.dispose()


@pytest.fixture
def metadata_store(engine):
    store = MetadataStore(engine)
    store.create_schema()
    return store


@pytest.fixture
def blob_store(test_settings):
    return BlobStore(
        base_path=test_settings.STORAGE_PATH,
        upload_dir=test_settings.UPLOADS_PATH,
        chunk_size=test_settings.CHUNK_SIZE
    )


@pytest.fixture
def document_service(blob_store, metadata_store):
    return DocumentService(blob_store, metadata_store)


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs the app lifespan"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def uploads_dir(test_settings):
    return test_settings.UPLOADS_PATH


@pytest.fixture
def uploaded_document(client, pdf_bytes):
    """Upload report.pdf through the API and return its JSON record"""
    response = client.post(
        "/documents/upload",
        files={"file": ("report.pdf", pdf_bytes(1024), "application/pdf")}
    )
    assert response.status_code == 201
    return response.json()
