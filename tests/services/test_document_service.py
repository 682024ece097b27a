# tests/services/test_document_service.py
import io
from datetime import datetime, timezone

import pytest

from docvault.exceptions import (
    BlobMissingError,
    DocumentNotFoundError,
    PersistenceError,
    StorageWriteError,
    UnsupportedTypeError,
)
from docvault.services import DocumentService


def upload_pdf(service, filename="report.pdf", content=b"%PDF-1.4\nbody"):
    return service.upload(filename, "application/pdf", io.BytesIO(content))


def test_upload_records_size_and_time(document_service, pdf_bytes):
    before = datetime.now(timezone.utc)
    document = upload_pdf(document_service, content=pdf_bytes(1024))

    assert document.id is not None
    assert document.filename == "report.pdf"
    assert document.filesize == 1024
    assert before <= document.created_at <= datetime.now(timezone.utc)
    assert document_service.blob_store.exists(document.filepath)


def test_upload_keeps_original_filename(document_service):
    document = upload_pdf(document_service, filename="quarterly report.pdf")

    assert document.filename == "quarterly report.pdf"
    assert document.filepath.endswith("-quarterly_report.pdf")


def test_upload_rejects_non_pdf_before_writing(document_service, uploads_dir):
    with pytest.raises(UnsupportedTypeError):
        document_service.upload("notes.txt", "text/plain", io.BytesIO(b"hello"))

    assert document_service.list_documents() == []
    assert list(uploads_dir.iterdir()) == []


def test_failed_insert_leaves_orphan_blob(document_service, uploads_dir, monkeypatch):
    def broken_insert(*args, **kwargs):
        raise PersistenceError("insert failed")

    monkeypatch.setattr(document_service.metadata_store, "insert", broken_insert)

    with pytest.raises(PersistenceError):
        upload_pdf(document_service)

    assert len(list(uploads_dir.iterdir())) == 1


def test_failed_insert_cleans_up_when_enabled(blob_store, metadata_store, uploads_dir, monkeypatch):
    service = DocumentService(blob_store, metadata_store, cleanup_orphaned_blobs=True)

    def broken_insert(*args, **kwargs):
        raise PersistenceError("insert failed")

    monkeypatch.setattr(metadata_store, "insert", broken_insert)

    with pytest.raises(PersistenceError):
        upload_pdf(service)

    assert list(uploads_dir.iterdir()) == []


def test_list_documents_newest_first(document_service):
    uploaded = [upload_pdf(document_service, filename=f"{n}.pdf") for n in range(4)]

    listed = document_service.list_documents()

    assert [d.id for d in listed] == [d.id for d in reversed(uploaded)]


def test_get_unknown_document(document_service):
    with pytest.raises(DocumentNotFoundError):
        document_service.get(12345)


def test_download_round_trip(document_service, pdf_bytes):
    content = pdf_bytes(3000)
    document = upload_pdf(document_service, content=content)

    download = document_service.download(document.id)

    assert download.filename == "report.pdf"
    assert download.size_bytes == 3000
    chunks = list(download.iter_chunks(1024))
    assert [len(c) for c in chunks] == [1024, 1024, 952]
    assert b"".join(chunks) == content
    assert download.stream.closed


def test_download_unknown_document(document_service):
    with pytest.raises(DocumentNotFoundError):
        document_service.download(12345)


def test_colliding_upload_keeps_first_document_readable(document_service, monkeypatch):
    monkeypatch.setattr(
        "docvault.services.blob_store.generate_storage_name",
        lambda filename: "fixed-report.pdf"
    )
    first = upload_pdf(document_service, content=b"%PDF-first")

    with pytest.raises(StorageWriteError):
        upload_pdf(document_service, content=b"%PDF-second")

    assert [d.id for d in document_service.list_documents()] == [first.id]
    assert b"".join(document_service.download(first.id).iter_chunks()) == b"%PDF-first"


def test_download_missing_blob(document_service):
    document = upload_pdf(document_service)
    document_service.blob_store.resolve(document.filepath).unlink()

    with pytest.raises(BlobMissingError):
        document_service.download(document.id)


def test_delete_removes_blob_and_record(document_service):
    document = upload_pdf(document_service)

    deleted = document_service.delete(document.id)

    assert deleted.id == document.id
    assert not document_service.blob_store.exists(document.filepath)
    assert document_service.list_documents() == []
    with pytest.raises(DocumentNotFoundError):
        document_service.get(document.id)
    with pytest.raises(DocumentNotFoundError):
        document_service.download(document.id)


def test_delete_unknown_document(document_service):
    with pytest.raises(DocumentNotFoundError):
        document_service.delete(12345)


def test_delete_survives_blob_failure(document_service, monkeypatch):
    document = upload_pdf(document_service)

    def broken_delete(storage_path):
        raise StorageWriteError("permission denied")

    monkeypatch.setattr(document_service.blob_store, "delete", broken_delete)

    document_service.delete(document.id)

    assert document_service.list_documents() == []


def test_delete_removes_blob_before_metadata(document_service, monkeypatch):
    document = upload_pdf(document_service)
    calls = []

    original_blob_delete = document_service.blob_store.delete
    original_row_delete = document_service.metadata_store.delete_by_id

    def blob_delete(storage_path):
        calls.append("blob")
        return original_blob_delete(storage_path)

    def row_delete(document_id):
        calls.append("row")
        return original_row_delete(document_id)

    monkeypatch.setattr(document_service.blob_store, "delete", blob_delete)
    monkeypatch.setattr(document_service.metadata_store, "delete_by_id", row_delete)

    document_service.delete(document.id)

    assert calls == ["blob", "row"]
