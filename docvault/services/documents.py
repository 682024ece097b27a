# docvault/services/documents.py
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Iterator, List, Optional

from ..exceptions import DocumentNotFoundError, PersistenceError, StorageError
from ..models.document import Document
from ..utils.logging import service_logger
from .blob_store import BlobStore
from .metadata_store import MetadataStore


@dataclass
class DocumentDownload:
    filename: str
    stream: BinaryIO
    size_bytes: int

    def iter_chunks(self, chunk_size: int = 1024 * 1024) -> Iterator[bytes]:
        """Yield the blob in chunks and close it once exhausted"""
        with self.stream:
            while True:
                chunk = self.stream.read(chunk_size)
                if not chunk:
                    break
                yield chunk


class DocumentService:
    """Coordinates the blob store and the metadata store per user action.

    Nothing here is transactional across the two stores. A blob written for
    an upload whose metadata insert fails stays on disk unless
    ``cleanup_orphaned_blobs`` is enabled, and a blob that cannot be removed
    never blocks deletion of its metadata row.
    """

    def __init__(
            self,
            blob_store: BlobStore,
            metadata_store: MetadataStore,
            cleanup_orphaned_blobs: bool = False
    ):
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.cleanup_orphaned_blobs = cleanup_orphaned_blobs

    def upload(self, original_filename: Optional[str], media_type: Optional[str], content: BinaryIO) -> Document:
        storage_path, size_bytes = self.blob_store.save(original_filename, content, media_type)
        created_at = datetime.now(timezone.utc)

        try:
            document_id = self.metadata_store.insert(original_filename, storage_path, size_bytes, created_at)
        except PersistenceError:
            if self.cleanup_orphaned_blobs:
                self._discard_orphan(storage_path)
            else:
                service_logger.error("Metadata insert failed, blob left orphaned", extra={
                    "storage_path": storage_path,
                    "original_filename": original_filename
                })
            raise

        document = self.metadata_store.get_by_id(document_id)
        if document is None:
            raise PersistenceError(f"Inserted document {document_id} could not be read back")

        service_logger.info("Uploaded document", extra={
            "document_id": document.id,
            "original_filename": original_filename,
            "size_bytes": size_bytes
        })
        return document

    def list_documents(self) -> List[Document]:
        return self.metadata_store.list_all()

    def get(self, document_id: int) -> Document:
        document = self.metadata_store.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def download(self, document_id: int) -> DocumentDownload:
        document = self.get(document_id)
        stream = self.blob_store.open_for_read(document.filepath)

        try:
            size_bytes = self.blob_store.resolve(document.filepath).stat().st_size
        except OSError:
            size_bytes = document.filesize

        service_logger.debug("Opened document for download", extra={
            "document_id": document_id,
            "storage_path": document.filepath
        })
        return DocumentDownload(filename=document.filename, stream=stream, size_bytes=size_bytes)

    def delete(self, document_id: int) -> Document:
        document = self.get(document_id)

        # Blob goes first so a late failure leaves a row pointing at a missing blob
        try:
            self.blob_store.delete(document.filepath)
        except StorageError as e:
            service_logger.warning("Blob removal failed, deleting metadata anyway", extra={
                "document_id": document_id,
                "storage_path": document.filepath,
                "error": str(e)
            })

        self.metadata_store.delete_by_id(document_id)
        service_logger.info("Deleted document", extra={"document_id": document_id})
        return document

    def _discard_orphan(self, storage_path: str) -> None:
        try:
            self.blob_store.delete(storage_path)
            service_logger.warning("Removed blob after failed metadata insert", extra={
                "storage_path": storage_path
            })
        except StorageError as e:
            service_logger.error("Could not remove orphaned blob", extra={
                "storage_path": storage_path,
                "error": str(e)
            })


__all__ = ["DocumentService", "DocumentDownload"]
