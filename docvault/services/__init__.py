# docvault/services/__init__.py
from .blob_store import BlobStore
from .metadata_store import MetadataStore
from .documents import DocumentService, DocumentDownload

__all__ = ["BlobStore", "MetadataStore", "DocumentService", "DocumentDownload"]
