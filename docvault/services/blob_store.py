# docvault/services/blob_store.py
from pathlib import Path
from typing import BinaryIO, Optional, Tuple

from ..exceptions import (
    BlobMissingError,
    FileTooLargeError,
    StorageReadError,
    StorageWriteError,
)
from ..utils.files import ensure_pdf_upload, generate_storage_name, get_relative_path
from ..utils.logging import storage_logger


class BlobStore:
    """Uploaded PDF bytes on the local filesystem.

    Blobs live in ``upload_dir`` and are referenced by a path relative to
    ``base_path`` so the storage directory can be moved as a whole.
    """

    def __init__(
            self,
            base_path: Path,
            upload_dir: Path,
            chunk_size: int = 1024 * 1024,
            max_size: Optional[int] = None
    ):
        self.base_path = Path(base_path)
        self.upload_dir = Path(upload_dir)
        self.chunk_size = chunk_size
        self.max_size = max_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def resolve(self, storage_path: str) -> Path:
        """Relative paths are anchored at the base directory, absolute ones are kept"""
        path = Path(storage_path)
        if path.is_absolute():
            return path
        return self.base_path / path

    def save(self, original_name: str, content: BinaryIO, media_type: Optional[str]) -> Tuple[str, int]:
        """Validate and stream an upload to disk, returning (storage_path, size_bytes)"""
        ensure_pdf_upload(original_name, media_type)

        file_path = self.upload_dir / generate_storage_name(original_name)
        size = 0

        # A name collision must never touch the file that already owns the name
        try:
            buffer = file_path.open("xb")
        except OSError as e:
            storage_logger.error("Failed to create blob", extra={
                "file_path": str(file_path),
                "error": str(e)
            }, exc_info=True)
            raise StorageWriteError(f"Failed to create {file_path}: {e}") from e

        try:
            with buffer:
                while True:
                    chunk = content.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if self.max_size is not None and size > self.max_size:
                        raise FileTooLargeError(
                            f"File exceeds the maximum upload size of {self.max_size} bytes."
                        )
                    buffer.write(chunk)
        except FileTooLargeError:
            self._remove_partial(file_path)
            storage_logger.warning("Upload rejected, size limit exceeded", extra={
                "original_name": original_name,
                "max_size": self.max_size
            })
            raise
        except OSError as e:
            self._remove_partial(file_path)
            storage_logger.error("Failed to write blob", extra={
                "file_path": str(file_path),
                "error": str(e)
            }, exc_info=True)
            raise StorageWriteError(f"Failed to write {file_path}: {e}") from e

        storage_path = get_relative_path(file_path, self.base_path)
        storage_logger.info("Stored blob", extra={
            "original_name": original_name,
            "storage_path": storage_path,
            "size_bytes": size
        })
        return storage_path, size

    def delete(self, storage_path: str) -> bool:
        """Remove a blob; an already missing blob is only logged"""
        file_path = self.resolve(storage_path)
        try:
            file_path.unlink()
        except FileNotFoundError:
            storage_logger.warning("Blob already absent, nothing to delete", extra={
                "storage_path": storage_path
            })
            return False
        except OSError as e:
            storage_logger.error(f"Error deleting blob {file_path}: {e}")
            raise StorageWriteError(f"Failed to delete {file_path}: {e}") from e

        storage_logger.info("Deleted blob", extra={"storage_path": storage_path})
        return True

    def exists(self, storage_path: str) -> bool:
        return self.resolve(storage_path).is_file()

    def open_for_read(self, storage_path: str) -> BinaryIO:
        file_path = self.resolve(storage_path)
        try:
            return file_path.open("rb")
        except (FileNotFoundError, IsADirectoryError) as e:
            storage_logger.error(f"File not found on disk: {file_path}")
            raise BlobMissingError(storage_path) from e
        except OSError as e:
            storage_logger.error(f"Error opening blob {file_path}: {e}", exc_info=True)
            raise StorageReadError(f"Failed to open {file_path}: {e}") from e

    @staticmethod
    def _remove_partial(file_path: Path) -> None:
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            storage_logger.error(f"Could not remove partial upload {file_path}: {e}")
