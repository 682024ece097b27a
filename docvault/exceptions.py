# docvault/exceptions.py
"""Error kinds raised by the stores and the document service.

Each class knows the HTTP status it maps to and the message a client is
allowed to see. Client errors (4xx) expose their own text; server errors
(5xx) only expose ``public_message`` and keep the detail in the logs.
"""


class DocVaultError(Exception):
    status_code = 500
    public_message = "Internal server error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)

    @property
    def client_message(self) -> str:
        if self.status_code < 500:
            return str(self)
        return self.public_message


class ValidationError(DocVaultError):
    status_code = 400
    public_message = "No file uploaded or invalid file type."


class UnsupportedTypeError(ValidationError):
    public_message = "Only PDF files are allowed."


class FileTooLargeError(ValidationError):
    public_message = "Uploaded file is too large."


class NotFoundError(DocVaultError):
    status_code = 404
    public_message = "Not found."


class DocumentNotFoundError(NotFoundError):
    public_message = "Document not found."

    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(self.public_message)


class BlobMissingError(NotFoundError):
    public_message = "File not found on disk."

    def __init__(self, storage_path: str):
        self.storage_path = storage_path
        super().__init__(self.public_message)


class StorageError(DocVaultError):
    public_message = "File storage operation failed."


class StorageWriteError(StorageError):
    public_message = "Failed to store document."


class StorageReadError(StorageError):
    public_message = "Failed to read document."


class PersistenceError(DocVaultError):
    public_message = "Database operation failed."


class UnexpectedError(DocVaultError):
    pass


__all__ = [
    "DocVaultError",
    "ValidationError",
    "UnsupportedTypeError",
    "FileTooLargeError",
    "NotFoundError",
    "DocumentNotFoundError",
    "BlobMissingError",
    "StorageError",
    "StorageWriteError",
    "StorageReadError",
    "PersistenceError",
    "UnexpectedError",
]
