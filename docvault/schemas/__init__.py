# docvault/schemas/__init__.py
from .document import Document, DocumentBase, MessageResponse, HealthResponse

__all__ = [
    "Document", "DocumentBase",
    "MessageResponse", "HealthResponse"
]
