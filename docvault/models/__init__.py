# docvault/models/__init__.py
from ..database import Base
from .document import Document

__all__ = [
    "Base",
    "Document"
]
