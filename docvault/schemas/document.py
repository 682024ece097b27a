# docvault/schemas/document.py
from pydantic import BaseModel

from .base import BaseSchema, TimestampMixin


class DocumentBase(BaseSchema):
    filename: str
    filepath: str
    filesize: int


class Document(DocumentBase, TimestampMixin):
    id: int


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
