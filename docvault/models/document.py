# docvault/models/document.py
from sqlalchemy import Column, Integer, String, Index

from ..database import Base
from .types import UTCDateTime


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    filepath = Column(String(1024), nullable=False)
    filesize = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index("ix_documents_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Document id={self.id} filename={self.filename!r}>"
