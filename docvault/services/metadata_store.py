# docvault/services/metadata_store.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..database import Base, create_session_factory
from ..exceptions import PersistenceError
from ..models.document import Document
from ..utils.logging import db_logger


class MetadataStore:
    """Document rows in the ``documents`` table, one session per call"""

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None):
        self.engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            db_logger.error(f"Error creating documents table: {e}")
            raise PersistenceError(f"Failed to create schema: {e}") from e
        db_logger.info('Ensured that "documents" table exists.')

    def insert(self, filename: str, storage_path: str, size_bytes: int, created_at: datetime) -> int:
        with self._session_factory() as db:
            try:
                document = Document(
                    filename=filename,
                    filepath=storage_path,
                    filesize=size_bytes,
                    created_at=created_at
                )
                db.add(document)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                db_logger.error("Error inserting document", extra={
                    "filename": filename,
                    "storage_path": storage_path,
                    "error": str(e)
                })
                raise PersistenceError(f"Failed to insert document metadata: {e}") from e

            db_logger.debug("Inserted document", extra={"document_id": document.id})
            return document.id

    def get_by_id(self, document_id: int) -> Optional[Document]:
        with self._session_factory() as db:
            try:
                return db.query(Document).filter(Document.id == document_id).first()
            except SQLAlchemyError as e:
                db_logger.error("Error fetching document", extra={
                    "document_id": document_id,
                    "error": str(e)
                })
                raise PersistenceError(f"Failed to fetch document {document_id}: {e}") from e

    def list_all(self) -> List[Document]:
        """Newest first; ids break ties between identical timestamps"""
        with self._session_factory() as db:
            try:
                return db.query(Document) \
                    .order_by(Document.created_at.desc(), Document.id.desc()) \
                    .all()
            except SQLAlchemyError as e:
                db_logger.error(f"Error fetching documents: {e}")
                raise PersistenceError(f"Failed to list documents: {e}") from e

    def delete_by_id(self, document_id: int) -> bool:
        """Delete a row; an unknown id is a no-op and returns False"""
        with self._session_factory() as db:
            try:
                deleted = db.query(Document) \
                    .filter(Document.id == document_id) \
                    .delete(synchronize_session=False)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                db_logger.error("Error deleting document from DB", extra={
                    "document_id": document_id,
                    "error": str(e)
                })
                raise PersistenceError(f"Failed to delete document {document_id}: {e}") from e

        if not deleted:
            db_logger.debug("No document row to delete", extra={"document_id": document_id})
        return bool(deleted)
