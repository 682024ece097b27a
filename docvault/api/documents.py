# docvault/api/documents.py
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import StreamingResponse

from ..config import Settings
from ..exceptions import ValidationError
from ..schemas.document import Document as DocumentSchema, MessageResponse
from ..services.documents import DocumentService
from ..utils.files import PDF_MEDIA_TYPE, build_content_disposition
from ..utils.logging import api_logger
from .dependencies import get_document_service, get_settings

router = APIRouter(prefix="/documents", tags=["documents"])

# Handlers are sync on purpose: FastAPI runs them in its threadpool, so the
# blocking disk and database calls never stall the event loop.


@router.post("/upload", response_model=DocumentSchema, status_code=status.HTTP_201_CREATED)
def upload_document(
        file: Optional[UploadFile] = File(None),
        service: DocumentService = Depends(get_document_service)
):
    if file is None or not file.filename:
        api_logger.warning("Upload without a file")
        raise ValidationError("No file uploaded or invalid file type.")

    api_logger.info("Uploading document", extra={
        "file_name": file.filename,
        "content_type": file.content_type
    })

    start_time = time.time()
    try:
        document = service.upload(file.filename, file.content_type, file.file)
    finally:
        file.file.close()

    execution_time = time.time() - start_time
    api_logger.info("Successfully uploaded document", extra={
        "document_id": document.id,
        "filesize": document.filesize,
        "execution_time_ms": round(execution_time * 1000, 2)
    })
    return document


@router.get("", response_model=List[DocumentSchema])
def list_documents(service: DocumentService = Depends(get_document_service)):
    start_time = time.time()
    documents = service.list_documents()

    execution_time = time.time() - start_time
    api_logger.info("Listed documents", extra={
        "document_count": len(documents),
        "execution_time_ms": round(execution_time * 1000, 2)
    })
    return documents


@router.get("/{document_id}/metadata", response_model=DocumentSchema)
def get_document(document_id: int, service: DocumentService = Depends(get_document_service)):
    return service.get(document_id)


@router.get("/{document_id}")
def download_document(
        document_id: int,
        service: DocumentService = Depends(get_document_service),
        settings: Settings = Depends(get_settings)
):
    api_logger.info("Downloading document", extra={"document_id": document_id})

    download = service.download(document_id)
    return StreamingResponse(
        download.iter_chunks(settings.CHUNK_SIZE),
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Disposition": build_content_disposition(download.filename),
            "Content-Length": str(download.size_bytes)
        }
    )


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(document_id: int, service: DocumentService = Depends(get_document_service)):
    api_logger.info("Deleting document", extra={"document_id": document_id})

    service.delete(document_id)

    api_logger.info(f"Successfully deleted document {document_id}")
    return MessageResponse(message="Document deleted successfully.")
