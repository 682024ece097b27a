# docvault/api/dependencies.py
from fastapi import Request

from ..config import Settings
from ..services.documents import DocumentService


def get_document_service(request: Request) -> DocumentService:
    """The service built once in the app lifespan"""
    return request.app.state.document_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
