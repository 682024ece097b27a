# docvault/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import documents
from .api.errors import register_exception_handlers
from .config import Settings, settings as default_settings
from .database import create_db_engine
from .schemas.document import HealthResponse
from .services import BlobStore, DocumentService, MetadataStore
from .utils.logging import api_logger, configure_logging


def build_document_service(settings: Settings, metadata_store: MetadataStore) -> DocumentService:
    blob_store = BlobStore(
        base_path=settings.STORAGE_PATH,
        upload_dir=settings.UPLOADS_PATH,
        chunk_size=settings.CHUNK_SIZE,
        max_size=settings.MAX_UPLOAD_SIZE
    )
    return DocumentService(
        blob_store,
        metadata_store,
        cleanup_orphaned_blobs=settings.CLEANUP_ORPHANED_BLOBS
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        engine = create_db_engine(settings.DATABASE_URL)
        metadata_store = MetadataStore(engine)
        metadata_store.create_schema()

        app.state.settings = settings
        app.state.document_service = build_document_service(settings, metadata_store)
        api_logger.info("docvault API started", extra={
            "uploads_path": str(settings.UPLOADS_PATH)
        })
        try:
            yield
        finally:
            engine.dispose()
            api_logger.info("docvault API stopped")

    app = FastAPI(title="docvault API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "Content-Length"],
    )

    register_exception_handlers(app)
    app.include_router(documents.router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="ok")

    return app


app = create_app()
