# docvault/config.py
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./docvault.db"

    # Storage Paths
    STORAGE_PATH: Path = Path("storage")
    UPLOADS_PATH: Path | None = None  # Will be set based on STORAGE_PATH
    LOGS_PATH: Path | None = None  # Will be set based on STORAGE_PATH

    # Uploads
    MAX_UPLOAD_SIZE: Optional[int] = None  # bytes, no cap when unset
    CHUNK_SIZE: int = 1024 * 1024
    CLEANUP_ORPHANED_BLOBS: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    RELOAD: bool = False
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def model_post_init(self, __context) -> None:
        """Post initialization hook to set derived paths"""
        if isinstance(self.STORAGE_PATH, str):
            self.STORAGE_PATH = Path(self.STORAGE_PATH)

        self.UPLOADS_PATH = Path(self.UPLOADS_PATH) if self.UPLOADS_PATH else self.STORAGE_PATH / "uploads"
        self.LOGS_PATH = Path(self.LOGS_PATH) if self.LOGS_PATH else self.STORAGE_PATH / "logs"

        self.create_storage_dirs()

    def create_storage_dirs(self) -> None:
        """Create necessary storage directories if they don't exist"""
        for path in [self.STORAGE_PATH, self.UPLOADS_PATH, self.LOGS_PATH]:
            path.mkdir(parents=True, exist_ok=True)


settings = Settings()
