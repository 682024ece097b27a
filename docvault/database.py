# docvault/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .utils.logging import db_logger

Base = declarative_base()


def _is_in_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections are shared across request threads"""
    database_url = str(database_url)
    db_logger.info(f"Connecting to database: {database_url}")

    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_in_memory_sqlite(database_url):
            # Every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool

    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    # Records are handed back to callers after the session closes
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
