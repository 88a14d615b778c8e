from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, configure_mappers
from sqlalchemy.pool import StaticPool
from fastapi import Request
import logging
from typing import Any, Dict, Iterator

logger = logging.getLogger(__name__)


Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the engine and the session factory for one application instance.

    Built once by ``create_app`` and stored on ``app.state.database``; request
    handlers get sessions through the ``get_db`` dependency.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs: Dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_tables(self) -> None:
        init_models()
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def session(self) -> Iterator:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()


def init_models():
    """Import all models and configure mappers."""
    import models  # noqa: F401

    try:
        configure_mappers()
    except Exception as e:
        logger.error(f"Error configuring mappers: {e}")
        raise


def get_db(request: Request):
    yield from request.app.state.database.session()
