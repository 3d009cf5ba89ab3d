import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from resume_builder.app.core.config import get_settings

log = logging.getLogger(__name__)

# Built on first use so importing the app never opens a connection
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def get_engine() -> Engine:
    """Return the process-wide engine for the resume store.

    Returns:
        Engine: Engine bound to `Settings.database_url`, echoing SQL when
        `SQL_ECHO` is set.

    """
    global _engine
    if _engine is None:
        settings = get_settings()
        _msg = f"Creating engine for {settings.db_host}:{settings.db_port}/{settings.db_name}"
        log.debug(_msg)
        _engine = create_engine(str(settings.database_url), echo=settings.sql_echo)
    return _engine


def get_session_local() -> sessionmaker:
    """Return the session factory used by requests and `manage.py`."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request.

    The route logic commits its own writes; the session is closed when the
    response has been produced, whatever the outcome.
    """
    db = get_session_local()()
    try:
        yield db
    finally:
        db.close()
