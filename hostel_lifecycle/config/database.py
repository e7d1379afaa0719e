"""
Database connection settings for the hostel lifecycle backend.
Provides SQLAlchemy session management and connection pooling.
"""

import time
from typing import Any, Dict, Generator
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.engine import Engine

from hostel_lifecycle.config.settings import settings
from hostel_lifecycle.config.logging import get_logger

logger = get_logger(__name__)

SLOW_QUERY_SECONDS = 0.5


def build_engine(url: str, **overrides: Any) -> Engine:
    """Create an engine; pool sizing and statement timeout apply to server databases only"""
    kwargs: Dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DB_ECHO}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,  # Recycle connections after 1 hour
        )
        if url.startswith("postgresql"):
            kwargs["connect_args"] = {
                "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"
            }
    kwargs.update(overrides)
    return create_engine(url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    # Services hand ORM rows back after their unit of work closes
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


engine = build_engine(settings.get_database_url())

SessionLocal = build_session_factory(engine)


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - start timer"""
    conn.info.setdefault('query_start_time', []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - stop timer and log if slow query"""
    total_time = time.time() - conn.info['query_start_time'].pop()

    if total_time > SLOW_QUERY_SECONDS:
        logger.warning(
            f"Slow query detected ({total_time:.4f}s): "
            f"{statement[:100]}... with params {parameters}"
        )


def get_db_session() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup"""
    session = SessionLocal()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Engine = engine) -> None:
    """Create all tables from ORM metadata (development and tests; production uses migrations)"""
    from hostel_lifecycle.models import Base

    Base.metadata.create_all(bind=bind)
    logger.info("Database schema initialized")
