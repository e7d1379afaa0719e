"""
Unit of Work pattern implementation.

Provides transaction management and repository coordination
for the service layer with SQLAlchemy.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_lifecycle.config.logging import get_logger
from hostel_lifecycle.repositories.base import BaseRepository

from .errors import StoreError

logger = get_logger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    One database transaction.

    Commits when the block exits cleanly and rolls back on any exception.
    ``SQLAlchemyError`` is re-raised as ``StoreError``; service errors
    propagate unchanged after the rollback.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     semesters = uow.get_repo(SemesterRepository)
        ...     semesters.clear_current(hostel_id)
        ...     semesters.mark_current(semester)
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self.session: Optional[Session] = None
        self._committed: bool = False
        self._repo_cache: dict[Type[BaseRepository], BaseRepository] = {}

    # ------------------------------------------------------------------ #
    # Context manager protocol
    # ------------------------------------------------------------------ #

    def __enter__(self) -> "UnitOfWork":
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")

        self.session = self._session_factory()
        self._committed = False
        self._repo_cache.clear()
        logger.debug("UnitOfWork session started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if self.session is None:
            return False

        try:
            if exc_type is None:
                if not self._committed:
                    self.commit()
            else:
                self.session.rollback()
                logger.warning(f"UnitOfWork rolled back due to {exc_type.__name__}: {exc_val}")
                if isinstance(exc_val, SQLAlchemyError):
                    raise StoreError("Database operation failed", exc_val) from exc_val
        finally:
            self.session.close()
            self.session = None
            self._repo_cache.clear()
            logger.debug("UnitOfWork session closed")

        return False

    # ------------------------------------------------------------------ #
    # Transaction control
    # ------------------------------------------------------------------ #

    def commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            StoreError: If the commit fails
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.commit() called outside of context")

        try:
            self.session.commit()
            self._committed = True
            logger.debug("UnitOfWork committed")
        except SQLAlchemyError as exc:
            logger.error(f"Commit failed: {exc}")
            self.session.rollback()
            raise StoreError("Failed to commit transaction", exc) from exc

    def flush(self) -> None:
        if self.session is None:
            raise RuntimeError("UnitOfWork.flush() called outside of context")
        self.session.flush()

    # ------------------------------------------------------------------ #
    # Repository factory
    # ------------------------------------------------------------------ #

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """
        Get or create a repository bound to this unit of work's session.
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")

        if repo_cls not in self._repo_cache:
            self._repo_cache[repo_cls] = repo_cls(self.session)
        return self._repo_cache[repo_cls]  # type: ignore[return-value]
