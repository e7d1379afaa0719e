"""
SQLAlchemy model mixins for reusable functionality.
"""

from uuid import UUID, uuid4

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Uuid
from sqlalchemy.orm import Mapped, mapped_column


class UUIDMixin:
    """
    Mixin for UUID primary key.

    Uses the portable Uuid type: native UUID on PostgreSQL,
    CHAR(32) elsewhere.
    """

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        comment="Primary key (UUID)",
    )


def enum_column(enum_cls, name: str) -> SAEnum:
    """Enum column persisted by value (``"active"``) rather than member name."""
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
