"""
Base repository with common persistence operations.

Repositories never commit: the service layer owns transaction
boundaries through ``UnitOfWork``.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_lifecycle.models.base.base_model import BaseModel

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base repository providing common database operations.
    """

    model: Type[T]

    def __init__(self, session: Session, model: Optional[Type[T]] = None):
        """
        Initialize repository.

        Args:
            session: Database session
            model: SQLAlchemy model class (defaults to the class attribute)
        """
        if model is not None:
            self.model = model
        self.session = session

    # ============================================================================
    # CREATE OPERATIONS
    # ============================================================================

    def create(self, data: Dict[str, Any]) -> T:
        """
        Add a new entity and flush so generated values are available.

        Args:
            data: Column values

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        self.session.flush()
        return entity

    # ============================================================================
    # READ OPERATIONS
    # ============================================================================

    def find_by_id(self, id: UUID) -> Optional[T]:
        return self.session.get(self.model, id)

    def find_by_id_for_update(self, id: UUID) -> Optional[T]:
        """Load a row with a row-level lock where the backend supports it."""
        query = select(self.model).where(self.model.id == id).with_for_update()
        return self.session.execute(query).scalar_one_or_none()

    def find_all(self, order_by: Any = None) -> List[T]:
        query = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        return list(self.session.execute(query).scalars().all())

    def count(self) -> int:
        return self.session.execute(select(func.count()).select_from(self.model)).scalar_one()

    # ============================================================================
    # UPDATE / DELETE OPERATIONS
    # ============================================================================

    def update(self, entity: T, data: Dict[str, Any]) -> T:
        """
        Apply column values to an entity.

        Args:
            entity: Entity to update
            data: Attribute values; unknown keys are ignored

        Returns:
            Updated entity
        """
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        self.session.flush()
        return entity

    def delete(self, entity: T) -> None:
        self.session.delete(entity)
        self.session.flush()
