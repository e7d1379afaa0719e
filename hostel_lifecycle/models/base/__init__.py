from hostel_lifecycle.models.base.base_model import Base, BaseModel, TimestampModel
from hostel_lifecycle.models.base.mixins import UUIDMixin, enum_column

__all__ = ["Base", "BaseModel", "TimestampModel", "UUIDMixin", "enum_column"]
