from hostel_lifecycle.repositories.base.base_repository import BaseRepository

__all__ = ["BaseRepository"]
