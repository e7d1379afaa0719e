from hostel_lifecycle.repositories.hostel.hostel_repository import HostelRepository, UserRepository

__all__ = ["HostelRepository", "UserRepository"]
