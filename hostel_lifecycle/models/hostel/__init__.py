from hostel_lifecycle.models.hostel.hostel import Hostel, User

__all__ = ["Hostel", "User"]
