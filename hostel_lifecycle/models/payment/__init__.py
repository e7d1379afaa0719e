from hostel_lifecycle.models.payment.payment import Payment

__all__ = ["Payment"]
