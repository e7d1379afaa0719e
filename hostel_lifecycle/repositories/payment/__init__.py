from hostel_lifecycle.repositories.payment.payment_repository import PaymentRepository

__all__ = ["PaymentRepository"]
