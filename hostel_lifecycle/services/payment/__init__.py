from hostel_lifecycle.services.payment.payment_service import PaymentResult, PaymentService

__all__ = ["PaymentResult", "PaymentService"]
