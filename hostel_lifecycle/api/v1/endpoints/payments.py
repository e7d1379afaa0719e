"""
Payments and the per-hostel payment summary.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentResultResponse,
    PaymentSummaryResponse,
)
from hostel_lifecycle.services.payment import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", response_model=SuccessResponse[PaymentResultResponse], status_code=status.HTTP_201_CREATED)
def record_payment(
    payload: PaymentCreate,
    hostel_id: UUID = Depends(deps.require_hostel),
    caller: deps.CallerContext = Depends(deps.get_caller),
    service: PaymentService = Depends(deps.get_payment_service),
):
    result = service.record_payment(
        hostel_id,
        payload.user_id,
        payload.amount,
        currency=payload.currency,
        purpose=payload.purpose,
        payment_method=payload.payment_method,
        reference=payload.reference,
        recorded_by=caller.user_id,
    )
    return SuccessResponse.create(
        PaymentResultResponse(
            payment=PaymentResponse.model_validate(result.payment),
            total_paid=result.total_paid,
            expected=result.expected,
            balance=result.balance,
        )
    )


@router.get("/summary", response_model=SuccessResponse[PaymentSummaryResponse])
def get_payment_summary(
    semester_id: Optional[UUID] = Query(default=None),
    hostel_id: UUID = Depends(deps.require_hostel),
    service: PaymentService = Depends(deps.get_payment_service),
):
    summary = service.get_summary(hostel_id, semester_id=semester_id)
    return SuccessResponse.create(PaymentSummaryResponse.model_validate(summary))
