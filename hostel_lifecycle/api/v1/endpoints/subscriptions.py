"""
Subscription plans, hostel subscriptions and the login gate.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.subscription import (
    AccessDecisionResponse,
    PlanCreate,
    PlanResponse,
    SubscribeRequest,
    SubscriptionResponse,
)
from hostel_lifecycle.services.subscription import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


# ==================== PLANS ====================


@router.post(
    "/plans",
    response_model=SuccessResponse[PlanResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_super_admin)],
)
def create_plan(payload: PlanCreate, service: SubscriptionService = Depends(deps.get_subscription_service)):
    plan = service.create_plan(
        payload.name,
        payload.duration_months,
        payload.price_per_month,
        description=payload.description,
        total_price=payload.total_price,
    )
    return SuccessResponse.create(PlanResponse.model_validate(plan))


@router.get("/plans", response_model=SuccessResponse[List[PlanResponse]])
def list_plans(service: SubscriptionService = Depends(deps.get_subscription_service)):
    return SuccessResponse.create([PlanResponse.model_validate(p) for p in service.list_active_plans()])


@router.post(
    "/plans/{plan_id}/deactivate",
    response_model=SuccessResponse[PlanResponse],
    dependencies=[Depends(deps.require_super_admin)],
)
def deactivate_plan(plan_id: UUID, service: SubscriptionService = Depends(deps.get_subscription_service)):
    return SuccessResponse.create(PlanResponse.model_validate(service.deactivate_plan(plan_id)))


# ==================== HOSTEL SUBSCRIPTIONS ====================


@router.post("", response_model=SuccessResponse[SubscriptionResponse], status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: SubscribeRequest,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    subscription = service.subscribe(
        hostel_id,
        payload.plan_id,
        amount_paid=payload.amount_paid,
        payment_method=payload.payment_method,
        payment_reference=payload.payment_reference,
    )
    return SuccessResponse.create(SubscriptionResponse.model_validate(subscription))


@router.post("/renew", response_model=SuccessResponse[SubscriptionResponse], status_code=status.HTTP_201_CREATED)
def renew(
    payload: SubscribeRequest,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    subscription = service.renew(
        hostel_id,
        payload.plan_id,
        amount_paid=payload.amount_paid,
        payment_method=payload.payment_method,
        payment_reference=payload.payment_reference,
    )
    return SuccessResponse.create(SubscriptionResponse.model_validate(subscription))


@router.get("", response_model=SuccessResponse[List[SubscriptionResponse]])
def list_subscriptions(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    return SuccessResponse.create(
        [SubscriptionResponse.model_validate(s) for s in service.list_for_hostel(hostel_id)]
    )


@router.get("/access", response_model=SuccessResponse[AccessDecisionResponse])
def check_access(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    return SuccessResponse.create(AccessDecisionResponse.model_validate(service.evaluate_access(hostel_id)))


@router.get(
    "/expired",
    response_model=SuccessResponse[List[SubscriptionResponse]],
    dependencies=[Depends(deps.require_super_admin)],
)
def list_expired_still_active(service: SubscriptionService = Depends(deps.get_subscription_service)):
    return SuccessResponse.create(
        [SubscriptionResponse.model_validate(s) for s in service.list_expired_still_active()]
    )
