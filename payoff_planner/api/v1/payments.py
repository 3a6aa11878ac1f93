"""/v1/payments - record real payments and distribute lump sums"""

import uuid
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Query

from payoff_planner.api.v1.schemas import (
    AllocationSchema,
    DistributePaymentRequest,
    DistributionResponse,
    PaymentHistoryResponse,
    PaymentRequest,
    PaymentSchema,
)
from payoff_planner.api.dependencies import get_payment_service, get_user_id
from payoff_planner.services.payments import PaymentService

router = APIRouter()


@router.post("/payments", response_model=PaymentSchema)
def add_payment(
    request_body: PaymentRequest,
    user_id: str = Depends(get_user_id),
    service: PaymentService = Depends(get_payment_service),
):
    """Record a payment against a single debt"""
    payment = service.record_payment(
        user_id,
        request_body.debt_id,
        request_body.amount,
        payment_date=request_body.payment_date,
        report_id=request_body.report_id,
        note=request_body.note,
    )
    return PaymentSchema.model_validate(payment)


@router.post("/payments/distribute", response_model=DistributionResponse)
def distribute_payment(
    request_body: DistributePaymentRequest,
    user_id: str = Depends(get_user_id),
    service: PaymentService = Depends(get_payment_service),
):
    """Split one lump payment across all debts: minimums first, then strategy order"""
    instructions = service.distribute_and_pay(
        user_id,
        request_body.amount,
        strategy=request_body.strategy,
        payment_date=request_body.payment_date,
        report_id=request_body.report_id,
    )

    return DistributionResponse(
        allocations=[AllocationSchema.model_validate(i) for i in instructions],
        total_allocated=sum((i.amount for i in instructions), Decimal("0")),
    )


@router.get("/payments/history", response_model=PaymentHistoryResponse)
def get_payment_history(
    report_id: Optional[uuid.UUID] = Query(None, description="Only payments counted against this report"),
    user_id: str = Depends(get_user_id),
    service: PaymentService = Depends(get_payment_service),
):
    """Recorded payments for the user"""
    payments = service.list_payments(user_id, report_id)
    return PaymentHistoryResponse(
        user_id=user_id,
        payments=[PaymentSchema.model_validate(p) for p in payments],
    )
