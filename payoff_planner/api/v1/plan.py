"""/v1/plans - activate, track and recalculate the active payoff plan"""

from fastapi import APIRouter, Depends

from payoff_planner.api.v1.schemas import (
    ActivatePlanRequest,
    ActivatePlanResponse,
    ActivePlanResponse,
    DebtStatusSchema,
    PlanMonthSchema,
    RecalculateResponse,
)
from payoff_planner.api.dependencies import get_plan_service, get_user_id
from payoff_planner.services.plan import PlanService

router = APIRouter()


@router.post("/plans/activate", response_model=ActivatePlanResponse)
def activate_plan(
    request_body: ActivatePlanRequest,
    user_id: str = Depends(get_user_id),
    service: PlanService = Depends(get_plan_service),
):
    """Track a report with the chosen strategy; any previous plan is deactivated"""
    plan = service.activate_plan(user_id, request_body.report_id, request_body.strategy)

    return ActivatePlanResponse(
        plan_id=plan.plan_id,
        report_id=plan.report_id,
        strategy=plan.strategy,
        activated_at=plan.activated_at,
    )


@router.get("/plans/active", response_model=ActivePlanResponse)
async def get_active_plan(
    user_id: str = Depends(get_user_id),
    service: PlanService = Depends(get_plan_service),
):
    """
    Retrieve the active plan reconciled against real payments.

    Returns:
        Schedule with paid months, current position and live balances
    """
    plan = await service.get_active_plan(user_id)

    months = [
        PlanMonthSchema(
            month=m.detail.month,
            month_year=m.detail.month_year,
            total_payment=m.detail.total_payment,
            ending_balance=m.detail.ending_balance,
            paid_off_debts=m.detail.paid_off_debts,
            is_paid=m.is_paid,
            actual_paid_amount=m.actual_paid_amount,
            payment_date=m.payment_date,
        )
        for m in plan.months
    ]

    return ActivePlanResponse(
        report_id=plan.report_id,
        strategy=plan.strategy,
        status=plan.status,
        is_plan_outdated=plan.is_plan_outdated,
        current_month=plan.current_month,
        expected_balance=plan.expected_balance,
        current_total_debt=plan.current_total_debt,
        beginning_debt=plan.beginning_debt,
        extra_payment=plan.extra_payment,
        months=months,
        debt_statuses=[DebtStatusSchema.model_validate(s) for s in plan.debt_statuses],
    )


@router.post("/plans/recalculate", response_model=RecalculateResponse)
async def recalculate_plan(
    user_id: str = Depends(get_user_id),
    service: PlanService = Depends(get_plan_service),
):
    """Re-run the active plan against current debts with the same extra payment"""
    report_id = await service.recalculate(user_id)
    return RecalculateResponse(message="Plan recalculated successfully.", report_id=str(report_id))
