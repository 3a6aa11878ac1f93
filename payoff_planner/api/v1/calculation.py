"""POST /v1/calculations - Snowball vs Avalanche comparison reports"""

import uuid
from fastapi import APIRouter, Depends

from payoff_planner.api.v1.schemas import (
    CalculationRequest,
    CalculationResponse,
    HistoryItem,
    HistoryResponse,
    ReportResponse,
)
from payoff_planner.api.dependencies import get_calculation_service, get_user_id
from payoff_planner.services.calculation import CalculationService
from payoff_planner.domain.exceptions import NoDebtsError

router = APIRouter()


@router.post("/calculations", response_model=CalculationResponse)
async def create_calculation(
    request_body: CalculationRequest,
    user_id: str = Depends(get_user_id),
    service: CalculationService = Depends(get_calculation_service),
):
    """
    Simulate both payoff strategies for the user's current debts.

    Identical requests (same debts, same extra payment) return the same
    report id without recalculating. Non-converging plans (422) and
    debt source failures (503) are mapped by the app's exception handlers.
    """
    try:
        report_id = await service.calculate(user_id, request_body.extra_monthly_payment)
    except NoDebtsError as e:
        # Nothing to simulate is a valid, empty outcome
        return CalculationResponse(report_id=None, message=str(e))

    return CalculationResponse(report_id=str(report_id))


@router.get("/calculations/history", response_model=HistoryResponse)
def get_calculation_history(
    user_id: str = Depends(get_user_id),
    service: CalculationService = Depends(get_calculation_service),
):
    """Most recent calculation reports for the user"""
    items = [HistoryItem.model_validate(item) for item in service.get_history(user_id)]
    return HistoryResponse(user_id=user_id, reports=items)


@router.get("/calculations/{report_id}", response_model=ReportResponse)
def get_calculation(
    report_id: uuid.UUID,
    user_id: str = Depends(get_user_id),
    service: CalculationService = Depends(get_calculation_service),
):
    """Full comparison report"""
    return ReportResponse.model_validate(service.get_report(user_id, report_id))
