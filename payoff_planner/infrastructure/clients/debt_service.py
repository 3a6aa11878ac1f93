"""Debt service HTTP client - remote debt source"""

import httpx
from decimal import Decimal
from typing import List
from payoff_planner.domain.models import Debt
from payoff_planner.domain.exceptions import UpstreamUnavailableError
from payoff_planner.domain.money import ZERO
from payoff_planner.config import settings


class DebtServiceClient:
    """Client for the external debt service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.debt_service_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def list_active_debts(self, user_id: str) -> List[Debt]:
        """
        Fetch the user's debts with an outstanding balance.

        Raises:
            UpstreamUnavailableError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/internal/debts",
                    params={"user_id": user_id},
                )
                response.raise_for_status()
                data = response.json()

                debts = [
                    Debt(
                        debt_id=int(item["debt_id"]),
                        name=item["name"],
                        balance=Decimal(str(item["current_balance"])),
                        interest_rate=Decimal(str(item["interest_rate"])),
                        min_payment=Decimal(str(item["min_payment"])),
                    )
                    for item in data.get("debts", [])
                ]
                return [d for d in debts if d.balance > 0]

            except httpx.TimeoutException as e:
                raise UpstreamUnavailableError(f"Debt service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise UpstreamUnavailableError(f"Debt service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise UpstreamUnavailableError(f"Debt service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, ArithmeticError) as e:
                raise UpstreamUnavailableError(f"Invalid debt data from debt service: {e}") from e

    async def current_balance(self, user_id: str) -> Decimal:
        debts = await self.list_active_debts(user_id)
        return sum((d.balance for d in debts), ZERO)
