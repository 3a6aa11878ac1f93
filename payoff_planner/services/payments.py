"""Real payment recording and lump-sum distribution"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from payoff_planner.domain.distribution import distribute_payment
from payoff_planner.domain.exceptions import (
    DebtNotFoundError,
    DistributionAtomicityError,
    NoDebtsError,
    UpstreamUnavailableError,
)
from payoff_planner.domain.models import ActualPayment, PaymentInstruction
from payoff_planner.domain.money import to_money
from payoff_planner.domain.ports import PaymentStore, PlanStore
from payoff_planner.domain.strategies import AVALANCHE, resolve_strategy
from payoff_planner.infrastructure.database.repositories import DebtRepository
from payoff_planner.infrastructure.observability.metrics import distribution_counter, upstream_failures_counter


class PaymentService:
    """Records real payments; the debt table and payments share one transaction"""

    def __init__(self, debts: DebtRepository, payments: PaymentStore, plans: PlanStore):
        self.debts = debts
        self.payments = payments
        self.plans = plans

    def _default_report_id(self, user_id: str, report_id: Optional[uuid.UUID]) -> Optional[uuid.UUID]:
        # Untagged payments count against the active plan, if there is one
        if report_id is not None:
            return report_id
        plan = self.plans.get_active(user_id)
        return plan.report_id if plan else None

    def distribute_and_pay(
        self,
        user_id: str,
        amount: Decimal,
        strategy: str = AVALANCHE,
        payment_date: Optional[date] = None,
        report_id: Optional[uuid.UUID] = None,
    ) -> List[PaymentInstruction]:
        """
        Split a lump payment across the user's debts and record it.

        Minimums still owed this month come first, then the strategy's
        priority order. Payments and balance decrements are written in a
        single transaction.

        Raises:
            InvalidStrategyError: unknown strategy name
            NoDebtsError: user has nothing left to pay
            ValueError: amount rounds to less than one cent
            DistributionAtomicityError: batch rolled back
        """
        amount = to_money(amount)
        if amount <= 0:
            raise ValueError("Payment amount must be at least one cent")
        order = resolve_strategy(strategy)
        payment_date = payment_date or date.today()

        try:
            debts = self.debts.get_active_debts(user_id)
            if not debts:
                raise NoDebtsError("No debts to distribute the payment to.")
            recorded = self.payments.sum_by_debt_and_period([d.debt_id for d in debts], payment_date)
            report_id = self._default_report_id(user_id, report_id)
        except SQLAlchemyError as e:
            upstream_failures_counter.inc()
            raise UpstreamUnavailableError(f"Debt store unavailable: {e}") from e

        instructions = distribute_payment(debts, recorded, amount, order)

        try:
            self.payments.insert_batch(
                user_id,
                [
                    ActualPayment(
                        debt_id=i.debt_id,
                        amount=i.amount,
                        payment_date=payment_date,
                        report_id=report_id,
                    )
                    for i in instructions
                ],
            )
        except DistributionAtomicityError:
            distribution_counter.labels(strategy=strategy, outcome="failed").inc()
            logging.error("Payment distribution rolled back", extra={"user_id": user_id, "amount": str(amount)})
            raise

        distribution_counter.labels(strategy=strategy, outcome="recorded").inc()
        logging.info(
            "Payment distributed",
            extra={
                "user_id": user_id,
                "amount": str(amount),
                "strategy": strategy,
                "debts_paid": len(instructions),
            },
        )
        return instructions

    def record_payment(
        self,
        user_id: str,
        debt_id: int,
        amount: Decimal,
        payment_date: Optional[date] = None,
        report_id: Optional[uuid.UUID] = None,
        note: Optional[str] = None,
    ) -> ActualPayment:
        """Record one payment against one debt and lower its balance"""
        amount = to_money(amount)
        if amount <= 0:
            raise ValueError("Payment amount must be at least one cent")
        if self.debts.get_debt(user_id, debt_id) is None:
            raise DebtNotFoundError("Debt not found or does not belong to user.")

        stored = self.payments.insert_batch(
            user_id,
            [
                ActualPayment(
                    debt_id=debt_id,
                    amount=amount,
                    payment_date=payment_date or date.today(),
                    report_id=self._default_report_id(user_id, report_id),
                    note=note,
                )
            ],
        )
        return stored[0]

    def list_payments(self, user_id: str, report_id: Optional[uuid.UUID] = None) -> List[ActualPayment]:
        return self.payments.list_by_user(user_id, report_id)
