"""Domain-specific exceptions"""

from decimal import Decimal


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NoDebtsError(DomainException):
    """User has no debts to simulate"""

    pass


class PayoffNotConvergingError(DomainException):
    """Payoff plan cannot reach a zero balance with the given budget"""

    pass


class InsufficientPaymentError(PayoffNotConvergingError):
    """Monthly budget does not cover the first month's interest"""

    def __init__(self, deficit: Decimal):
        super().__init__(f"Payment insufficient. Deficit: {deficit}")
        self.deficit = deficit


class RunawaySimulationError(PayoffNotConvergingError):
    """Simulation exceeded the month cap without paying everything off"""

    def __init__(self, max_months: int):
        super().__init__(f"The calculation limit of {max_months} months has been exceeded")
        self.max_months = max_months


class UpstreamUnavailableError(DomainException):
    """Debt source or a store failed; safe to retry"""

    pass


class DistributionAtomicityError(DomainException):
    """Payment batch could not be persisted and was rolled back"""

    pass


class ReportNotFoundError(DomainException):
    """Calculation report does not exist or belongs to another user"""

    pass


class PlanNotFoundError(DomainException):
    """User has no active plan"""

    pass


class DebtNotFoundError(DomainException):
    """Debt does not exist or belongs to another user"""

    pass


class InvalidStrategyError(DomainException):
    """Strategy name is not Snowball or Avalanche"""

    pass
