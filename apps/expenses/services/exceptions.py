"""
Domain-specific exceptions for expenses app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class ExpensesServiceError(Exception):
    """Base exception for all expenses service errors."""
    pass


class ExpenseNotFoundError(ExpensesServiceError):
    pass


class PaymentNotFoundError(ExpensesServiceError):
    pass


class IneligibleSplitParticipantError(ExpensesServiceError):
    """Raised when an expense or payment references a participant outside the trip."""
    code = 'INELIGIBLE_SPLIT_PARTICIPANT'


class SameParticipantPaymentError(ExpensesServiceError):
    """Raised when a payment's sender and receiver are the same participant."""
    pass


class InvalidAmountError(ExpensesServiceError):
    """Raised when an amount is zero, negative or has more than 2 decimals."""
    pass
