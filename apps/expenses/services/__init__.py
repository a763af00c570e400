"""Services for expenses and settlement."""

from .exceptions import (
    ExpensesServiceError,
    ExpenseNotFoundError,
    PaymentNotFoundError,
    IneligibleSplitParticipantError,
    SameParticipantPaymentError,
    InvalidAmountError,
)
from .expense_management import (
    validate_amount,
    split_equally,
    create_expense,
    get_trip_expenses,
    delete_expense,
)
from .payment_management import (
    create_payment,
    get_trip_payments,
    delete_payment,
)
from .settlement import (
    calculate_settlement,
    build_ledger,
    get_trip_settlement,
)

__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'ExpenseNotFoundError',
    'PaymentNotFoundError',
    'IneligibleSplitParticipantError',
    'SameParticipantPaymentError',
    'InvalidAmountError',
    # Expenses
    'validate_amount',
    'split_equally',
    'create_expense',
    'get_trip_expenses',
    'delete_expense',
    # Payments
    'create_payment',
    'get_trip_payments',
    'delete_payment',
    # Settlement
    'calculate_settlement',
    'build_ledger',
    'get_trip_settlement',
]
