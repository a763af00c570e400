"""
Expense management service.

Expenses are split equally among the chosen participants with exact
cent arithmetic; the shares always add up to the expense amount.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Expense, ExpenseShare, SplitType
from apps.trips.models import Currency, TripParticipant, TripRole
from apps.trips.services import get_trip_for_participant, InsufficientPermissionsError

from .exceptions import (
    ExpenseNotFoundError,
    IneligibleSplitParticipantError,
    InvalidAmountError,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def validate_amount(amount: Decimal) -> Decimal:
    """
    Raises:
        InvalidAmountError: If amount is not positive or has sub-cent digits
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero")
    if amount != amount.quantize(CENT):
        raise InvalidAmountError("Amount cannot have more than 2 decimal places")
    return amount


def split_equally(amount: Decimal, participant_ids: list) -> list[tuple]:
    """
    Split amount among participants with cent precision.

    Every participant gets the amount divided by N rounded down to the
    cent; the leftover cents all go to the first participant.

    Example:
        100.00 split among 3 gives 33.34, 33.33, 33.33

    Returns:
        List of (participant_id, Decimal) in the given order
    """
    if not participant_ids:
        raise IneligibleSplitParticipantError("At least one participant is required")

    total_cents = int((amount * 100).to_integral_value())
    count = len(participant_ids)
    base_cents = total_cents // count
    remainder_cents = total_cents - base_cents * count

    shares = []
    for i, participant_id in enumerate(participant_ids):
        cents = base_cents + remainder_cents if i == 0 else base_cents
        shares.append((participant_id, Decimal(cents) / Decimal(100)))

    return shares


def _require_trip_participants(trip_id: UUID, participant_ids: list) -> None:
    found = TripParticipant.objects.filter(trip_id=trip_id, id__in=participant_ids).count()
    if found != len(set(participant_ids)):
        raise IneligibleSplitParticipantError("One or more participants do not belong to this trip")


@transaction.atomic
def create_expense(
    *,
    trip_id: UUID,
    user: User,
    description: str,
    amount: Decimal,
    participant_ids: list,
    currency: Optional[str] = None,
    paid_by_id: Optional[UUID] = None,
    expense_date: Optional[date] = None
) -> Expense:
    """
    Record an expense and split it equally.

    Args:
        trip_id: UUID of the trip
        user: Recording user (ADMIN or EDITOR of the trip)
        description: What was paid for
        amount: Total amount (positive, 2 decimals)
        participant_ids: Participants sharing the cost; the first one
            absorbs the rounding remainder
        currency: Defaults to the trip's default currency
        paid_by_id: Participant who paid, if known
        expense_date: Defaults to today

    Returns:
        Created Expense with its shares

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If user is a VIEWER
        IneligibleSplitParticipantError: If payer or a share holder is not in the trip
        InvalidAmountError: If amount is not valid
        ValueError: If currency is invalid
    """
    trip, _ = get_trip_for_participant(
        trip_id=trip_id,
        user=user,
        roles=[TripRole.ADMIN, TripRole.EDITOR]
    )

    amount = validate_amount(amount)
    currency = currency or trip.default_currency
    if currency not in Currency.values:
        raise ValueError(f"Invalid currency. Must be one of: {Currency.values}")

    # Duplicates collapse, first occurrence keeps its position
    participant_ids = list(dict.fromkeys(participant_ids))
    splits = split_equally(amount, participant_ids)

    referenced = list(participant_ids)
    if paid_by_id is not None:
        referenced.append(paid_by_id)
    _require_trip_participants(trip.id, referenced)

    expense_kwargs = {}
    if expense_date is not None:
        expense_kwargs['expense_date'] = expense_date

    expense = Expense.objects.create(
        trip=trip,
        description=description,
        amount=amount,
        currency=currency,
        paid_by_id=paid_by_id,
        split_type=SplitType.EQUAL,
        created_by=user,
        **expense_kwargs
    )
    ExpenseShare.objects.bulk_create([
        ExpenseShare(expense=expense, participant_id=participant_id, amount=share)
        for participant_id, share in splits
    ])

    logger.info(
        "expense.created expense=%s trip=%s amount=%s currency=%s shares=%s user=%s",
        expense.id, trip.id, amount, currency, len(splits), user.id,
    )
    return expense


def get_trip_expenses(*, trip_id: UUID, user: User) -> QuerySet[Expense]:
    """
    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
    """
    get_trip_for_participant(trip_id=trip_id, user=user)

    return (
        Expense.objects
        .filter(trip_id=trip_id)
        .select_related('paid_by', 'created_by')
        .prefetch_related('shares__participant')
    )


@transaction.atomic
def delete_expense(*, expense_id: UUID, user: User) -> None:
    """
    Delete an expense (creator or trip admin).

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If user is neither creator nor admin
    """
    try:
        expense = Expense.objects.select_for_update().get(id=expense_id)
    except Expense.DoesNotExist:
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    _, participant = get_trip_for_participant(trip_id=expense.trip_id, user=user)

    if expense.created_by_id != user.id and participant.role != TripRole.ADMIN:
        raise InsufficientPermissionsError("Only the creator or a trip admin can delete this expense")

    expense.delete()
    logger.info("expense.deleted expense=%s trip=%s user=%s", expense_id, expense.trip_id, user.id)
