"""Payment management service."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.expenses.models import Payment
from apps.trips.models import Currency, TripParticipant, TripRole
from apps.trips.services import get_trip_for_participant

from .exceptions import (
    PaymentNotFoundError,
    IneligibleSplitParticipantError,
    SameParticipantPaymentError,
)
from .expense_management import validate_amount

logger = logging.getLogger(__name__)


@transaction.atomic
def create_payment(
    *,
    trip_id: UUID,
    user: User,
    from_participant_id: UUID,
    to_participant_id: UUID,
    amount: Decimal,
    currency: Optional[str] = None,
    paid_at: Optional[datetime] = None
) -> Payment:
    """
    Record a direct transfer between two participants of a trip.

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If user is a VIEWER
        SameParticipantPaymentError: If sender and receiver are the same
        IneligibleSplitParticipantError: If either side is not in the trip
        InvalidAmountError: If amount is not valid
        ValueError: If currency is invalid
    """
    trip, _ = get_trip_for_participant(
        trip_id=trip_id,
        user=user,
        roles=[TripRole.ADMIN, TripRole.EDITOR]
    )

    if str(from_participant_id) == str(to_participant_id):
        raise SameParticipantPaymentError("Sender and receiver cannot be the same participant")

    amount = validate_amount(amount)
    currency = currency or trip.default_currency
    if currency not in Currency.values:
        raise ValueError(f"Invalid currency. Must be one of: {Currency.values}")

    found = TripParticipant.objects.filter(
        trip=trip,
        id__in=[from_participant_id, to_participant_id]
    ).count()
    if found != 2:
        raise IneligibleSplitParticipantError("Both participants must belong to this trip")

    payment = Payment.objects.create(
        trip=trip,
        from_participant_id=from_participant_id,
        to_participant_id=to_participant_id,
        amount=amount,
        currency=currency,
        paid_at=paid_at or timezone.now(),
        created_by=user,
    )

    logger.info(
        "payment.created payment=%s trip=%s from=%s to=%s amount=%s currency=%s user=%s",
        payment.id, trip.id, from_participant_id, to_participant_id, amount, currency, user.id,
    )
    return payment


def get_trip_payments(*, trip_id: UUID, user: User) -> QuerySet[Payment]:
    get_trip_for_participant(trip_id=trip_id, user=user)

    return (
        Payment.objects
        .filter(trip_id=trip_id)
        .select_related('from_participant', 'to_participant')
    )


@transaction.atomic
def delete_payment(*, payment_id: UUID, user: User) -> None:
    """
    Delete a payment (trip admin only).

    Raises:
        PaymentNotFoundError: If payment doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If user is not an admin
    """
    try:
        payment = Payment.objects.select_for_update().get(id=payment_id)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError(f"Payment with ID {payment_id} not found")

    get_trip_for_participant(trip_id=payment.trip_id, user=user, roles=[TripRole.ADMIN])

    payment.delete()
    logger.info("payment.deleted payment=%s trip=%s user=%s", payment_id, payment.trip_id, user.id)
