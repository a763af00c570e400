"""
Trip management service.

Handles trip CRUD operations with proper transaction safety.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Count, QuerySet

from apps.accounts.models import User
from apps.trips.models import Trip, TripParticipant, TripRole, ParticipantKind

from .exceptions import (
    TripNotFoundError,
    NotParticipantError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = [
    'name',
    'description',
    'destination',
    'start_date',
    'end_date',
    'default_currency',
]


@transaction.atomic
def create_trip(
    *,
    name: str,
    created_by: User,
    description: str = '',
    destination: str = '',
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    default_currency: Optional[str] = None
) -> Trip:
    """
    Create a trip and add the creator as its first ADMIN participant.

    Args:
        name: Trip name
        created_by: User creating the trip
        description: Optional description
        destination: Optional destination
        start_date: Optional first day
        end_date: Optional last day
        default_currency: Currency code, defaults to DEFAULT_TRIP_CURRENCY

    Returns:
        Created Trip instance
    """
    trip = Trip.objects.create(
        name=name,
        description=description,
        destination=destination,
        start_date=start_date,
        end_date=end_date,
        default_currency=default_currency or settings.DEFAULT_TRIP_CURRENCY,
        created_by=created_by,
    )

    TripParticipant.objects.create(
        trip=trip,
        user=created_by,
        name=created_by.get_display_name(),
        kind=ParticipantKind.REGISTERED,
        role=TripRole.ADMIN,
    )

    logger.info("trip.created trip=%s user=%s", trip.id, created_by.id)
    return trip


def get_trip_by_id(*, trip_id: UUID) -> Trip:
    try:
        return Trip.objects.select_related('created_by').get(id=trip_id)
    except Trip.DoesNotExist:
        raise TripNotFoundError(f"Trip with ID {trip_id} not found")


def get_trip_for_participant(
    *,
    trip_id: UUID,
    user: User,
    roles: Optional[list] = None
) -> tuple[Trip, TripParticipant]:
    """
    Load a trip and the caller's participant row.

    Args:
        trip_id: UUID of the trip
        user: User making the request
        roles: If given, the caller's role must be one of these

    Returns:
        Tuple of (Trip, TripParticipant)

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If the caller's role is not in roles
    """
    trip = get_trip_by_id(trip_id=trip_id)

    participant = trip.get_participant(user)
    if participant is None:
        raise NotParticipantError("You are not a participant of this trip")

    if roles is not None and participant.role not in roles:
        raise InsufficientPermissionsError(
            "Your role in this trip does not allow this action"
        )

    return trip, participant


def get_user_trips(*, user: User) -> QuerySet[Trip]:
    """Trips the user takes part in, with participant and item counts."""
    return (
        Trip.objects
        .filter(id__in=TripParticipant.objects.filter(user=user).values('trip_id'))
        .select_related('created_by')
        .annotate(
            participant_count=Count('participants', distinct=True),
            item_count=Count('items', distinct=True),
        )
        .order_by('-created_at')
    )


@transaction.atomic
def update_trip(*, trip_id: UUID, user: User, **data) -> Trip:
    """
    Update trip details (admin only).

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If user is not an admin
    """
    get_trip_for_participant(trip_id=trip_id, user=user, roles=[TripRole.ADMIN])

    trip = Trip.objects.select_for_update().get(id=trip_id)

    update_fields = []
    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(trip, field, data[field])
            update_fields.append(field)

    if update_fields:
        update_fields.append('updated_at')
        trip.save(update_fields=update_fields)

    return trip


@transaction.atomic
def delete_trip(*, trip_id: UUID, user: User) -> None:
    """
    Delete a trip with all its participants, proposals and expenses (admin only).

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
        InsufficientPermissionsError: If user is not an admin
    """
    trip, _ = get_trip_for_participant(trip_id=trip_id, user=user, roles=[TripRole.ADMIN])
    trip.delete()
    logger.info("trip.deleted trip=%s user=%s", trip_id, user.id)
