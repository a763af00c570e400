"""
Participant management service.

Handles trip membership with concurrency protection. Removing a
registered participant shrinks the trip's electorate, so pending
proposals of that trip are re-evaluated in the same transaction.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User, UserStatus
from apps.proposals.services.recalculation import recalculate_pending_items
from apps.trips.models import Trip, TripParticipant, TripRole, ParticipantKind

from .exceptions import (
    TripNotFoundError,
    UserNotFoundError,
    InactiveUserError,
    AlreadyParticipantError,
    ParticipantNotFoundError,
    LastAdminError,
    ParticipantInUseError,
)
from .trip_management import get_trip_for_participant

logger = logging.getLogger(__name__)


def _lock_trip(trip_id: UUID) -> Trip:
    try:
        return Trip.objects.select_for_update().get(id=trip_id)
    except Trip.DoesNotExist:
        raise TripNotFoundError(f"Trip with ID {trip_id} not found")


def _lock_participant(trip: Trip, participant_id: UUID) -> TripParticipant:
    try:
        return (
            TripParticipant.objects
            .select_for_update()
            .get(id=participant_id, trip=trip)
        )
    except TripParticipant.DoesNotExist:
        raise ParticipantNotFoundError("Participant not found in this trip")


@transaction.atomic
def add_registered_participant(
    *,
    trip_id: UUID,
    email: str,
    added_by: User,
    role: str = TripRole.VIEWER
) -> TripParticipant:
    """
    Add an existing ACTIVE user to a trip (admin only).

    Args:
        trip_id: UUID of the trip
        email: Email of the user to add
        added_by: Admin performing the action
        role: EDITOR or VIEWER

    Returns:
        Created TripParticipant instance

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError / InsufficientPermissionsError: If added_by is not admin
        UserNotFoundError: If no user has that email
        InactiveUserError: If the user is disabled or deleted
        AlreadyParticipantError: If the user already takes part in the trip
    """
    get_trip_for_participant(trip_id=trip_id, user=added_by, roles=[TripRole.ADMIN])
    trip = _lock_trip(trip_id)

    try:
        target = User.objects.get(email__iexact=email.strip())
    except User.DoesNotExist:
        raise UserNotFoundError("No user exists with that email")

    if target.status != UserStatus.ACTIVE:
        raise InactiveUserError("The user does not have an active account")

    if trip.participants.filter(user=target).exists():
        raise AlreadyParticipantError("This user is already a participant of the trip")

    try:
        with transaction.atomic():
            participant = TripParticipant.objects.create(
                trip=trip,
                user=target,
                name=target.get_display_name(),
                kind=ParticipantKind.REGISTERED,
                role=role,
            )
    except IntegrityError:
        raise AlreadyParticipantError("This user is already a participant of the trip")

    logger.info(
        "trip.participant.added trip=%s user=%s role=%s by=%s",
        trip.id, target.id, role, added_by.id,
    )
    return participant


@transaction.atomic
def add_ghost_participant(
    *,
    trip_id: UUID,
    name: str,
    added_by: User,
    role: str = TripRole.VIEWER
) -> TripParticipant:
    """Add a participant without an account (admin only)."""
    get_trip_for_participant(trip_id=trip_id, user=added_by, roles=[TripRole.ADMIN])

    participant = TripParticipant.objects.create(
        trip_id=trip_id,
        user=None,
        name=name.strip(),
        kind=ParticipantKind.GHOST,
        role=role,
    )

    logger.info(
        "trip.participant.ghost.added trip=%s name=%s by=%s",
        trip_id, participant.name, added_by.id,
    )
    return participant


@transaction.atomic
def update_participant_role(
    *,
    trip_id: UUID,
    participant_id: UUID,
    new_role: str,
    updated_by: User
) -> TripParticipant:
    """
    Change a participant's role (admin only).

    The trip always keeps at least one ADMIN.

    Raises:
        ParticipantNotFoundError: If participant is not in the trip
        LastAdminError: If the only admin would be demoted
        ValueError: If new_role is invalid
    """
    if new_role not in TripRole.values:
        raise ValueError(f"Invalid role. Must be one of: {TripRole.values}")

    get_trip_for_participant(trip_id=trip_id, user=updated_by, roles=[TripRole.ADMIN])
    trip = _lock_trip(trip_id)
    participant = _lock_participant(trip, participant_id)

    if participant.role == TripRole.ADMIN and new_role != TripRole.ADMIN:
        if trip.participants.filter(role=TripRole.ADMIN).count() <= 1:
            raise LastAdminError("The trip must keep at least one admin")

    participant.role = new_role
    participant.save(update_fields=['role'])

    logger.info(
        "trip.participant.role.changed trip=%s participant=%s role=%s by=%s",
        trip.id, participant.id, new_role, updated_by.id,
    )
    return participant


@transaction.atomic
def remove_participant(
    *,
    trip_id: UUID,
    participant_id: UUID,
    removed_by: User
) -> int:
    """
    Remove a participant from a trip (admin only).

    Returns:
        Number of the trip's pending items whose status changed

    Raises:
        ParticipantNotFoundError: If participant is not in the trip
        LastAdminError: If removing the only admin
        ParticipantInUseError: If expenses or payments still reference the participant
    """
    get_trip_for_participant(trip_id=trip_id, user=removed_by, roles=[TripRole.ADMIN])
    trip = _lock_trip(trip_id)
    participant = _lock_participant(trip, participant_id)

    if participant.role == TripRole.ADMIN:
        if trip.participants.filter(role=TripRole.ADMIN).count() <= 1:
            raise LastAdminError("You cannot remove the only admin of the trip")

    if (
        participant.paid_expenses.exists()
        or participant.expense_shares.exists()
        or participant.payments_sent.exists()
        or participant.payments_received.exists()
    ):
        raise ParticipantInUseError(
            "This participant has expenses or payments. Delete them first."
        )

    was_registered = participant.kind == ParticipantKind.REGISTERED
    participant.delete()

    items_changed = 0
    if was_registered:
        items_changed = recalculate_pending_items(trip_ids=[trip.id])

    logger.info(
        "trip.participant.removed trip=%s participant=%s by=%s items_recalculated=%s",
        trip.id, participant_id, removed_by.id, items_changed,
    )
    return items_changed


def get_trip_participants(*, trip_id: UUID, user: User) -> QuerySet[TripParticipant]:
    """
    List a trip's participants in joining order (participants only).

    Raises:
        TripNotFoundError: If trip doesn't exist
        NotParticipantError: If user is not a participant
    """
    get_trip_for_participant(trip_id=trip_id, user=user)

    return (
        TripParticipant.objects
        .filter(trip_id=trip_id)
        .select_related('user')
        .order_by('joined_at')
    )
