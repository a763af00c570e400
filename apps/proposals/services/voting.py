"""
Voting service.

Every vote runs under an exclusive row lock on the item
(SELECT ... FOR UPDATE), so concurrent votes on the same item are
serialized: the second voter's tally always includes the first vote.
Votes on different items never block each other.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from apps.accounts.models import User
from apps.proposals.models import ProposedItem, ItemStatus, ItemCategory, Vote, VoteValue
from apps.trips.models import Trip, TripParticipant, TripRole
from apps.trips.services.exceptions import NotParticipantError, InsufficientPermissionsError
from apps.trips.services.trip_management import get_trip_for_participant

from .exceptions import (
    ItemNotFoundError,
    OwnItemVoteError,
    ItemNotPendingError,
    DuplicateItemError,
    TripAccessError,
)
from .tally import VoteTally, required_votes, decide_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteResult:
    item_id: UUID
    new_status: str
    vote_value: str
    tally: VoteTally


def count_eligible_voters(trip_id: UUID) -> int:
    """REGISTERED participants of the trip whose account is ACTIVE."""
    return TripParticipant.objects.filter(trip_id=trip_id).eligible_voters().count()


def count_votes(item_id: UUID) -> tuple[int, int]:
    """Return (approvals, rejections) for an item."""
    counts = Vote.objects.filter(item_id=item_id).aggregate(
        approvals=Count('id', filter=Q(value=VoteValue.APPROVE)),
        rejections=Count('id', filter=Q(value=VoteValue.REJECT)),
    )
    return counts['approvals'], counts['rejections']


def compute_tally(item: ProposedItem) -> VoteTally:
    """Tally an item against its trip's current electorate."""
    approvals, rejections = count_votes(item.id)
    eligible = count_eligible_voters(item.trip_id)
    return VoteTally(
        approvals=approvals,
        rejections=rejections,
        required=required_votes(eligible),
        eligible_participants=eligible,
    )


def require_trip_access(*, trip_id: UUID, user: User, roles=None) -> TripParticipant:
    """
    Return the caller's participant row, translating trip membership
    errors into TripAccessError.

    Raises:
        TripNotFoundError: If trip doesn't exist
        TripAccessError: If user is not a participant or lacks the role
    """
    try:
        _, participant = get_trip_for_participant(trip_id=trip_id, user=user, roles=roles)
    except (NotParticipantError, InsufficientPermissionsError) as e:
        raise TripAccessError(str(e)) from e
    return participant


@transaction.atomic
def create_item(
    *,
    trip_id: UUID,
    user: User,
    title: str,
    category: str,
    description: str = '',
    location: str = '',
    external_url: str = '',
    image_url: str = ''
) -> ProposedItem:
    """
    Propose an item and record the creator's APPROVE vote in one step.

    The threshold is checked right away, so on a trip with a single
    eligible voter the item is approved immediately.

    Args:
        trip_id: UUID of the trip
        user: Proposing user (ADMIN or EDITOR of the trip)
        title: Item title
        category: PLACE or FOOD

    Returns:
        Created ProposedItem (status may already be APPROVED)

    Raises:
        TripNotFoundError: If trip doesn't exist
        TripAccessError: If user is not an ADMIN or EDITOR participant
        DuplicateItemError: If the same proposal was just submitted
        ValueError: If category is invalid
    """
    if category not in ItemCategory.values:
        raise ValueError(f"Invalid category. Must be one of: {ItemCategory.values}")

    require_trip_access(trip_id=trip_id, user=user, roles=[TripRole.ADMIN, TripRole.EDITOR])

    # Concurrent proposals on the same trip queue on this lock
    Trip.objects.select_for_update().get(id=trip_id)

    title = title.strip()
    window_start = timezone.now() - timedelta(seconds=settings.ITEM_DUPLICATE_WINDOW_SECONDS)
    is_duplicate = ProposedItem.objects.filter(
        trip_id=trip_id,
        created_by=user,
        title__iexact=title,
        category=category,
        created_at__gt=window_start,
    ).exists()
    if is_duplicate:
        logger.warning(
            "item.duplicate_submission user=%s trip=%s category=%s",
            user.id, trip_id, category,
        )
        raise DuplicateItemError("Duplicate submission. Please wait before trying again.")

    item = ProposedItem.objects.create(
        trip_id=trip_id,
        title=title,
        category=category,
        description=description,
        location=location,
        external_url=external_url,
        image_url=image_url,
        created_by=user,
    )
    Vote.objects.create(item=item, user=user, value=VoteValue.APPROVE)

    tally = compute_tally(item)
    new_status = decide_status(tally.approvals, tally.rejections, tally.required)
    if new_status != ItemStatus.PENDING:
        item.status = new_status
        item.save(update_fields=['status', 'updated_at'])
        logger.info(
            "item.status.changed item=%s status=%s by=%s reason=creator_vote "
            "approvals=%s required=%s eligible=%s",
            item.id, new_status, user.id,
            tally.approvals, tally.required, tally.eligible_participants,
        )

    logger.info("item.created item=%s trip=%s category=%s user=%s", item.id, trip_id, category, user.id)
    return item


@transaction.atomic
def cast_vote(*, item_id: UUID, user: User, value: str) -> VoteResult:
    """
    Record a vote and move the item out of PENDING once a side has a majority.

    Runs atomically under an exclusive lock on the item row. Re-voting
    overwrites the previous value; repeating the same vote is a no-op.

    Args:
        item_id: UUID of the item
        user: Voting user (must be a trip participant)
        value: APPROVE or REJECT

    Returns:
        VoteResult with the resulting status and tally

    Raises:
        ItemNotFoundError: If item doesn't exist
        TripAccessError: If user is not a participant of the item's trip
        OwnItemVoteError: If user proposed the item
        ItemNotPendingError: If item is already approved or rejected
        ValueError: If value is invalid
    """
    if value not in VoteValue.values:
        raise ValueError(f"Invalid vote. Must be one of: {VoteValue.values}")

    try:
        item = (
            ProposedItem.objects
            .select_for_update()
            .get(id=item_id)
        )
    except ProposedItem.DoesNotExist:
        logger.warning("vote.rejected reason=item_not_found item=%s user=%s", item_id, user.id)
        raise ItemNotFoundError(f"Item with ID {item_id} not found")

    if not TripParticipant.objects.filter(trip_id=item.trip_id, user=user).exists():
        logger.warning("vote.rejected reason=not_participant item=%s user=%s", item_id, user.id)
        raise TripAccessError("You are not a participant of this trip")

    if item.created_by_id == user.id:
        logger.warning("vote.rejected reason=own_item item=%s user=%s", item_id, user.id)
        raise OwnItemVoteError("You cannot vote on your own item")

    if item.status != ItemStatus.PENDING:
        logger.warning(
            "vote.rejected reason=item_not_pending item=%s user=%s current_status=%s",
            item_id, user.id, item.status,
        )
        raise ItemNotPendingError(item.status)

    Vote.objects.update_or_create(
        user=user,
        item=item,
        defaults={'value': value},
    )

    # Counts are read under the item lock
    tally = compute_tally(item)
    new_status = decide_status(tally.approvals, tally.rejections, tally.required)

    if new_status != ItemStatus.PENDING:
        item.status = new_status
        item.save(update_fields=['status', 'updated_at'])
        logger.info(
            "item.status.changed item=%s status=%s by=%s value=%s "
            "approvals=%s rejections=%s required=%s eligible=%s",
            item.id, new_status, user.id, value,
            tally.approvals, tally.rejections, tally.required, tally.eligible_participants,
        )

    logger.info("vote.cast item=%s user=%s value=%s status=%s", item.id, user.id, value, new_status)

    return VoteResult(
        item_id=item.id,
        new_status=new_status,
        vote_value=value,
        tally=tally,
    )
