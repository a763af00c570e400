"""
Item management service.

Listing, deletion and check-ins for proposed items. Creation and
voting live in voting.py.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Count, OuterRef, Q, QuerySet, Subquery

from apps.accounts.models import User
from apps.proposals.models import ProposedItem, ItemStatus, ItemCheck, Vote, VoteValue
from apps.trips.models import TripRole

from .exceptions import ItemNotFoundError, ItemNotApprovedError, TripAccessError
from .voting import require_trip_access

logger = logging.getLogger(__name__)


def get_item_by_id(*, item_id: UUID) -> ProposedItem:
    try:
        return ProposedItem.objects.select_related('created_by', 'trip').get(id=item_id)
    except ProposedItem.DoesNotExist:
        raise ItemNotFoundError(f"Item with ID {item_id} not found")


def get_trip_items(
    *,
    trip_id: UUID,
    user: User,
    status: Optional[str] = None,
    category: Optional[str] = None
) -> QuerySet[ProposedItem]:
    """
    Items of a trip with vote tallies and the caller's own vote.

    Annotates approvals, rejections, check_count and my_vote.

    Raises:
        TripNotFoundError: If trip doesn't exist
        TripAccessError: If user is not a participant
    """
    require_trip_access(trip_id=trip_id, user=user)

    my_vote = Vote.objects.filter(item=OuterRef('pk'), user=user).values('value')[:1]

    queryset = (
        ProposedItem.objects
        .filter(trip_id=trip_id)
        .select_related('created_by')
        .annotate(
            approvals=Count('votes', filter=Q(votes__value=VoteValue.APPROVE), distinct=True),
            rejections=Count('votes', filter=Q(votes__value=VoteValue.REJECT), distinct=True),
            check_count=Count('checks', distinct=True),
            my_vote=Subquery(my_vote),
        )
        .order_by('-created_at')
    )

    if status:
        queryset = queryset.filter(status=status)
    if category:
        queryset = queryset.filter(category=category)

    return queryset


@transaction.atomic
def delete_item(*, item_id: UUID, user: User) -> None:
    """
    Delete an item (creator or trip admin).

    Raises:
        ItemNotFoundError: If item doesn't exist
        TripAccessError: If user is neither the creator nor a trip admin
    """
    try:
        item = ProposedItem.objects.select_for_update().get(id=item_id)
    except ProposedItem.DoesNotExist:
        raise ItemNotFoundError(f"Item with ID {item_id} not found")

    participant = require_trip_access(trip_id=item.trip_id, user=user)

    if item.created_by_id != user.id and participant.role != TripRole.ADMIN:
        raise TripAccessError("Only the creator or a trip admin can delete this item")

    item.delete()
    logger.info("item.deleted item=%s trip=%s user=%s", item_id, item.trip_id, user.id)


@transaction.atomic
def check_item(
    *,
    item_id: UUID,
    user: User,
    photo_url: str = ''
) -> tuple[ItemCheck, bool]:
    """
    Mark an APPROVED item as visited, optionally with a photo.

    Checking again replaces the photo.

    Returns:
        Tuple of (ItemCheck, created)

    Raises:
        ItemNotFoundError: If item doesn't exist
        TripAccessError: If user is not a participant
        ItemNotApprovedError: If item is not approved
    """
    item = get_item_by_id(item_id=item_id)
    require_trip_access(trip_id=item.trip_id, user=user)

    if item.status != ItemStatus.APPROVED:
        raise ItemNotApprovedError(item.status)

    check, created = ItemCheck.objects.update_or_create(
        user=user,
        item=item,
        defaults={'photo_url': photo_url},
    )

    logger.info("item.checked item=%s user=%s created=%s", item.id, user.id, created)
    return check, created
