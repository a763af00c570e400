"""
Electorate recalculation.

When eligible voters disappear (account disabled or deleted, participant
removed) a smaller majority may already be met. Pending items are
re-evaluated in bulk inside the caller's transaction so the eligibility
change and its consequences commit or roll back together.

Past votes count regardless of the voter's current status.
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from apps.proposals.models import ProposedItem, ItemStatus, Vote, VoteValue
from apps.trips.models import TripParticipant

from .tally import required_votes, decide_status

logger = logging.getLogger(__name__)

# Keeps IN (...) lists below database parameter limits
BATCH_SIZE = 500


def _batches(values: list, size: int = BATCH_SIZE):
    for start in range(0, len(values), size):
        yield values[start:start + size]


def _eligible_counts(trip_ids: list) -> dict:
    counts = {}
    for batch in _batches(trip_ids):
        rows = (
            TripParticipant.objects
            .filter(trip_id__in=batch)
            .eligible_voters()
            .values('trip_id')
            .annotate(eligible=Count('id'))
        )
        for row in rows:
            counts[row['trip_id']] = row['eligible']
    return counts


def _vote_tallies(item_ids: list) -> dict:
    tallies = defaultdict(lambda: {'approvals': 0, 'rejections': 0})
    for batch in _batches(item_ids):
        rows = (
            Vote.objects
            .filter(item_id__in=batch)
            .values('item_id', 'value')
            .annotate(total=Count('id'))
        )
        for row in rows:
            key = 'approvals' if row['value'] == VoteValue.APPROVE else 'rejections'
            tallies[row['item_id']][key] = row['total']
    return tallies


def _bulk_set_status(item_ids: list, new_status: str) -> int:
    updated = 0
    now = timezone.now()
    for batch in _batches(item_ids):
        updated += (
            ProposedItem.objects
            .filter(id__in=batch, status=ItemStatus.PENDING)
            .update(status=new_status, updated_at=now)
        )
    return updated


@transaction.atomic
def recalculate_pending_items(*, trip_ids: Optional[Iterable] = None) -> int:
    """
    Re-evaluate PENDING items against each trip's current electorate.

    Uses one grouped count for eligible voters, one grouped count for
    vote tallies and two bulk updates, regardless of how many items are
    pending. Trips without eligible voters keep their items PENDING.

    Args:
        trip_ids: Restrict to these trips; all trips when None

    Returns:
        Number of items whose status changed
    """
    pending = ProposedItem.objects.filter(status=ItemStatus.PENDING)
    if trip_ids is not None:
        pending = pending.filter(trip_id__in=list(trip_ids))

    pending_items = list(pending.values_list('id', 'trip_id'))
    if not pending_items:
        return 0

    trip_set = list({trip_id for _, trip_id in pending_items})
    eligible = _eligible_counts(trip_set)
    thresholds = {
        trip_id: required_votes(eligible.get(trip_id, 0))
        for trip_id in trip_set
    }

    unreachable = [trip_id for trip_id, required in thresholds.items() if required is None]
    if unreachable:
        logger.warning(
            "recalculate.skipped reason=no_eligible_voters trips=%s",
            ",".join(str(trip_id) for trip_id in unreachable),
        )

    tallies = _vote_tallies([item_id for item_id, _ in pending_items])

    to_approve = []
    to_reject = []
    for item_id, trip_id in pending_items:
        tally = tallies.get(item_id)
        if tally is None:
            continue
        decision = decide_status(tally['approvals'], tally['rejections'], thresholds[trip_id])
        if decision == ItemStatus.APPROVED:
            to_approve.append(item_id)
        elif decision == ItemStatus.REJECTED:
            to_reject.append(item_id)

    updated = 0
    if to_approve:
        updated += _bulk_set_status(to_approve, ItemStatus.APPROVED)
    if to_reject:
        updated += _bulk_set_status(to_reject, ItemStatus.REJECTED)

    logger.info(
        "recalculate.done trips=%s pending_checked=%s approved=%s rejected=%s changed=%s",
        len(trip_set), len(pending_items), len(to_approve), len(to_reject), updated,
    )
    return updated
