"""Services for proposals business logic."""

from .exceptions import (
    ProposalsServiceError,
    ItemNotFoundError,
    OwnItemVoteError,
    ItemNotPendingError,
    ItemNotApprovedError,
    DuplicateItemError,
    TripAccessError,
)
from .tally import VoteTally, required_votes, decide_status
from .voting import (
    VoteResult,
    count_eligible_voters,
    compute_tally,
    create_item,
    cast_vote,
)
from .recalculation import recalculate_pending_items
from .item_management import (
    get_item_by_id,
    get_trip_items,
    delete_item,
    check_item,
)

__all__ = [
    # Exceptions
    'ProposalsServiceError',
    'ItemNotFoundError',
    'OwnItemVoteError',
    'ItemNotPendingError',
    'ItemNotApprovedError',
    'DuplicateItemError',
    'TripAccessError',
    # Majority rules
    'VoteTally',
    'required_votes',
    'decide_status',
    # Voting
    'VoteResult',
    'count_eligible_voters',
    'compute_tally',
    'create_item',
    'cast_vote',
    # Recalculation
    'recalculate_pending_items',
    # Item management
    'get_item_by_id',
    'get_trip_items',
    'delete_item',
    'check_item',
]
