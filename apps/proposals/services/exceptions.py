"""
Domain-specific exceptions for proposals app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class ProposalsServiceError(Exception):
    """Base exception for all proposals service errors."""
    pass


class ItemNotFoundError(ProposalsServiceError):
    """Raised when a proposed item does not exist."""
    pass


class OwnItemVoteError(ProposalsServiceError):
    """Raised when a user votes on an item they proposed."""
    pass


class ItemNotPendingError(ProposalsServiceError):
    """Raised when voting on an item that is already approved or rejected."""

    def __init__(self, current_status: str):
        self.current_status = current_status
        super().__init__(f"Item is already {current_status.lower()}")


class ItemNotApprovedError(ProposalsServiceError):
    """Raised when checking in on an item that is not approved."""

    def __init__(self, current_status: str):
        self.current_status = current_status
        super().__init__(f"Cannot check an item with status {current_status.lower()}")


class DuplicateItemError(ProposalsServiceError):
    """Raised when the same proposal is submitted twice in a short window."""
    pass


class TripAccessError(ProposalsServiceError):
    """Raised when the user is not allowed to act on the item's trip."""
    pass
