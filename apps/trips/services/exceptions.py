"""
Domain-specific exceptions for trips app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class TripsServiceError(Exception):
    """Base exception for all trips service errors."""
    pass


class TripNotFoundError(TripsServiceError):
    """Raised when a trip does not exist."""
    pass


class NotParticipantError(TripsServiceError):
    """Raised when a user is not a participant of the trip."""
    pass


class InsufficientPermissionsError(TripsServiceError):
    """Raised when a participant's role does not allow the action."""
    pass


class UserNotFoundError(TripsServiceError):
    """Raised when no user exists for the given email."""
    pass


class InactiveUserError(TripsServiceError):
    """Raised when adding a user whose account is not active."""
    pass


class AlreadyParticipantError(TripsServiceError):
    """Raised when the user already takes part in the trip."""
    pass


class ParticipantNotFoundError(TripsServiceError):
    """Raised when a participant does not belong to the trip."""
    pass


class LastAdminError(TripsServiceError):
    """Raised when an action would leave the trip without an admin."""
    pass


class ParticipantInUseError(TripsServiceError):
    """Raised when removing a participant still referenced by expenses or payments."""
    pass
