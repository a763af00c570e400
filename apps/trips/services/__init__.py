"""Services for trips business logic."""

from .exceptions import (
    TripsServiceError,
    TripNotFoundError,
    NotParticipantError,
    InsufficientPermissionsError,
    UserNotFoundError,
    InactiveUserError,
    AlreadyParticipantError,
    ParticipantNotFoundError,
    LastAdminError,
    ParticipantInUseError,
)
from .trip_management import (
    create_trip,
    get_trip_by_id,
    get_trip_for_participant,
    get_user_trips,
    update_trip,
    delete_trip,
)
from .participant_management import (
    add_registered_participant,
    add_ghost_participant,
    update_participant_role,
    remove_participant,
    get_trip_participants,
)

__all__ = [
    # Exceptions
    'TripsServiceError',
    'TripNotFoundError',
    'NotParticipantError',
    'InsufficientPermissionsError',
    'UserNotFoundError',
    'InactiveUserError',
    'AlreadyParticipantError',
    'ParticipantNotFoundError',
    'LastAdminError',
    'ParticipantInUseError',
    # Trip management
    'create_trip',
    'get_trip_by_id',
    'get_trip_for_participant',
    'get_user_trips',
    'update_trip',
    'delete_trip',
    # Participant management
    'add_registered_participant',
    'add_ghost_participant',
    'update_participant_role',
    'remove_participant',
    'get_trip_participants',
]
