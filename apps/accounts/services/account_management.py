"""
Account management service.

Status changes shrink the voting electorate, so every change re-evaluates
pending proposals inside the same transaction.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import UserStatus
from apps.proposals.services.recalculation import recalculate_pending_items
from apps.trips.models import TripParticipant, TripRole

from .exceptions import (
    PasswordConfirmationError,
    UserNotFoundError,
    InvalidStatusChangeError,
    StatusChangeForbiddenError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

ALLOWED_STATUS_CHANGES = [UserStatus.DISABLED, UserStatus.DELETED]


def can_manage_user(*, actor: User, target: User) -> bool:
    """Staff, or an ADMIN of a trip the target takes part in."""
    if actor.is_staff:
        return True
    return TripParticipant.objects.filter(
        user=actor,
        role=TripRole.ADMIN,
        trip__participants__user=target,
    ).exists()


@transaction.atomic
def change_user_status(
    *,
    target_user_id: UUID,
    new_status: str,
    changed_by: User
) -> tuple[User, int]:
    """
    Disable or delete a user and recalculate pending items.

    ACTIVE is never set here; accounts become active through registration.

    Args:
        target_user_id: UUID of the user to change
        new_status: DISABLED or DELETED
        changed_by: User performing the change

    Returns:
        Tuple of (updated User, number of items whose status changed)

    Raises:
        InvalidStatusChangeError: If the change is not allowed
        UserNotFoundError: If the target user doesn't exist
        StatusChangeForbiddenError: If changed_by may not manage the target
    """
    if new_status not in ALLOWED_STATUS_CHANGES:
        raise InvalidStatusChangeError(
            f"Invalid status. Must be one of: {[s.value for s in ALLOWED_STATUS_CHANGES]}"
        )

    if str(target_user_id) == str(changed_by.id):
        logger.warning("user.status.self_change_attempt user=%s", changed_by.id)
        raise InvalidStatusChangeError("You cannot change your own status")

    try:
        user = (
            User.objects
            .select_for_update()
            .get(id=target_user_id)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {target_user_id} not found")

    if not can_manage_user(actor=changed_by, target=user):
        logger.warning(
            "user.status.forbidden target=%s by=%s", user.id, changed_by.id
        )
        raise StatusChangeForbiddenError(
            "Only staff or an admin of a shared trip can change this user's status"
        )

    if user.status == UserStatus.DELETED:
        raise InvalidStatusChangeError("User is already deleted")

    if user.status == new_status:
        raise InvalidStatusChangeError(f"User is already {new_status.lower()}")

    previous_status = user.status
    if new_status == UserStatus.DELETED:
        user.anonymize()
    else:
        user.status = new_status
        user.save(update_fields=['status'])

    items_changed = recalculate_pending_items()

    logger.info(
        "user.status.changed target=%s from=%s to=%s by=%s items_recalculated=%s",
        user.id, previous_status, new_status, changed_by.id, items_changed,
    )
    return user, items_changed


@transaction.atomic
def delete_user_account(*, user_id: UUID, password: str) -> int:
    """
    Self-service account deletion (anonymization).

    Args:
        user_id: User's ID
        password: User's password for confirmation

    Returns:
        Number of pending items whose status changed

    Raises:
        UserNotFoundError: If user doesn't exist
        PasswordConfirmationError: If password is incorrect
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(id=user_id)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if not user.check_password(password):
        raise PasswordConfirmationError("Invalid password")

    user.anonymize()

    items_changed = recalculate_pending_items()
    logger.info("user.deleted user=%s items_recalculated=%s", user.id, items_changed)
    return items_changed
