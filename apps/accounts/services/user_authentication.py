"""Login for trip members."""

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.models import UserStatus
from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)

INACTIVE_MESSAGES = {
    UserStatus.DISABLED: "Account is disabled",
    UserStatus.DELETED: "Account has been deleted",
}


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp last_login.

    Only ACTIVE users may log in. DISABLED and DELETED users are rejected
    after the password check so a wrong password never reveals status.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account is not ACTIVE
    """
    user = User.objects.filter(email__iexact=email.strip()).first()

    if user is None or not user.check_password(password):
        logger.info("auth.failed reason=bad_credentials")
        raise InvalidCredentialsError("Invalid email or password")

    if user.status != UserStatus.ACTIVE:
        logger.info("auth.failed reason=inactive user=%s status=%s", user.id, user.status)
        raise InactiveAccountError(INACTIVE_MESSAGES.get(user.status, "Account is inactive"))

    user.last_login = timezone.now()
    User.objects.filter(pk=user.pk).update(last_login=user.last_login)

    return user
