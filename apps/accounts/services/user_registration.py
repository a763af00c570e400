"""Sign-up for new trip members."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "A user with this email already exists"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@transaction.atomic
def register_user(*, email: str, password: str, display_name: str = "") -> User:
    """
    Create an ACTIVE user, who immediately counts as a voter in any trip
    they join as a registered participant.

    Emails are stored lowercased. The display name is what other members
    see on proposals and settlement lines; when blank the local part of
    the email is shown instead.

    Raises:
        UserRegistrationError: The email is already registered
    """
    email = _normalize_email(email)

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError(EMAIL_TAKEN)

    try:
        # Savepoint keeps the outer transaction usable after a unique violation
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name.strip(),
            )
    except IntegrityError:
        raise UserRegistrationError(EMAIL_TAKEN)

    logger.info("user.registered user=%s", user.id)
    return user
