"""
Account services.

Disabling or deleting a user removes them from every electorate, so
`change_user_status` and `delete_user_account` re-evaluate pending
proposals before returning.
"""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    PasswordConfirmationError,
    InvalidStatusChangeError,
    StatusChangeForbiddenError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .account_management import change_user_status, delete_user_account

__all__ = [
    'register_user',
    'authenticate_user',
    'change_user_status',
    'delete_user_account',
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'PasswordConfirmationError',
    'InvalidStatusChangeError',
    'StatusChangeForbiddenError',
]
