"""Errors raised by account services. Views turn these into HTTP responses."""


class AccountsServiceError(Exception):
    pass


# Sign-up and login

class UserRegistrationError(AccountsServiceError):
    """Email already registered."""


class InvalidCredentialsError(AccountsServiceError):
    """Unknown email or wrong password (reported as 401)."""


class InactiveAccountError(AccountsServiceError):
    """Account is DISABLED or DELETED and may not log in (403)."""


# Lifecycle changes that shrink the electorate

class UserNotFoundError(AccountsServiceError):
    """No user with the given id or email."""


class PasswordConfirmationError(AccountsServiceError):
    """Self-deletion attempted with the wrong password."""


class StatusChangeForbiddenError(AccountsServiceError):
    """Actor is neither staff nor an admin of a trip shared with the target."""


class InvalidStatusChangeError(AccountsServiceError):
    """
    Requested status transition is not allowed: reactivation, a change
    to one's own account, or a change to an already deleted user.
    """
