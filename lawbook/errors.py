# lawbook/errors.py
"""Failures raised by the user and session stores.

Storage failures are not wrapped: SQLAlchemy exceptions reach the caller as-is.
"""


class ModelError(Exception):
    """Base class for store-level failures."""


class NoRecord(ModelError):
    """No matching record found."""


class InvalidCredentials(ModelError):
    """Unknown email or wrong password; callers cannot tell which."""


class InactiveAccount(ModelError):
    """The account exists but has been deactivated."""


class DuplicateEmail(ModelError):
    """Another account already uses this email address."""


class ExpiredSession(ModelError):
    """The session token exists but its expiry has passed."""
