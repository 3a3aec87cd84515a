# lawbook/security.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from lawbook.db import get_db
from lawbook.models.user import User, UserRole
from lawbook.sessions import put_flash, session_user_id
from lawbook.stores import users

LOGIN_URL = "/user/login"
PERMISSION_DENIED_FLASH = "You don't have permission to access this page"


class RedirectRequired(Exception):
    """Raised by guards; turned into a 303 redirect by the app."""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url


def is_authenticated(request: Request) -> bool:
    return bool(getattr(request.state, "is_authenticated", False))


def authenticate(request: Request, db: Session = Depends(get_db)) -> None:
    """
    Mark the request as authenticated when the session's user id still
    belongs to an account. A stale id is left in the session untouched.
    """
    request.state.is_authenticated = False
    user_id = session_user_id(request)
    if user_id is None:
        return
    if users.exists(db, user_id):
        request.state.is_authenticated = True


def require_authentication(request: Request) -> None:
    if not is_authenticated(request):
        raise RedirectRequired(LOGIN_URL)
    # read by the template renderer
    request.state.no_store = True


def require_any_role(*allowed_roles: UserRole):
    allowed = {UserRole(role) for role in allowed_roles}

    def _checker(request: Request, db: Session = Depends(get_db)) -> User:
        # NoRecord here means the account vanished mid-request: let it fail the request
        user = users.get(db, session_user_id(request))
        if user.role not in allowed:
            put_flash(request, PERMISSION_DENIED_FLASH)
            raise RedirectRequired("/")
        return user

    return _checker


def require_role(role: UserRole):
    return require_any_role(role)
