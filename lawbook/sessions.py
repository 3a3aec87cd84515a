# lawbook/sessions.py
"""
Database-backed session middleware.

Works like Starlette's SessionMiddleware (``request.session`` is a plain dict),
except that the cookie only carries a signed opaque token and the session data
lives in the ``sessions`` table.
"""
import logging

from itsdangerous import BadSignature, TimestampSigner
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection, Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from lawbook.db import SessionLocal
from lawbook.errors import ExpiredSession, NoRecord
from lawbook.stores import sessions as session_store

log = logging.getLogger(__name__)

SESSION_USER_KEY = "authenticated_user_id"
FLASH_KEY = "flash"

_TOKEN_SCOPE_KEY = "lawbook.session_token"
_RENEW_SCOPE_KEY = "lawbook.session_renew"


def renew_token(request: Request) -> None:
    """Issue a new token when the response is sent; the old row is dropped."""
    request.scope[_RENEW_SCOPE_KEY] = True


def put_flash(request: Request, message: str) -> None:
    request.session[FLASH_KEY] = message


def pop_flash(request: Request) -> str:
    return request.session.pop(FLASH_KEY, "")


def session_user_id(request: Request) -> int | None:
    value = request.session.get(SESSION_USER_KEY)
    return int(value) if value else None


class DatabaseSessionMiddleware:
    def __init__(
        self,
        app: ASGIApp,
        secret_key: str,
        session_cookie: str = "session",
        max_age: int = 12 * 60 * 60,
        path: str = "/",
        same_site: str = "lax",
        https_only: bool = True,
        session_factory=SessionLocal,
    ) -> None:
        self.app = app
        self.signer = TimestampSigner(str(secret_key))
        self.session_cookie = session_cookie
        self.max_age = max_age
        self.session_factory = session_factory
        self.security_flags = "httponly; samesite=" + same_site
        if https_only:
            self.security_flags += "; secure"
        self.path = path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        token = None
        data = {}

        if self.session_cookie in connection.cookies:
            token = self._unsign(connection.cookies[self.session_cookie])
            if token is not None:
                loaded = await run_in_threadpool(self._load, token)
                if loaded is None:
                    token = None
                else:
                    data = loaded
        had_cookie = self.session_cookie in connection.cookies

        scope["session"] = data
        scope[_TOKEN_SCOPE_KEY] = token
        scope[_RENEW_SCOPE_KEY] = False
        initial = dict(data)

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                issued = await run_in_threadpool(self._commit, scope, token, initial)
                headers = MutableHeaders(scope=message)
                if issued:
                    headers.append("Set-Cookie", self._cookie(self.signer.sign(issued).decode("utf-8"), self.max_age))
                elif had_cookie and not scope["session"]:
                    headers.append("Set-Cookie", self._cookie("null", 0, expired=True))
            await send(message)

        await self.app(scope, receive, send_wrapper)

    def _unsign(self, value: str) -> str | None:
        try:
            return self.signer.unsign(value.encode("utf-8"), max_age=self.max_age).decode("utf-8")
        except BadSignature:
            return None

    def _load(self, token: str) -> dict | None:
        db = self.session_factory()
        try:
            return session_store.load(db, token)
        except (NoRecord, ExpiredSession):
            return None
        finally:
            db.close()

    def _commit(self, scope: Scope, token: str | None, initial: dict) -> str | None:
        """Persist the session. Returns a newly issued token, if any."""
        data = scope["session"]
        renew = scope.get(_RENEW_SCOPE_KEY, False)
        user_id = data.get(SESSION_USER_KEY)

        db = self.session_factory()
        try:
            if renew and token is not None:
                session_store.delete(db, token)
                token = None
            if token is None:
                if not data:
                    return None
                issued = session_store.insert(db, user_id, data)
                if renew:
                    log.debug("Session token renewed")
                return issued
            if not data:
                session_store.delete(db, token)
            elif data != initial:
                if not session_store.save(db, token, data, user_id):
                    # row was removed while the request ran
                    log.debug("Session row missing on save, issuing a new token")
                    return session_store.insert(db, user_id, data)
            return None
        finally:
            db.close()

    def _cookie(self, value: str, max_age: int, expired: bool = False) -> str:
        header = f"{self.session_cookie}={value}; path={self.path}; Max-Age={max_age}; {self.security_flags}"
        if expired:
            header += "; expires=Thu, 01 Jan 1970 00:00:00 GMT"
        return header
