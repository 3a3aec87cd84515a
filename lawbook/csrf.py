# lawbook/csrf.py
"""
Double-submit CSRF protection.

The session keeps a random secret, created the first time a form is rendered; forms carry a freshly masked copy of it on
every render so the value in the page changes from request to request.
"""
import base64
import binascii
import logging
import secrets

from fastapi import HTTPException, Request, status

log = logging.getLogger(__name__)

CSRF_SESSION_KEY = "csrf_secret"
CSRF_FORM_FIELD = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"
SECRET_BYTES = 32
SAFE_METHODS = {"GET", "HEAD", "OPTIONS", "TRACE"}


def _session_secret(request: Request, create: bool = False) -> bytes | None:
    encoded = request.session.get(CSRF_SESSION_KEY)
    if not encoded:
        if not create:
            return None
        encoded = base64.urlsafe_b64encode(secrets.token_bytes(SECRET_BYTES)).decode("ascii")
        request.session[CSRF_SESSION_KEY] = encoded
    return base64.urlsafe_b64decode(encoded)


def mask_token(secret: bytes) -> str:
    pad = secrets.token_bytes(len(secret))
    masked = bytes(a ^ b for a, b in zip(pad, secret))
    return base64.urlsafe_b64encode(pad + masked).decode("ascii")


def unmask_token(token: str) -> bytes | None:
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
    except (binascii.Error, ValueError):
        return None
    if len(raw) != 2 * SECRET_BYTES:
        return None
    pad, masked = raw[:SECRET_BYTES], raw[SECRET_BYTES:]
    return bytes(a ^ b for a, b in zip(pad, masked))


def generate_csrf_token(request: Request) -> str:
    """Per-request token to embed in forms."""
    return mask_token(_session_secret(request, create=True))


async def csrf_protect(request: Request) -> None:
    if request.method in SAFE_METHODS:
        return
    # only pages that rendered a form have a secret; no secret means no valid token
    secret = _session_secret(request)

    submitted = request.headers.get(CSRF_HEADER)
    if not submitted:
        form = await request.form()
        submitted = form.get(CSRF_FORM_FIELD)

    unmasked = unmask_token(submitted) if isinstance(submitted, str) and submitted else None
    if secret is None or unmasked is None or not secrets.compare_digest(unmasked, secret):
        log.warning("CSRF check failed for %s %s", request.method, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSRF token validation failed",
        )
