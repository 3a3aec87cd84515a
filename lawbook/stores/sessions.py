# lawbook/stores/sessions.py
"""
Session store: opaque tokens mapped to a user id, session data and an expiry.

Expired rows are rejected at read time, so a late `cleanup_expired` run never
lets a stale session through.
"""
import base64
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from lawbook import config
from lawbook.errors import ExpiredSession, NoRecord
from lawbook.models.session import WebSession

TOKEN_BYTES = 32


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def lifetime() -> timedelta:
    return timedelta(hours=config.SESSION_LIFETIME_HOURS)


def generate_token() -> str:
    # 256 bits, base32 without padding
    raw = secrets.token_bytes(TOKEN_BYTES)
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def insert(db: Session, user_id: int | None, data: dict | None = None) -> str:
    token = generate_token()
    row = WebSession(
        token=token,
        user_id=user_id,
        data=dict(data or {}),
        expiry=_now() + lifetime(),
    )
    db.add(row)
    db.commit()
    return token


def _live_row(db: Session, token: str) -> WebSession:
    row = db.get(WebSession, token)
    if row is None:
        raise NoRecord("session")
    if _now() > row.expiry:
        raise ExpiredSession()
    return row


def get(db: Session, token: str) -> int | None:
    return _live_row(db, token).user_id


def load(db: Session, token: str) -> dict:
    return dict(_live_row(db, token).data or {})


def save(db: Session, token: str, data: dict, user_id: int | None) -> int:
    """Overwrite the data of an existing session. The expiry is left untouched.

    Returns the number of rows updated, 0 when the row is already gone.
    """
    updated = db.query(WebSession).filter(WebSession.token == token).update(
        {"data": dict(data), "user_id": user_id}
    )
    db.commit()
    return updated


def delete(db: Session, token: str) -> None:
    db.query(WebSession).filter(WebSession.token == token).delete()
    db.commit()


def delete_all_for_user(db: Session, user_id: int) -> None:
    db.query(WebSession).filter(WebSession.user_id == user_id).delete()
    db.commit()


def cleanup_expired(db: Session) -> int:
    removed = db.query(WebSession).filter(WebSession.expiry < _now()).delete()
    db.commit()
    return removed
