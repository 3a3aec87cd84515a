# lawbook/stores/users.py
"""
Credential store: account rows and password checks.

Every function takes the request's SQLAlchemy session. Nothing is cached and
nothing is retried; storage errors propagate to the caller.
"""
import logging

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lawbook import config
from lawbook.errors import DuplicateEmail, InactiveAccount, InvalidCredentials, NoRecord
from lawbook.models.user import User, UserRole, utcnow

log = logging.getLogger(__name__)


def hash_password(raw: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(raw.encode("utf-8"), salt).decode("utf-8")


def verify_password(raw: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(raw.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # over-long passwords or a malformed stored hash never match
        return False


def normalize_email(email: str) -> str:
    # addresses are unique regardless of case
    return email.strip().lower()


def insert(db: Session, name: str, email: str, password: str, role: UserRole) -> int:
    email = normalize_email(email)
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=UserRole(role),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if "email" in str(exc.orig).lower():
            raise DuplicateEmail(email) from exc
        raise
    db.refresh(user)
    return user.id


def authenticate(db: Session, email: str, password: str) -> int:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        raise InvalidCredentials()
    if not user.is_active:
        raise InactiveAccount()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user.id


def get(db: Session, user_id: int) -> User:
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise NoRecord(f"user {user_id}")
    return user


def exists(db: Session, user_id: int) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def _update(db: Session, user_id: int, **values) -> None:
    values["updated_at"] = utcnow()
    db.query(User).filter(User.id == user_id).update(values)
    db.commit()


def update_password(db: Session, user_id: int, new_password: str) -> None:
    _update(db, user_id, hashed_password=hash_password(new_password))


def verify_email(db: Session, user_id: int) -> None:
    _update(db, user_id, email_verified=True)


def deactivate(db: Session, user_id: int) -> None:
    _update(db, user_id, is_active=False)
    log.info("Account %s deactivated", user_id)


def list_by_role(db: Session, role: UserRole, limit: int, offset: int = 0) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == UserRole(role))
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
