from datetime import datetime

import pytest

from lawbook.errors import DuplicateEmail, InactiveAccount, InvalidCredentials, NoRecord
from lawbook.models.user import User, UserRole
from lawbook.stores import users


def test_insert_then_authenticate_returns_same_id(db) -> None:
    user_id = users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    assert users.authenticate(db, "a@x.com", "longenough1") == user_id


def test_insert_stores_bcrypt_hash_not_password(db) -> None:
    user_id = users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)
    user = users.get(db, user_id)

    assert user.hashed_password != "longenough1"
    assert user.hashed_password.startswith("$2b$")
    assert user.is_active is True
    assert user.email_verified is False
    assert user.role == UserRole.STUDENT


def test_duplicate_email_is_rejected_without_adding_a_row(db) -> None:
    users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    with pytest.raises(DuplicateEmail):
        users.insert(db, "Other Ann", "a@x.com", "different99", UserRole.LAWYER)

    assert db.query(User).count() == 1


def test_email_case_variant_is_a_duplicate(db) -> None:
    users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    with pytest.raises(DuplicateEmail):
        users.insert(db, "Other Ann", " A@X.com", "different99", UserRole.LAWYER)

    assert db.query(User).count() == 1


def test_authenticate_ignores_email_case(db) -> None:
    user_id = users.insert(db, "Ann", "Ann@X.com", "longenough1", UserRole.STUDENT)

    assert users.get(db, user_id).email == "ann@x.com"
    assert users.authenticate(db, "ANN@x.COM", "longenough1") == user_id


def test_wrong_password_and_unknown_email_raise_the_same_error(db) -> None:
    users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    with pytest.raises(InvalidCredentials) as wrong_password:
        users.authenticate(db, "a@x.com", "wrong")
    with pytest.raises(InvalidCredentials) as unknown_email:
        users.authenticate(db, "nobody@x.com", "longenough1")

    assert type(wrong_password.value) is type(unknown_email.value)


def test_deactivated_account_cannot_authenticate(db) -> None:
    user_id = users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)
    users.deactivate(db, user_id)

    with pytest.raises(InactiveAccount):
        users.authenticate(db, "a@x.com", "longenough1")


def test_get_unknown_id_raises_no_record(db) -> None:
    with pytest.raises(NoRecord):
        users.get(db, 999)


def test_exists(db) -> None:
    user_id = users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    assert users.exists(db, user_id) is True
    assert users.exists(db, user_id + 1) is False


def test_update_password_switches_credentials_and_touches_updated_at(db) -> None:
    user_id = users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)
    before = users.get(db, user_id).updated_at

    users.update_password(db, user_id, "brandnewpass")
    db.expire_all()

    assert users.authenticate(db, "a@x.com", "brandnewpass") == user_id
    with pytest.raises(InvalidCredentials):
        users.authenticate(db, "a@x.com", "longenough1")
    assert users.get(db, user_id).updated_at >= before


def test_verify_email_sets_flag(db) -> None:
    user_id = users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    users.verify_email(db, user_id)
    db.expire_all()

    assert users.get(db, user_id).email_verified is True


def test_list_by_role_filters_and_orders_newest_first(db) -> None:
    old = users.insert(db, "Old", "old@x.com", "longenough1", UserRole.STUDENT)
    new = users.insert(db, "New", "new@x.com", "longenough1", UserRole.STUDENT)
    users.insert(db, "Law", "law@x.com", "longenough1", UserRole.LAWYER)
    db.query(User).filter(User.id == old).update({"created_at": datetime(2024, 1, 1)})
    db.query(User).filter(User.id == new).update({"created_at": datetime(2025, 1, 1)})
    db.commit()

    students = users.list_by_role(db, UserRole.STUDENT, limit=10)

    assert [u.id for u in students] == [new, old]
    assert [u.id for u in users.list_by_role(db, UserRole.STUDENT, limit=1, offset=1)] == [old]


def test_over_long_password_never_verifies(db) -> None:
    users.insert(db, "Ann", "a@x.com", "longenough1", UserRole.STUDENT)

    with pytest.raises(InvalidCredentials):
        users.authenticate(db, "a@x.com", "x" * 100)
