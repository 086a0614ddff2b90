import uuid
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from registration_service.domain.entities import User
from registration_service.domain.exceptions import StoreError
from registration_service.infrastructure.models import UserORM
from registration_service.infrastructure.repositories import UserRepository

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

def make_user(email="johndoe@example.com"):
    return User(
        id=str(uuid.uuid4()),
        first_name="John",
        last_name="Doe",
        email=email,
        phone_number="+1(123)456-7890",
        password_hash="$2b$04$notarealhash",
        date_of_birth=date(1990, 1, 1),
        created_at=NOW,
        updated_at=NOW,
    )

@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()

def count_users(db):
    return db.scalar(select(func.count()).select_from(UserORM))

def test_email_exists_false_on_empty_table(db):
    assert UserRepository(db).email_exists("johndoe@example.com") is False

def test_insert_persists_row(db):
    repo = UserRepository(db)
    user = make_user()

    created = repo.insert(user)

    assert created.id == user.id
    assert created.is_active is True
    assert created.date_of_birth == date(1990, 1, 1)
    row = db.get(UserORM, user.id)
    assert row.email == "johndoe@example.com"
    assert row.password_hash == "$2b$04$notarealhash"
    assert repo.email_exists("johndoe@example.com") is True
    assert repo.email_exists("other@example.com") is False

def test_duplicate_email_violates_unique_constraint(db):
    """Уникальность гарантирует сама БД"""
    repo = UserRepository(db)
    repo.insert(make_user())

    with pytest.raises(StoreError) as exc:
        repo.insert(make_user())
    assert str(exc.value).startswith("Failed to insert user: ")
    # сессия откатилась и пригодна для работы
    assert count_users(db) == 1

def test_email_exists_query_error_is_not_false():
    mock_db = MagicMock()
    mock_db.scalar.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

    with pytest.raises(StoreError) as exc:
        UserRepository(mock_db).email_exists("johndoe@example.com")
    assert str(exc.value).startswith("Internal server error: ")
    assert "connection lost" in str(exc.value)

def test_insert_error_rolls_back():
    mock_db = MagicMock()
    mock_db.commit.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))

    with pytest.raises(StoreError):
        UserRepository(mock_db).insert(make_user())
    mock_db.rollback.assert_called_once()
    mock_db.refresh.assert_not_called()
