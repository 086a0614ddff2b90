import pytest
import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from registration_service.config import Settings
from registration_service.infrastructure.models import Base
from registration_service.infrastructure.security import PasswordHasher
from registration_service.main import create_app

VALID_PAYLOAD = {
    "first_name": "John",
    "last_name": "Doe",
    "email": "johndoe@example.com",
    "phone_number": "+1(123)456-7890",
    "password": "validpassword",
    "date_of_birth": "1990-01-01",
}

@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Настройка тестового окружения"""
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")

@pytest.fixture
def payload():
    return dict(VALID_PAYLOAD)

@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", BCRYPT_ROUNDS=4)

@pytest.fixture
def hasher():
    # Минимальная стоимость bcrypt, чтобы тесты были быстрыми
    return PasswordHasher(rounds=4)

@pytest.fixture
def engine():
    """Тестовая БД в памяти, одно соединение на все потоки"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)

@pytest.fixture
def app(settings, session_factory, hasher):
    return create_app(settings, session_factory, hasher=hasher)

@pytest.fixture
def client(app):
    """Фикстура для тестового клиента"""
    yield TestClient(app)
    app.dependency_overrides.clear()
