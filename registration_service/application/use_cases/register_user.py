import uuid
from datetime import date, datetime, timezone
from typing import Callable

import structlog

from ...domain.entities import RegistrationInput, User
from ...domain.exceptions import (
    DependencyUnavailableError,
    EmailAlreadyInUse,
    InternalError,
    ValidationFailed,
)
from ...domain.validation import validate_registration

logger = structlog.get_logger()

class IUserRepository:
    def email_exists(self, email: str) -> bool: ...
    def insert(self, user: User) -> User: ...

class IPasswordHasher:
    def hash(self, plain: str) -> str: ...

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class RegisterUser:
    def __init__(
        self,
        repo: IUserRepository | None,
        hasher: IPasswordHasher,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.hasher = hasher
        self.clock = clock

    def execute(self, data: RegistrationInput) -> User:
        now = self.clock()
        try:
            dob = validate_registration(data, today=now.date())
        except ValidationFailed as e:
            logger.info("registration_rejected", reason=str(e))
            raise

        if self.repo is None:
            logger.error("user store is not configured")
            raise DependencyUnavailableError()

        try:
            if self.repo.email_exists(data.email):
                logger.info("registration_rejected", reason="email already in use")
                raise EmailAlreadyInUse()

            pwd_hash = self.hasher.hash(data.password)
            user = self._new_user(data, dob, pwd_hash, now)
            created = self.repo.insert(user)
        except InternalError as e:
            logger.error("registration_failed", error=str(e))
            raise

        logger.info("user_registered", user_id=created.id)
        return created

    @staticmethod
    def _new_user(data: RegistrationInput, dob: date, pwd_hash: str, now: datetime) -> User:
        return User(
            id=str(uuid.uuid4()),
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone_number=data.phone_number,
            password_hash=pwd_hash,
            date_of_birth=dob,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
