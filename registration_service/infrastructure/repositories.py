from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import UserORM
from ..domain.entities import User
from ..domain.exceptions import StoreError
from ..application.use_cases.register_user import IUserRepository

def to_domain(u: UserORM) -> User:
    return User(
        id=u.id,
        first_name=u.first_name,
        last_name=u.last_name,
        email=u.email,
        phone_number=u.phone_number,
        password_hash=u.password_hash,
        date_of_birth=u.date_of_birth,
        is_active=u.is_active,
        created_at=u.created_at,
        updated_at=u.updated_at,
    )

class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def email_exists(self, email: str) -> bool:
        try:
            return bool(self.db.scalar(select(exists().where(UserORM.email == email))))
        except SQLAlchemyError as e:
            raise StoreError("Internal server error", e) from e

    def insert(self, user: User) -> User:
        row = UserORM(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone_number=user.phone_number,
            password_hash=user.password_hash,
            date_of_birth=user.date_of_birth,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        try:
            self.db.add(row); self.db.commit(); self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Failed to insert user", e) from e
        return to_domain(row)
