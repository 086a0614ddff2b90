from dataclasses import dataclass
from datetime import date, datetime

@dataclass(frozen=True)
class RegistrationInput:
    first_name: str
    last_name: str
    email: str
    phone_number: str
    password: str
    date_of_birth: str

@dataclass(frozen=True)
class User:
    id: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    password_hash: str
    date_of_birth: date
    created_at: datetime
    updated_at: datetime
    is_active: bool = True
