import re
from datetime import date

from .entities import RegistrationInput
from .exceptions import ValidationFailed

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"\+1\([0-9]{3}\)[0-9]{3}-[0-9]{4}")
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

MIN_PASSWORD_LENGTH = 8
MIN_AGE = 18


def compute_age(dob: date, today: date) -> int:
    # Сравнение по дню года, а не по (месяц, день)
    age = today.year - dob.year
    if today.timetuple().tm_yday < dob.timetuple().tm_yday:
        age -= 1
    return age


def is_adult(dob: date, today: date | None = None) -> bool:
    return compute_age(dob, today or date.today()) >= MIN_AGE


def parse_date_of_birth(value: str) -> date:
    """Разбирает строго YYYY-MM-DD или кидает ValueError."""
    if not DATE_RE.fullmatch(value):
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    return date.fromisoformat(value)


def validate_registration(req: RegistrationInput, today: date | None = None) -> date:
    """Проверяет запрос на регистрацию.

    Правила проверяются по порядку, первое нарушенное правило кидает
    ValidationFailed с его сообщением. Возвращает разобранную дату рождения.
    """
    fields = (req.first_name, req.last_name, req.email,
              req.phone_number, req.password, req.date_of_birth)
    if any(not f.strip() for f in fields):
        raise ValidationFailed("all fields are required")

    if not EMAIL_RE.fullmatch(req.email):
        raise ValidationFailed("invalid email format")

    if not PHONE_RE.fullmatch(req.phone_number):
        raise ValidationFailed("invalid phone number format")

    if len(req.password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed("password must be at least 8 characters long")

    try:
        dob = parse_date_of_birth(req.date_of_birth)
    except ValueError:
        raise ValidationFailed("invalid date of birth format, expected YYYY-MM-DD")

    if not is_adult(dob, today):
        raise ValidationFailed("user must be at least 18 years old")

    return dob
