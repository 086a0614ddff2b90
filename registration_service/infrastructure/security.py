from passlib.context import CryptContext

from ..domain.exceptions import HashingError

class PasswordHasher:
    def __init__(self, rounds: int = 12):
        # bcrypt_sha256 не обрезает пароль на 72 байтах
        self.pwd = CryptContext(
            schemes=["bcrypt_sha256"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
            bcrypt_sha256__truncate_error=False,
        )

    def hash(self, plain: str) -> str:
        try:
            return self.pwd.hash(plain)
        except (ValueError, TypeError) as e:
            raise HashingError("Failed to hash password", e) from e

    def verify(self, plain: str, hashed: str) -> bool: return self.pwd.verify(plain, hashed)
