from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    DATABASE_URL: str | None = None
    # Параметры MariaDB/MySQL, если DATABASE_URL не задан
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    DB_HOST: str | None = None
    DB_DATABASE: str | None = None
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    BCRYPT_ROUNDS: int = 12
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            host, _, port = self.DB_HOST.partition(":")
            url = URL.create(
                "mysql+pymysql",
                username=self.DB_USER,
                password=self.DB_PASSWORD,
                host=host,
                port=int(port) if port else None,
                database=self.DB_DATABASE,
            )
            return url.render_as_string(hide_password=False)
        return "sqlite:///./users.db"
