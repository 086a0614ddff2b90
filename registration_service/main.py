import time
import logging
import structlog
import uvicorn
from fastapi import FastAPI, Request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .infrastructure.db import create_db_engine, init_schema, make_session_factory, ping
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.security import PasswordHasher
from .interfaces.http.routers import users as users_router

VERSION = "0.1.0"

logger = structlog.get_logger()


def configure_logging(level_name: str = "INFO") -> None:
    # Настройка структурированного логирования
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: Settings,
    session_factory: sessionmaker | None,
    hasher: PasswordHasher | None = None,
) -> FastAPI:
    app = FastAPI(title="User Registration Service", version=VERSION)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.hasher = hasher or PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    # Middleware для кодировки, метрик и логов
    @app.middleware("http")
    async def observe_request(request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path

        response = await call_next(request)

        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"

        duration = time.time() - start_time
        status_code = response.status_code
        http_requests_total.labels(method=method, endpoint=path, status=status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=path).observe(duration)

        logger.info(
            "http_request",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration * 1000, 2)
        )

        return response

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return metrics_endpoint()

    app.include_router(users_router.router)
    return app


def bootstrap(settings: Settings) -> sessionmaker:
    """Подключается к БД и создает схему. При ошибке завершает процесс."""
    try:
        # ValueError - кривой порт в DB_HOST, ImportError - нет драйвера БД
        engine = create_db_engine(settings)
        init_schema(engine)
        ping(engine)
    except (SQLAlchemyError, ValueError, ImportError) as e:
        logger.error("Error connecting to database", error=str(e))
        raise SystemExit(1)
    logger.info("Database connection established")
    return make_session_factory(engine)


def run() -> None:
    configure_logging()
    try:
        settings = Settings()
    except ValidationError as e:
        logger.error("Error loading settings", error=str(e))
        raise SystemExit(1)
    configure_logging(settings.LOG_LEVEL)

    logger.info("Starting registration service", version=VERSION)
    session_factory = bootstrap(settings)
    app = create_app(settings, session_factory)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
