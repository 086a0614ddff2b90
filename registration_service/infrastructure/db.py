from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .models import Base
from ..config import Settings

def create_db_engine(settings: Settings) -> Engine:
    url = settings.database_url()
    options = {}
    connect_args = {}
    if url.startswith("sqlite"):
        # Запросы выполняются в threadpool
        connect_args = {"check_same_thread": False}
    else:
        options = dict(pool_size=10, max_overflow=20, pool_recycle=3600)
        if url.startswith("postgresql"):
            connect_args = {"client_encoding": "utf8"}
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=settings.SQL_ECHO,
        **options,
    )

def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)

def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)

def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

def get_db(request: Request):
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        yield None
        return
    db = session_factory()
    try: yield db
    finally: db.close()
