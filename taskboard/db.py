from collections.abc import Generator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import settings
from taskboard.models.base import Base

__all__ = ["Base", "engine", "SessionLocal", "get_db", "db_ping", "missing_tables"]

def _connect_args(url: str) -> dict:
    # sqlite connections are handed between threadpool workers
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# db connectivity check
def db_ping() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False

REQUIRED_TABLES = ("users", "auth_magic_links", "tasks", "task_assignees")

# tables the app needs that migrations have not created yet
def missing_tables() -> list[str]:
    present = set(inspect(engine).get_table_names())
    return [t for t in REQUIRED_TABLES if t not in present]
