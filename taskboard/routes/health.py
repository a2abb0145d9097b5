from fastapi import APIRouter
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import settings
from taskboard.db import db_ping, missing_tables
from taskboard.redis_client import redis_ping

router = APIRouter(tags=["health"])

@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

def _schema_check() -> tuple[bool, str | None]:
    if not db_ping():
        return False, "database unreachable"
    try:
        missing = missing_tables()
    except SQLAlchemyError as e:
        return False, e.__class__.__name__
    if missing:
        return False, "missing tables: " + ", ".join(missing)
    return True, None

@router.get("/ready")
def ready():
    """
    Ready means the task schema is migrated and, when auth rate limiting is
    on, redis answers. Redis is skipped otherwise since nothing else uses it.
    """
    checks: dict[str, bool] = {}
    errors: dict[str, str] = {}

    checks["db"], err = _schema_check()
    if err:
        errors["db"] = err

    if settings.rate_limit_enabled:
        try:
            checks["redis"] = redis_ping()
        except RedisError as e:
            checks["redis"] = False
            errors["redis"] = e.__class__.__name__
        if not checks["redis"] and "redis" not in errors:
            errors["redis"] = "redis unreachable"

    ok = all(checks.values())
    body: dict = {"status": "ok" if ok else "unready", "checks": checks}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=200 if ok else 503, content=body)
