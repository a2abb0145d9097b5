import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import settings
from taskboard.errors import TaskError
from taskboard.logging_setup import setup_logging
from taskboard.routes.auth import router as auth_router
from taskboard.routes.health import router as health_router
from taskboard.routes.tasks import router as tasks_router
from taskboard.routes.users import router as users_router

logger = logging.getLogger(__name__)

async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload())

# task routes report malformed bodies in the same {errors: [...]} shape as
# field rule failures; other routes keep fastapi's 422
async def body_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if not request.url.path.startswith(tasks_router.prefix):
        return await request_validation_exception_handler(request, exc)

    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        errors.append(
            {
                "field": ".".join(loc[1:]) or (loc[0] if loc else ""),
                "msg": err.get("msg", "invalid value"),
                "value": err.get("input"),
                "location": loc[0] if loc else "body",
            }
        )
    return JSONResponse(status_code=400, content={"errors": jsonable_encoder(errors)})

# store failures: log everything, tell the client nothing
async def db_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(title="taskboard", version="0.1.0")
    app.add_exception_handler(TaskError, task_error_handler)
    app.add_exception_handler(RequestValidationError, body_error_handler)
    app.add_exception_handler(SQLAlchemyError, db_error_handler)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(tasks_router)
    return app

app = create_app()
