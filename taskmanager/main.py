# taskmanager/main.py
from dotenv import load_dotenv

# .env must be loaded before db.session reads DATABASE_URL at import time
load_dotenv()

import logging  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402

from fastapi import FastAPI, HTTPException, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from sqlmodel import text  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402

from taskmanager.core.config import settings  # noqa: E402
from taskmanager.core.errors import AppError, ValidationError  # noqa: E402
from taskmanager.core.logging_config import setup_logging  # noqa: E402
from taskmanager.core.validation import first_error  # noqa: E402
from taskmanager.db.session import DATABASE_URL, create_all_tables, engine  # noqa: E402

# model imports register the tables on SQLModel.metadata
from taskmanager.models import task as _m_task  # noqa: F401,E402
from taskmanager.models import user as _m_user  # noqa: F401,E402

# routers
from taskmanager.routers import auth, task  # noqa: E402

setup_logging(settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Postgres schemas are managed by alembic; SQLite (dev) is created on the fly.
    if DATABASE_URL.startswith("sqlite"):
        create_all_tables()
    logger.info("Task Manager API %s starting (env=%s)", settings.app_version, settings.app_env)
    yield


app = FastAPI(
    title="Task Manager API",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ──────────────────────────────────────────────────────────────────────────────
# Error envelope: {"success": false, "error": "...", "field"?: "..."}
# ──────────────────────────────────────────────────────────────────────────────
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    field, message = first_error(exc.errors())
    err = ValidationError(message, field=field)
    return JSONResponse(status_code=err.status_code, content=err.to_body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=AppError().to_body())


# router registration
app.include_router(auth.auth_router)
app.include_router(task.router)


@app.get("/health")
def health_app():
    return {"ok": True, "version": settings.app_version}


@app.get("/health/db")
def health_db():
    # Migration is a deployment concern. Runtime only verifies DB connectivity.
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception:
        raise HTTPException(status_code=500, detail="Database connection failed")
