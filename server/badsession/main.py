import logging

import badsession.models  # noqa: F401
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from badsession.core.config import settings
from badsession.core.db import Base, SessionLocal, engine
from badsession.core.errors import DatabaseError
from badsession.logging_config import setup_logging
from badsession.routers import attendance as attendance_router
from badsession.routers import auth as auth_router
from badsession.routers import dashboard as dashboard_router
from badsession.routers import finance as finance_router
from badsession.routers import matches as matches_router
from badsession.routers import sessions as sessions_router
from badsession.routers import users as users_router
from badsession.schemas.common import HealthResponse
from badsession.services.finance import ensure_finance_settings
from badsession.services.user_accounts import ensure_seed_admin

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="BadSession API", version="0.1.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api"

app.include_router(auth_router.router, prefix=API_PREFIX)
app.include_router(users_router.router, prefix=API_PREFIX)
app.include_router(sessions_router.router, prefix=API_PREFIX)
app.include_router(attendance_router.router, prefix=API_PREFIX)
app.include_router(finance_router.router, prefix=API_PREFIX)
app.include_router(matches_router.router, prefix=API_PREFIX)
app.include_router(dashboard_router.router, prefix=API_PREFIX)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("database_error", extra={"method": request.method, "path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": DatabaseError.default_message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"method": request.method, "path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.get(f"{API_PREFIX}/health", response_model=HealthResponse, tags=["health"])
def health() -> HealthResponse:
    return HealthResponse(status="API is running")


@app.on_event("startup")
def prepare_database() -> None:
    """Create tables for fresh installs and seed the settings row and first admin."""

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    with SessionLocal() as session:
        ensure_finance_settings(session)
        session.commit()
        ensure_seed_admin(
            session,
            username=settings.ADMIN_USERNAME,
            password=settings.ADMIN_PASSWORD,
            full_name=settings.ADMIN_FULL_NAME,
        )
    logger.info("startup_complete", extra={"environment": settings.ENVIRONMENT})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("badsession.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)
