"""
User Registry Backend - FastAPI Application

CRUD API for user registration records with sequential user IDs.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_registry.config import configure_logging, get_settings
from user_registry.core.errors import (
    BadRequest,
    DuplicateKeyError,
    FieldError,
    NotFound,
    StorageError,
    ValidationError,
)
from user_registry.database.connections import close_connections, get_database, get_mongo_client
from user_registry.database.migrations import run_migrations
from user_registry.routers import health, users

# Missing MONGO_URI fails here, before anything is served
settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed for one or more fields"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Connect to MongoDB and check it answers
    - Create indexes

    Any startup failure is re-raised so the server never serves traffic
    half-initialized.

    Shutdown:
    - Close the database connection
    """
    logger.info("Starting up User Registry Backend...")

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        db = await get_database()
        logger.info("MongoDB connected to database %s", db.name)
        await run_migrations(db)
    except Exception:
        logger.exception("Startup failed, refusing to serve")
        await close_connections()
        raise

    yield

    logger.info("Shutting down User Registry Backend...")
    await close_connections()


# Create FastAPI application
app = FastAPI(
    title="User Registry API",
    description="""
## User Registration API

CRUD API for user registration records.

### Features
- **Registration**: Validated user records with sequential numeric IDs
- **Search**: Case-insensitive search on any part of a user's name
- **Updates**: Partial updates returning the record before and after

### Errors
Every failure response has the shape
`{"success": false, "message": "...", "errors": [{"field": "...", "message": "..."}]}`,
with `errors` present only for field-level problems.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api-docs",
    openapi_url="/api-docs.json",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(users.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "User Registry API",
        "version": "1.0.0",
        "docs": "/api-docs",
        "health": "/health",
    }


# ==================== Error handlers ====================


def error_response(status_code: int, message: str, errors: list[FieldError] | None = None):
    content: dict = {"success": False, "message": message}
    if errors is not None:
        content["errors"] = [e.model_dump() for e in errors]
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(ValidationError)
async def handle_validation_error(_: Request, exc: ValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, VALIDATION_FAILED, exc.errors)


@app.exception_handler(DuplicateKeyError)
async def handle_duplicate_key(_: Request, exc: DuplicateKeyError):
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        f"Duplicate value for field: {exc.field}",
        [FieldError(field=exc.field, message=f"{exc.field} already exists")],
    )


@app.exception_handler(NotFound)
async def handle_not_found(_: Request, exc: NotFound):
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(BadRequest)
async def handle_bad_request(_: Request, exc: BadRequest):
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(_: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) or ".".join(loc) or "body"
        errors.append(FieldError(field=field, message=err.get("msg", "Invalid value")))
    return error_response(status.HTTP_400_BAD_REQUEST, VALIDATION_FAILED, errors)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        message = f"[NOT FOUND] {request.method} {url} - This route does not exist"
        logger.warning(message)
        return error_response(status.HTTP_404_NOT_FOUND, message)
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(StorageError)
async def handle_storage_error(request: Request, exc: StorageError):
    logger.error(
        "Storage error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")
