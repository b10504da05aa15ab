"""
api/main.py -- FastAPI application entry point for the Book Catalog API.

Run with:  uvicorn asgi:app --reload
           python main.py serve

Middleware stack (outermost to innermost):
  1. CORSMiddleware  -- adds CORS headers for the configured origins
  2. log_requests    -- one access-log line per request with latency

Lifespan is the single process-wide initialization step: it reads Settings
once and constructs the user store, credential store, token service and
book store with explicit configuration values, then closes the stores on
shutdown. Nothing below the lifespan reads the environment.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.books import router as books_router
from api.routes.users import router as users_router
from auth.credentials import CredentialStore
from auth.store import UserStore
from auth.tokens import TokenService
from catalog.store import BookStore
from core.config import get_settings
from core.errors import AuthError, CatalogError

API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("bookcatalog.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build every stateful collaborator from Settings and tear it down after.

    get_settings() raises if SECRET_KEY is missing or too short, so a
    misconfigured process fails here, before it accepts a single request.
    """
    settings = get_settings()
    logger.info("Book Catalog API starting up (environment=%s)", settings.environment)

    app.state.user_store = UserStore(settings.database_url)
    app.state.books = BookStore(settings.database_url)
    app.state.credentials = CredentialStore(app.state.user_store, rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(settings.secret_key, expire_seconds=settings.token_expire_seconds)
    logger.info(
        "Stores initialized (users=%d, bcrypt_rounds=%d, token_expire_seconds=%d)",
        app.state.user_store.count_users(),
        settings.bcrypt_rounds,
        settings.token_expire_seconds,
    )

    yield

    app.state.books.close()
    app.state.user_store.close()
    logger.info("Book Catalog API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Book Catalog API",
    description="Book inventory management with bearer-token authentication.",
    version=API_VERSION,
    lifespan=lifespan,
)


def _cors_origins() -> list[str]:
    # Middleware is registered at import time, before the lifespan runs.
    # A bad configuration is reported by the lifespan, which calls
    # get_settings() again and lets the error propagate.
    try:
        return get_settings().cors_origins
    except ValueError:
        return []


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time is captured before and after call_next so every
# response is logged with its latency.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(books_router, prefix="/api", tags=["Books"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Map the domain error taxonomy (core/errors.py) to its HTTP status."""
    response = JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.to_dict()},
    )
    if isinstance(exc, AuthError):
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body is not valid JSON or a field has the wrong type."""
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]) or "body", "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=errors,
            )
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return a structured error for framework-raised HTTP exceptions.

    Registered on Starlette's base class so unmatched routes (404) and
    wrong methods (405) use the same envelope as FastAPI's HTTPException.
    """
    if exc.status_code == 404 and exc.detail == "Not Found":
        error = ErrorDetail(code="route_not_found", message="Route not found")
    else:
        error = ErrorDetail(code=f"http_{exc.status_code}", message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=error).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the server log only, never to the response
    body. The client receives a generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="internal_error",
                message="An unexpected error occurred.",
            )
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# Index and health
#
# Defined directly in main.py (not in a router) so they are always reachable
# regardless of router registration state. No authentication.
# ---------------------------------------------------------------------------


@app.get("/", tags=["Health"])
async def index() -> dict:
    """Describe the API and list its endpoints."""
    return {
        "message": "Welcome to Book Catalog API",
        "version": API_VERSION,
        "endpoints": {
            "users": {
                "register": "POST /api/users/register",
                "login": "POST /api/users/login",
                "me": "GET /api/users/me (requires auth)",
            },
            "books": {
                "getAll": "GET /api/books",
                "getById": "GET /api/books/:id",
                "create": "POST /api/books (requires auth)",
                "update": "PUT /api/books/:id (requires auth)",
                "delete": "DELETE /api/books/:id (requires auth)",
            },
        },
    }


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, version, and a database round-trip check."""
    try:
        request.app.state.user_store.count_users()
        database = "ok"
    except Exception:
        logger.exception("Health check database probe failed")
        database = "error"
    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=API_VERSION,
        components={"app": "ok", "database": database},
    )
