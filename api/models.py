"""
API request and response models for the Book Catalog REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models only check JSON types. Field constraints (lengths, patterns,
genre list, price range) are enforced by the rule sets in
auth.credentials.USER_RULES and catalog.rules.BOOK_RULES, so every field is
Optional here and a missing field produces a field-level 400 from the
validator rather than a generic parse error.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload.

    detail carries the list of {"field", "message"} dicts for validation
    errors, and is None otherwise.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = {}


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/users/register."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for POST /api/users/login."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """A user as returned to clients. There is no password field."""

    id: int
    name: str
    email: str
    created_at: str
    updated_at: str


class LoginResponse(BaseModel):
    """Response for POST /api/users/login.

    token is presented verbatim as "Authorization: Bearer <token>".
    """

    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------


class BookCreate(BaseModel):
    """Request body for POST /api/books. in_stock defaults to true."""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    in_stock: Optional[bool] = None


class BookUpdate(BaseModel):
    """Request body for PUT /api/books/{id}. Only supplied fields change."""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    in_stock: Optional[bool] = None


class BookResponse(BaseModel):
    id: int
    title: str
    author: str
    genre: str
    price: float
    in_stock: bool
    created_at: str
    updated_at: str
