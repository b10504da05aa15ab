"""
core/errors.py -- Error taxonomy shared by auth/ and catalog/.

Domain code raises these; it never builds HTTP responses. api/main.py
registers one exception handler for CatalogError that turns status_code,
code, message and details into the standard error envelope.

Layer rule: no imports from api/, auth/, or catalog/.
"""

from __future__ import annotations

from typing import Any, Optional


class CatalogError(Exception):
    """Base class for every error the API maps to a client-facing response."""

    status_code: int = 500
    default_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Return the body of the "error" field in the response envelope."""
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.details,
        }


class ValidationError(CatalogError):
    """Input failed field validation. details holds the list of field errors."""

    status_code = 400
    default_code = "validation_error"


class DuplicateError(CatalogError):
    """A unique field (user email) is already taken."""

    status_code = 409
    default_code = "duplicate"


class NotFoundError(CatalogError):
    status_code = 404
    default_code = "not_found"


class AuthError(CatalogError):
    """Authentication failed: bad credentials, missing or malformed header."""

    status_code = 401
    default_code = "unauthorized"


class TokenExpiredError(AuthError):
    default_code = "token_expired"

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class TokenInvalidError(AuthError):
    default_code = "token_invalid"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
