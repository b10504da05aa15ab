"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

require_token() is the auth gate for every mutating book route. Per request:

  no Authorization header / not "Bearer <token>"  -> AuthError      (401)
  token signature or structure invalid            -> TokenInvalidError (401)
  token expired                                   -> TokenExpiredError (401)
  otherwise                                       -> request.state.user_id set,
                                                     handler runs

Any failure is terminal: the dependency raises before the route body runs,
and api/main.py maps the error to the JSON envelope. This module never
builds a response itself.

get_current_user() builds on require_token() and loads the User record for
routes that need more than the id.

Layer rule: no imports from catalog/. auth/dependencies.py may import from
fastapi because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService
from core.errors import AuthError

logger = logging.getLogger("bookcatalog.auth")

_NO_TOKEN = "No token provided. Please provide a valid JWT token in Authorization header"


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an "Authorization: Bearer <token>" header value.

    The scheme is matched exactly ("Bearer" followed by one space), so
    "Basic ...", "bearer" without a token, or an empty header all fail.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError(_NO_TOKEN)
    token = authorization[7:].strip()
    if not token:
        raise AuthError(_NO_TOKEN)
    return token


def require_token(request: Request) -> int:
    """Require a valid bearer token. Returns the authenticated user id.

    Use as a FastAPI dependency:
        @router.post("/books", dependencies=[Depends(require_token)])
        def create_book(...): ...
    """
    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        tokens: TokenService = request.app.state.tokens
        user_id = tokens.verify(token)
    except AuthError as exc:
        logger.warning("Auth gate rejected %s %s: %s", request.method, request.url.path, exc.code)
        raise
    request.state.user_id = user_id
    return user_id


def get_current_user(request: Request) -> User:
    """Require a valid token for an account that still exists."""
    user_id = require_token(request)
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(user_id)
    if user is None:
        raise AuthError("User no longer exists", code="token_invalid")
    return user
