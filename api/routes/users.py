"""
api/routes/users.py -- Registration and login REST endpoints.

Routes:
  POST /api/users/register   -- create an account; 201 with the user (no password)
  POST /api/users/login      -- password login; 200 with a bearer token
  GET  /api/users/me         -- current user (requires bearer token)

Security:
  Login failures for an unknown email and a wrong password return the same
  401 body ("bad_credentials"); CredentialStore.verify_credentials() also
  equalizes their timing.
  Cache-Control: no-store on login responses so tokens are never cached.

register and login are plain `def` handlers on purpose: bcrypt is CPU-bound,
and FastAPI runs sync handlers in its worker thread pool instead of on the
event loop, so concurrent requests are not serialized behind a hash.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from auth.credentials import CredentialStore
from auth.dependencies import get_current_user
from auth.models import User
from auth.tokens import TokenService

# Auth policy:
# - POST /api/users/register: public
# - POST /api/users/login:    public
# - GET  /api/users/me:       requires bearer token (get_current_user)
router = APIRouter()


@router.post("/users/register", response_model=UserResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> UserResponse:
    """Create a user account. The password is hashed before it is stored."""
    credentials: CredentialStore = request.app.state.credentials
    user = credentials.register(body.name, body.email, body.password)
    return _user_to_response(user)


@router.post("/users/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a signed bearer token."""
    credentials: CredentialStore = request.app.state.credentials
    tokens: TokenService = request.app.state.tokens

    user = credentials.verify_credentials(body.email, body.password)
    token = tokens.issue(user.id)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            token=token,
            expires_in=tokens.expire_seconds,
            user=_user_to_response(user),
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/users/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the account the presented token belongs to."""
    return _user_to_response(current_user)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at or "",
        updated_at=user.updated_at or "",
    )
