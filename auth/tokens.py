"""
auth/tokens.py -- JWT issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the user id as the "sub" claim
       plus "iat" and "exp". Nothing is stored server-side: verification is
       signature + expiry only, so a token cannot be revoked before it
       expires. That is an accepted limitation of this API.

  Errors: verify() raises TokenExpiredError for an elapsed "exp" and
       TokenInvalidError for everything else (bad signature, wrong secret,
       malformed token, missing or non-numeric subject). The auth gate turns
       both into 401 with different messages.

  Secret: passed to TokenService at construction by the app lifespan. There
       is no module-level secret, so tests can build services with any key.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from core.errors import TokenExpiredError, TokenInvalidError

ALGORITHM = "HS256"


class TokenService:
    """Issue and verify signed, self-expiring bearer tokens.

    Usage:
        tokens = TokenService(settings.secret_key, expire_seconds=3600)
        token = tokens.issue(user.id)
        user_id = tokens.verify(token)
    """

    def __init__(self, secret_key: str, expire_seconds: int = 3600, algorithm: str = ALGORITHM) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a secret key")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds
        self.algorithm = algorithm

    def issue(self, user_id: int, expire_seconds: int | None = None) -> str:
        """Encode a signed JWT for user_id.

        expire_seconds overrides the service default for this token only.
        """
        duration = self.expire_seconds if expire_seconds is None else expire_seconds
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(seconds=duration),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Verify signature and expiry, then return the user id in the token."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except JWTError as exc:
            raise TokenInvalidError() from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.isdigit():
            raise TokenInvalidError()
        # Tokens without "exp" would never expire.
        if "exp" not in payload:
            raise TokenInvalidError()
        return int(subject)
