"""Unit tests for auth/tokens.py -- TokenService issue/verify.

Covers:
- verify(issue(id)) round-trips the identity
- expired tokens raise TokenExpiredError
- wrong secret, altered bytes, garbage and missing claims raise TokenInvalidError
- constructor refuses an empty secret
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.tokens import ALGORITHM, TokenService
from core.errors import AuthError, TokenExpiredError, TokenInvalidError

TEST_SECRET = os.environ["SECRET_KEY"]
OTHER_SECRET = "another-secret-key-that-is-long-enough-too"


class TestIssueVerify:
    def test_round_trip(self, tokens: TokenService) -> None:
        assert tokens.verify(tokens.issue(42)) == 42

    def test_claims_shape(self, tokens: TokenService) -> None:
        claims = jwt.get_unverified_claims(tokens.issue(7))
        assert claims["sub"] == "7"
        assert claims["exp"] - claims["iat"] == 3600

    def test_per_token_expiry_override(self, tokens: TokenService) -> None:
        claims = jwt.get_unverified_claims(tokens.issue(7, expire_seconds=60))
        assert claims["exp"] - claims["iat"] == 60

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenService("")


class TestVerifyFailures:
    def test_expired(self, tokens: TokenService) -> None:
        token = tokens.issue(1, expire_seconds=-10)
        with pytest.raises(TokenExpiredError) as exc_info:
            tokens.verify(token)
        assert exc_info.value.message == "Token has expired"
        assert isinstance(exc_info.value, AuthError)

    def test_wrong_secret(self, tokens: TokenService) -> None:
        foreign = TokenService(OTHER_SECRET).issue(1)
        with pytest.raises(TokenInvalidError):
            tokens.verify(foreign)

    def test_altered_signature_byte(self, tokens: TokenService) -> None:
        token = tokens.issue(1)
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        with pytest.raises(TokenInvalidError):
            tokens.verify(f"{header}.{payload}.{flipped}")

    def test_altered_payload(self, tokens: TokenService) -> None:
        token = tokens.issue(1)
        forged_payload = jwt.encode({"sub": "2", "exp": 9999999999}, OTHER_SECRET).split(".")[1]
        header, _payload, signature = token.split(".")
        with pytest.raises(TokenInvalidError):
            tokens.verify(f"{header}.{forged_payload}.{signature}")

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c", "Bearer x"])
    def test_malformed(self, tokens: TokenService, garbage: str) -> None:
        with pytest.raises(TokenInvalidError):
            tokens.verify(garbage)

    def test_missing_subject(self, tokens: TokenService) -> None:
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"exp": exp}, TEST_SECRET, algorithm=ALGORITHM)
        with pytest.raises(TokenInvalidError):
            tokens.verify(token)

    def test_missing_expiry(self, tokens: TokenService) -> None:
        token = jwt.encode({"sub": "1"}, TEST_SECRET, algorithm=ALGORITHM)
        with pytest.raises(TokenInvalidError):
            tokens.verify(token)

    def test_other_algorithm_rejected(self, tokens: TokenService) -> None:
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"sub": "1", "exp": exp}, TEST_SECRET, algorithm="HS512")
        with pytest.raises(TokenInvalidError):
            tokens.verify(token)
