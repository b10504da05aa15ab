"""
auth/credentials.py -- Registration and password login.

CredentialStore owns the password-hashing contract on top of UserStore:

  register():           validate -> existence check -> hash -> persist.
                        Hashing is an explicit step here, not a store hook,
                        so the plaintext never reaches UserStore.

  verify_credentials(): timing-equalized lookup + bcrypt check. An unknown
                        email and a wrong password raise the same AuthError
                        after the same amount of bcrypt work, so neither the
                        response body nor its latency reveals which one
                        happened.

Both methods are CPU-bound (bcrypt). Route handlers that call them are plain
`def` functions, which FastAPI runs in its worker thread pool, so hashing
never blocks the event loop.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import logging

from auth.models import User
from auth.passwords import DEFAULT_ROUNDS, hash_password, verify_password
from auth.store import UserStore
from core.errors import AuthError, DuplicateError, ValidationError
from core.validation import FieldRule, normalize, validate

logger = logging.getLogger("bookcatalog.auth")

EMAIL_PATTERN = r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+$"

USER_RULES: dict[str, FieldRule] = {
    "name": FieldRule(
        required=True,
        required_message="Please provide a name",
        kind=str,
        max_length=50,
        max_length_message="Name cannot exceed 50 characters",
        trim=True,
    ),
    "email": FieldRule(
        required=True,
        required_message="Please provide an email",
        kind=str,
        max_length=255,
        max_length_message="Email cannot exceed 255 characters",
        pattern=EMAIL_PATTERN,
        pattern_message="Please provide a valid email address",
        lowercase=True,
    ),
    "password": FieldRule(
        required=True,
        required_message="Please provide a password",
        kind=str,
        min_length=6,
        min_length_message="Password must be at least 6 characters",
        max_length=128,
        max_length_message="Password cannot exceed 128 characters",
    ),
}

_INVALID_CREDENTIALS = "Invalid email or password"


class CredentialStore:
    """User registration and credential verification.

    Usage:
        creds = CredentialStore(UserStore(db_url), rounds=settings.bcrypt_rounds)
        user = creds.register("Ada", "ada@example.com", "secret")
        same = creds.verify_credentials("ADA@example.com", "secret")
    """

    def __init__(self, users: UserStore, rounds: int = DEFAULT_ROUNDS) -> None:
        self.users = users
        self.rounds = rounds
        # Timing equalization hash. Built once per store so every failed
        # lookup costs the same bcrypt work as a real comparison.
        self._dummy_hash = hash_password("bookcatalog_timing_dummy", rounds=rounds)

    def register(self, name: str | None, email: str | None, password: str | None) -> User:
        """Create a user and return it without the password hash.

        Raises ValidationError with field-level errors, or DuplicateError if
        the email (compared case-insensitively) is already registered.
        """
        data = normalize({"name": name, "email": email, "password": password}, USER_RULES)
        result = validate(data, USER_RULES)
        if not result.ok:
            raise ValidationError("Validation failed", details=result.as_list())

        if self.users.email_exists(data["email"]):
            raise DuplicateError("A user with that email already exists.")

        user = User(
            name=data["name"],
            email=data["email"],
            hashed_password=hash_password(data["password"], rounds=self.rounds),
        )
        # A concurrent registration can still win between the check above and
        # this insert; the unique index turns that into DuplicateError.
        user_id = self.users.create_user(user)
        logger.info("Registered user id=%s", user_id)
        return user.public()

    def verify_credentials(self, email: str | None, password: str | None) -> User:
        """Return the user whose stored hash matches password.

        Raises ValidationError if either field is missing, AuthError for an
        unknown email or a wrong password (same message for both).
        """
        data = normalize({"email": email, "password": password}, USER_RULES)
        missing = [
            {"field": f, "message": USER_RULES[f].required_message}
            for f in ("email", "password")
            if not data.get(f) or not isinstance(data[f], str)
        ]
        if missing:
            raise ValidationError("Please provide email and password", details=missing)

        user = self.users.get_by_email(data["email"], with_password=True)
        if user is None or not user.hashed_password:
            # Equalize timing -- do NOT return before running bcrypt.
            verify_password(data["password"], self._dummy_hash)
            logger.info("Login failed: unknown email")
            raise AuthError(_INVALID_CREDENTIALS, code="bad_credentials")
        if not verify_password(data["password"], user.hashed_password):
            logger.info("Login failed: wrong password for user id=%s", user.id)
            raise AuthError(_INVALID_CREDENTIALS, code="bad_credentials")
        return user.public()
