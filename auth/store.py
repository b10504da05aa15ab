"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper (same as catalog/store.py).
UserStore is the repository; _row_to_user is the mapper. Services and
routes never touch SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  The password hash is excluded from the default projection. Only
  get_by_email(..., with_password=True) selects it, and only
  CredentialStore.verify_credentials() calls that.

  Email uniqueness is a UNIQUE index on the lowercased column. When two
  registrations race past the existence check, the losing INSERT hits the
  index and create_user() raises DuplicateError instead of overwriting.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.database import make_engine, now_iso
from core.errors import DuplicateError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("email", String(255), nullable=False, unique=True),  # stored lowercased
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# Default read projection -- everything except hashed_password.
_PUBLIC_COLUMNS = (
    _users.c.id,
    _users.c.name,
    _users.c.email,
    _users.c.created_at,
    _users.c.updated_at,
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore("sqlite:///:memory:")
        user_id = store.create_user(User(name="A", email="a@b.com", hashed_password=hash_password("secret")))
        user = store.get_by_id(user_id)
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned ID.

        user.hashed_password must already be set; this method does not hash.
        On success user.id, created_at and updated_at are filled in.
        Raises DuplicateError if the email is already taken.
        """
        if not user.hashed_password:
            raise ValueError("create_user() requires a hashed password")
        now = now_iso()
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _users.insert().values(
                        name=user.name,
                        email=user.email.lower(),
                        hashed_password=user.hashed_password,
                        created_at=now,
                        updated_at=now,
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateError("A user with that email already exists.") from exc
        user.id = result.inserted_primary_key[0]
        user.email = user.email.lower()
        user.created_at = user.updated_at = now
        return user.id

    def email_exists(self, email: str) -> bool:
        with self.engine.connect() as conn:
            count = conn.execute(
                select(func.count()).select_from(_users).where(_users.c.email == email.lower())
            ).scalar()
        return (count or 0) > 0

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. The hash is never included."""
        with self.engine.connect() as conn:
            row = conn.execute(select(*_PUBLIC_COLUMNS).where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str, with_password: bool = False) -> User | None:
        """Look up a user by email (case-insensitive). Returns None if not found.

        with_password=True adds hashed_password to the projection; it is meant
        for credential verification only.
        """
        columns = (*_PUBLIC_COLUMNS, _users.c.hashed_password) if with_password else _PUBLIC_COLUMNS
        with self.engine.connect() as conn:
            row = conn.execute(select(*columns).where(_users.c.email == email.lower())).fetchone()
        return _row_to_user(row) if row is not None else None

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_users)).scalar()
        return result or 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=getattr(row, "hashed_password", None),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
