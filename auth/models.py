"""
auth/models.py -- Domain dataclass for the user entity.

Pattern: Data class (pure data container, zero logic). Mirrors
catalog/models.py -- dataclasses own domain shape; stores and services do
the work.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is always stored lowercased so uniqueness is case-insensitive.

    hashed_password is None whenever the record came from a default store
    read -- only UserStore.get_by_email(..., with_password=True) fills it in.
    The plaintext password never reaches this dataclass.
    """

    name: str
    email: str
    id: int | None = None
    hashed_password: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def public(self) -> User:
        """Return a copy without the password hash."""
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
