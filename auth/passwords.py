"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection hashes a password longer than 72 bytes, which bcrypt 4.x rejects.

Each hash_password() call generates a fresh salt, so hashing the same
plaintext twice yields two different strings that both verify.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes of its input. The 128-character
    cap in auth.credentials.USER_RULES keeps ASCII passwords under that limit;
    longer multibyte input is truncated here rather than rejected by bcrypt.
    """
    secret = plain.encode("utf-8")[:72]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        return False
