from __future__ import annotations

from collections.abc import Callable

import bcrypt

from db.settings import SETTINGS

PasswordHasher = Callable[[str], str]


def hash_password(plaintext: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or SETTINGS.bcrypt_rounds)
    return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash (e.g. a plaintext value that was never hashed).
        return False


def make_hasher(rounds: int) -> PasswordHasher:
    def _hash(plaintext: str) -> str:
        return hash_password(plaintext, rounds=rounds)

    return _hash
