"""Salted password hashing. Stored credentials are opaque bcrypt hashes."""
from typing import Optional, Tuple

from passlib.context import CryptContext

from shopapi.errors import InvalidRequest

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__min_rounds=12,
)

# bcrypt silently ignores everything past this
BCRYPT_MAX_BYTES = 72


def _check_length(password: str) -> None:
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidRequest(f"Password too long (max {BCRYPT_MAX_BYTES} bytes)")


def hash_password(password: str) -> str:
    _check_length(password)
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    _check_length(plain)
    return pwd_context.verify(plain, hashed)


def verify_and_upgrade(plain: str, hashed: str) -> Tuple[bool, Optional[str]]:
    """
    Check ``plain`` against ``hashed``.

    Returns ``(ok, new_hash)``; ``new_hash`` is set when the stored hash
    used outdated parameters and should be replaced.
    """
    _check_length(plain)
    return pwd_context.verify_and_update(plain, hashed)
