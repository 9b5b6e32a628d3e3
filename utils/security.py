"""Password hashing helpers."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

# scrypt with N=2**15, r=8, p=1; comparable to a bcrypt cost well above 10.
PASSWORD_HASH_METHOD = "scrypt:32768:8:1"
SALT_LENGTH = 16


def hash_password(plain: str) -> str:
    """Return a salted one-way hash of ``plain``."""

    if not plain:
        raise ValueError("Password must not be empty.")
    return generate_password_hash(
        plain, method=PASSWORD_HASH_METHOD, salt_length=SALT_LENGTH
    )


def verify_password(plain: str, hash_value: str | None) -> bool:
    """Return True when ``plain`` matches ``hash_value``.

    Comparison happens inside werkzeug, which uses ``hmac.compare_digest``.
    """

    if not plain or not hash_value:
        return False
    try:
        return check_password_hash(hash_value, plain)
    except ValueError:
        return False
