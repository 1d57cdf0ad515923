from passlib.hash import argon2


def hash_password(plain_password: str) -> str:
    """Return Argon2 hash for plain_password."""
    return argon2.hash(plain_password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a candidate password against a stored Argon2 hash."""
    try:
        return argon2.verify(plain_password, stored_hash)
    except (ValueError, TypeError):
        # malformed or foreign hash
        return False
