"""
Password hashing for deployment users (bcrypt with a per-hash salt).
"""

import bcrypt


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt with auto-generated salt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password as string
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")
