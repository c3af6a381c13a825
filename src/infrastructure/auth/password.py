"""Credential hashing for email/password accounts.

Passwords are digested with SHA-256 before bcrypt sees them: bcrypt only
reads the first 72 bytes of its input, a base64 digest is always 44.
"""

import base64
import hashlib

import bcrypt

BCRYPT_ROUNDS = 12
_ENCODING = "utf-8"


def _bcrypt_input(password: str) -> bytes:
    digest = hashlib.sha256(password.encode(_ENCODING)).digest()
    return base64.b64encode(digest)


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password for storage in ``users.password_hash``."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_bcrypt_input(password), salt).decode(_ENCODING)


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a password against a stored hash.

    A stored value that is not a bcrypt hash never matches.
    """
    try:
        matched = bcrypt.checkpw(_bcrypt_input(password), stored_hash.encode(_ENCODING))
    except ValueError:
        return False
    return bool(matched)
