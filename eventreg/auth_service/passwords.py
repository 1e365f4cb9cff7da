"""
Password hashing and verification (Argon2id).
"""

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """
    Hash a plaintext password for storage.

    Argon2 salts every hash, so hashing the same password twice gives
    two different digests.
    """
    return ph.hash(password)


def verify_password(password: str, digest: str) -> bool:
    """
    Check a plaintext password against a stored digest.

    Returns:
        bool: True on match, False on mismatch.

    Raises:
        argon2.exceptions.InvalidHashError: If `digest` is not an Argon2 hash.
        argon2.exceptions.VerificationError: If Argon2 cannot decode `digest`.
    """
    try:
        return ph.verify(digest, password)
    except VerifyMismatchError:
        return False
