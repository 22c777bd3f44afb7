"""
Password hashing helpers.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random 16-byte salt.
The stored string carries the algorithm tag, the iteration count, the salt
and the digest separated by ``$``, so the iteration count can be raised
later without invalidating existing hashes.
"""

import hashlib
import hmac
import os


ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 100_000
SALT_BYTES = 16


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Hash a password for storage.

    Parameters
    ----------
    password : str
        The plain text password to hash.
    iterations : int
        PBKDF2 rounds. Higher is slower and stronger.

    Returns
    -------
    str
        ``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``
    """
    salt = os.urandom(SALT_BYTES)
    digest = _derive(password, salt, iterations)
    return f"{ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash string.

    Uses a constant-time comparison. A malformed stored value never
    matches.
    """
    try:
        algorithm, iterations, salt_hex, digest_hex = hashed_password.split("$")
        if algorithm != ALGORITHM:
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    return hmac.compare_digest(_derive(plain_password, salt, rounds), expected)
