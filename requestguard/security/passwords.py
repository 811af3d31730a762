"""
Salted password hashing

Uses PBKDF2-HMAC-SHA256 with a per-password salt. Hashes and salts are
exchanged as base64 strings so they can be stored in text columns.
"""
import base64
import hashlib
import hmac
import secrets

ITERATIONS = 100_000


def generate_salt(nbytes: int = 16) -> str:
    """Generate a random base64-encoded salt"""
    return base64.b64encode(secrets.token_bytes(nbytes)).decode()


def hash_password(password: str, salt: str, iterations: int = ITERATIONS) -> str:
    """
    Hash a password with the given salt

    Args:
        password: Clear text password
        salt: Base64-encoded salt from generate_salt
        iterations: PBKDF2 iteration count

    Returns:
        Base64-encoded derived key
    """
    if password is None or salt is None:
        raise ValueError("password and salt are required")

    derived = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        base64.b64decode(salt),
        iterations
    )
    return base64.b64encode(derived).decode()


def verify_password(password: str, salt: str, expected_hash: str, iterations: int = ITERATIONS) -> bool:
    """Verify a password against a stored hash using constant-time comparison"""
    actual = hash_password(password, salt, iterations)
    return hmac.compare_digest(actual, expected_hash)
