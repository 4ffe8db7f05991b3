"""Salted password hashing for login."""
import hashlib
import hmac
import secrets

# scrypt cost parameters (interactive-login profile)
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
SALT_BYTES = 16
SCHEME = "scrypt"


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode(),
        salt=salt,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
    )


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh random salt.

    Returns:
        Encoded hash in the form ``scrypt$<salt hex>$<digest hex>``.
    """
    salt = secrets.token_bytes(SALT_BYTES)
    return f"{SCHEME}${salt.hex()}${_derive(password, salt).hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a stored hash using a constant-time comparison."""
    try:
        scheme, salt_hex, digest_hex = encoded.split("$")
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except ValueError:
        return False
    if scheme != SCHEME:
        return False
    return hmac.compare_digest(_derive(password, salt), expected)
