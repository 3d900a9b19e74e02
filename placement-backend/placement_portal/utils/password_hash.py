# password_hash.py
from __future__ import annotations

import hashlib
import hmac
import secrets

# scrypt cost parameters; N=2**14, r=8 needs ~16 MiB per hash.
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
KEY_LENGTH = 64
SALT_BYTES = 16


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        maxmem=64 * 1024 * 1024,
        dklen=KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """Return ``"<hex derived key>.<hex salt>"`` for ``password``."""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_derive(password, salt).hex()}.{salt}"


def verify_password(password: str, stored: str) -> bool:
    try:
        hashed, salt = (stored or "").split(".", 1)
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    if not salt or len(expected) != KEY_LENGTH:
        return False
    return hmac.compare_digest(expected, _derive(password, salt))
