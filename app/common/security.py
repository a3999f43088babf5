"""Password hashing.

A single SHA-256 hex digest so hashes stay compatible with records written by
existing clients. This is a fast hash, not a KDF.
"""
from __future__ import annotations

import hashlib
import hmac


def hash_password(plain: str) -> str:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return hmac.compare_digest(hash_password(plain), hashed)
