"""
API key generation and hashing.

The raw key is 16 random bytes as lowercase hex and is shown to the operator
once. Only its SHA-256 hex digest is stored.
"""
import hashlib
import secrets

RAW_KEY_BYTES = 16


def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def generate_unique_api_key(api_key: str | None = None) -> tuple[str, str]:
    """Return (hashed_key, raw_key). A supplied raw key is hashed as-is."""
    if api_key is None:
        api_key = secrets.token_hex(RAW_KEY_BYTES)
    return hash_api_key(api_key), api_key


def prefix_api_key(prefix: str, api_key: str) -> str:
    return f"{prefix}{api_key}"
