"""Pure functions for encoding and decoding owner tokens.

An owner token is the base64url encoding (no padding) of a small JSON
object carrying the Telegram username. It is trivially reversible: it
identifies the caller, it does not authenticate them.

No classes beyond the payload, no state, just encode/decode.
"""

import base64
import json
from dataclasses import dataclass
from typing import Optional

# Telegram usernames are at most 32 characters; leave room for legacy names.
MAX_USERNAME_LENGTH = 64


@dataclass(frozen=True)
class OwnerTokenPayload:
    """Decoded owner token. Immutable."""
    username: str
    photo_url: Optional[str] = None


def clean_username(username: str) -> str:
    """Strip surrounding whitespace and a single leading ``@``."""
    username = username.strip()
    return username[1:] if username.startswith("@") else username


def create_owner_token(username: str, photo_url: Optional[str] = None) -> str:
    """Create an owner token for *username*.

    Raises:
        ValueError: If the username is empty after cleaning.
    """
    username = clean_username(username)
    if not username:
        raise ValueError("Username cannot be empty")

    payload = {"username": username}
    if photo_url:
        payload["photo_url"] = photo_url
    return _b64encode(json.dumps(payload, ensure_ascii=False).encode("utf-8")).decode()


def decode_owner_token(token: str) -> Optional[OwnerTokenPayload]:
    """Decode an owner token.

    Returns ``None`` on any failure (malformed base64, bad JSON, missing or
    oversized username) rather than raising; callers decide what to do
    with absence.
    """
    try:
        payload = json.loads(_b64decode(token.strip().encode()))
        if not isinstance(payload, dict):
            return None
        username = payload.get("username")
        if not isinstance(username, str):
            return None
        username = clean_username(username)
        if not username or len(username) > MAX_USERNAME_LENGTH:
            return None
        photo_url = payload.get("photo_url")
        return OwnerTokenPayload(
            username=username,
            photo_url=photo_url if isinstance(photo_url, str) else None,
        )
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        return None


# --- base64url helpers (no padding, URL-safe) ---

def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    padding = 4 - len(data) % 4
    if padding != 4:
        data += b"=" * padding
    return base64.urlsafe_b64decode(data)
