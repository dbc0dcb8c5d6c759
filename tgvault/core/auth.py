"""Owner resolution: FastAPI dependencies yielding the caller's owner identity.

Public interface:
    ``require_owner``: owner from ``Authorization: Bearer <owner token>``;
                       raises 401 when absent or undecodable.
    ``path_owner``:    owner from the ``{username}`` path segment used by the
                       collection and folder routes.

Services never read ambient state: endpoints resolve an ``OwnerContext``
here and pass ``owner`` explicitly into every service call.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .owner_token import MAX_USERNAME_LENGTH, clean_username, decode_owner_token
from ..exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class OwnerContext:
    """Resolved owner identity available to every endpoint."""

    owner: str
    photo_url: Optional[str] = None


def require_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> OwnerContext:
    """Require a decodable owner token and return the caller's OwnerContext."""
    if credentials is None:
        raise AuthenticationError("Missing owner token")

    payload = decode_owner_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid owner token")

    return OwnerContext(owner=payload.username, photo_url=payload.photo_url)


def path_owner(username: str = Path(..., min_length=1)) -> OwnerContext:
    """Resolve the owner from the ``{username}`` path segment."""
    owner = clean_username(username)
    if not owner:
        raise ValidationError("Username cannot be empty", field="username")
    if len(owner) > MAX_USERNAME_LENGTH:
        raise ValidationError("Username is too long", field="username")
    return OwnerContext(owner=owner)
