"""Caller identity for API routes.

Authentication happens upstream; the gateway forwards the authenticated
user's id in the ``X-User-Id`` header.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status


def _parse(value: str) -> str:
    try:
        return str(UUID(value))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid X-User-Id header"
        ) from e


def require_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """The authenticated user's id; 401 when absent."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )
    return _parse(x_user_id)


def optional_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str | None:
    """The viewer's id when present; reads work anonymously."""
    return _parse(x_user_id) if x_user_id else None


CurrentUserId = Annotated[str, Depends(require_user_id)]
ViewerId = Annotated[str | None, Depends(optional_user_id)]
