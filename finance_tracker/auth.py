"""
Ownership resolution for protected routes.

The login flow lives outside this service; it only has to leave the
account's username under the ``username`` key of the signed session.
A session naming an account that no longer exists is treated exactly like
a missing session, so callers cannot probe which usernames exist.
"""

from __future__ import annotations

import logging
from typing import Final

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from . import crud, database, models

LOG = logging.getLogger(__name__)

SESSION_IDENTITY_KEY: Final[str] = "username"
UNAUTHORIZED_DETAIL: Final[str] = "Unauthorized: no login session"


class Unauthenticated(Exception):
    """The caller has no usable login session."""


class UserNotFound(Unauthenticated):
    """The session names a user that does not exist."""


def current_identity(request: Request) -> str | None:
    """Return the username stored in the caller's session, if any."""
    value = request.session.get(SESSION_IDENTITY_KEY)
    return value if isinstance(value, str) else None


def resolve_owner(session: Session, identity: str | None) -> models.User:
    """Map a session identity to the owning user.

    Raises :class:`Unauthenticated` for a missing or blank identity and
    :class:`UserNotFound` when no account matches it.
    """
    username = (identity or "").strip()
    if not username:
        raise Unauthenticated("No identity in session.")

    user = crud.get_user_by_username(session, username)
    if user is None:
        raise UserNotFound(f"No user named {username!r}.")
    return user


def get_current_user(
    identity: str | None = Depends(current_identity),
    db: Session = Depends(database.get_db),
) -> models.User:
    try:
        return resolve_owner(db, identity)
    except UserNotFound:
        LOG.warning("Session references a missing user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED_DETAIL,
        ) from None
    except Unauthenticated:
        LOG.warning("Rejected request without login session")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED_DETAIL,
        ) from None
