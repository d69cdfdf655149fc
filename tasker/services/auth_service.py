from __future__ import annotations

import logging

from passlib.context import CryptContext
from sqlmodel import Session

from tasker.core.errors import AuthError, NotFoundError, ValidationError
from tasker.core.tokens import TokenService
from tasker.services import credential_store

log = logging.getLogger(__name__)


def register_user(db: Session, pwd_context: CryptContext, *, username: str, password: str) -> dict:
    username = username.strip()
    if not username:
        raise ValidationError("username is required")
    if not password:
        raise ValidationError("password is required")
    credential_store.register(db, pwd_context, username=username, password=password)
    return {"message": "registered"}


def login(
    db: Session,
    pwd_context: CryptContext,
    tokens: TokenService,
    *,
    username: str,
    password: str,
) -> dict:
    """
    Verify credentials and issue an access token.
    Unknown usernames and wrong passwords both surface as the same AuthError.
    """
    try:
        user_id = credential_store.verify(db, pwd_context, username=username.strip(), password=password)
    except (NotFoundError, AuthError):
        log.warning("login failed for username=%s", username)
        raise AuthError("invalid credentials")
    return {"token": tokens.issue(user_id)}
