from __future__ import annotations

import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tasker.core.errors import AuthError, ConflictError, NotFoundError
from tasker.core.security import get_password_hash, verify_password
from tasker.models.user import User

log = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.exec(select(User).where(User.username == username)).first()


def register(db: Session, pwd_context: CryptContext, *, username: str, password: str) -> int:
    """
    Store a new user with a bcrypt hash of ``password`` and return its id.
    Raises ConflictError when the username is taken, whether the pre-check
    sees it or the unique index rejects a concurrent insert.
    """
    if get_user_by_username(db, username) is not None:
        raise ConflictError("username already exists")

    user = User(username=username, password_hash=get_password_hash(pwd_context, password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("username already exists")
    db.refresh(user)
    log.info("registered user id=%s username=%s", user.id, username)
    return user.id


def verify(db: Session, pwd_context: CryptContext, *, username: str, password: str) -> int:
    user = get_user_by_username(db, username)
    if user is None:
        # 존재하지 않는 계정도 해시 비교 시간만큼은 소모
        pwd_context.dummy_verify()
        raise NotFoundError("user not found")
    if not verify_password(pwd_context, password, user.password_hash):
        raise AuthError("invalid credentials")
    return user.id
