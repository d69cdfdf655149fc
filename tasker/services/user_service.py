from sqlmodel import Session

from tasker.core.errors import NotFoundError
from tasker.dependencies.auth import Identity
from tasker.models.user import User
from tasker.schemas.user import Theme, UserRead


def _load(db: Session, identity: Identity) -> User:
    user = db.get(User, identity.user_id)
    if user is None:
        # 토큰은 유효하지만 계정이 사라진 경우
        raise NotFoundError("user not found")
    return user


def get_profile(db: Session, identity: Identity) -> UserRead:
    return UserRead.model_validate(_load(db, identity), from_attributes=True)


def set_theme(db: Session, identity: Identity, theme: Theme) -> UserRead:
    user = _load(db, identity)
    user.theme = theme.value
    db.add(user)
    db.commit()
    db.refresh(user)
    return UserRead.model_validate(user, from_attributes=True)
