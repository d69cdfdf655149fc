from fastapi import APIRouter, Depends
from sqlmodel import Session

from tasker.db.session import get_session
from tasker.dependencies.auth import Identity, get_current_identity
from tasker.schemas.user import ThemeUpdate, UserRead
from tasker.services import user_service

user_router = APIRouter(prefix="/me", tags=["user"])


@user_router.get("", response_model=UserRead)
def get_me(
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return user_service.get_profile(db, identity)


@user_router.put("/theme", response_model=UserRead)
def update_theme(
    body: ThemeUpdate,
    db: Session = Depends(get_session),
    identity: Identity = Depends(get_current_identity),
):
    return user_service.set_theme(db, identity, body.theme)
