from fastapi import APIRouter, Depends
from passlib.context import CryptContext
from sqlmodel import Session

from tasker.core.security import get_password_context
from tasker.core.tokens import TokenService, get_token_service
from tasker.db.session import get_session
from tasker.dependencies.auth import Identity, get_current_identity
from tasker.schemas.user import LoginRequest, MessageResponse, RegisterRequest, TokenResponse
from tasker.services import auth_service

auth_router = APIRouter(tags=["auth"])


@auth_router.post("/register", response_model=MessageResponse)
def register(
    body: RegisterRequest,
    db: Session = Depends(get_session),
    pwd_context: CryptContext = Depends(get_password_context),
):
    return auth_service.register_user(db, pwd_context, username=body.username, password=body.password)


@auth_router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_session),
    pwd_context: CryptContext = Depends(get_password_context),
    tokens: TokenService = Depends(get_token_service),
):
    return auth_service.login(db, pwd_context, tokens, username=body.username, password=body.password)


@auth_router.post("/logout", response_model=MessageResponse)
def logout(identity: Identity = Depends(get_current_identity)):
    # 서버에 세션 상태가 없으니 토큰 폐기는 클라이언트 몫
    return {"message": "logged out"}
