from functools import lru_cache

from passlib.context import CryptContext

from tasker.core.config import get_settings


def build_password_context(rounds: int) -> CryptContext:
    """bcrypt context; ``rounds`` is the cost factor (4..31)."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


@lru_cache
def get_password_context() -> CryptContext:
    return build_password_context(get_settings().bcrypt_rounds)


def get_password_hash(pwd_context: CryptContext, password: str) -> str:
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
