from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable, Dict

from jose import jwt, JWTError

from tasker.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


class TokenError(Exception):
    """Base class for every way a presented token can be rejected."""

    kind = "invalid"


class MalformedToken(TokenError):
    kind = "malformed"


class BadSignature(TokenError):
    kind = "bad_signature"


class TokenExpired(TokenError):
    kind = "expired"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    """
    Issues and verifies HS256 access tokens.

    The signing key is handed in at construction; nothing here reads a
    module-level secret, so tests and key rotation can use their own instance.
    Expiry is checked against ``clock`` rather than python-jose's wall clock.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: int) -> str:
        now = self._clock()
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "typ": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        # header/claims가 안 읽히면 서명 검사까지 갈 필요도 없음
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedToken(str(exc)) from exc

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise BadSignature(str(exc)) from exc

        if payload.get("typ") != ACCESS_TOKEN_TYPE:
            raise MalformedToken("unexpected token type")

        exp = payload.get("exp")
        sub = payload.get("sub")
        if not isinstance(exp, int) or sub is None:
            raise MalformedToken("missing sub/exp claims")
        try:
            user_id = int(sub)
        except (TypeError, ValueError) as exc:
            raise MalformedToken("sub is not a user id") from exc

        if self._clock().timestamp() > exp:
            raise TokenExpired("token expired")
        return user_id


@lru_cache
def get_token_service() -> TokenService:
    """FastAPI Depends(get_token_service) provider built from settings."""
    settings = get_settings()
    return TokenService(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )
