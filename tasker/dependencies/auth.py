import logging
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import APIKeyHeader

from tasker.core.errors import AuthError
from tasker.core.tokens import TokenError, TokenService, get_token_service

log = logging.getLogger(__name__)

authorization_header = APIKeyHeader(
    name="Authorization",
    scheme_name="BearerToken",
    description="Access token, optionally prefixed with 'Bearer '",
    auto_error=False,
)


@dataclass(frozen=True)
class Identity:
    """Verified requester. Only get_current_identity constructs these for requests."""

    user_id: int


def extract_bearer(raw: str | None) -> str | None:
    if not raw:
        return None
    token = raw.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == "bearer":
        token = rest.strip()
    return token or None


def get_current_identity(
    authorization: str | None = Depends(authorization_header),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Strict auth dependency; raises 401 when the token is missing or invalid."""
    token = extract_bearer(authorization)
    if token is None:
        raise AuthError("missing token")

    try:
        user_id = tokens.verify(token)
    except TokenError as exc:
        # 실패 종류는 로그에만 남기고 응답은 하나로 통일
        log.info("rejected token (%s)", exc.kind)
        raise AuthError("invalid token")
    return Identity(user_id=user_id)
