from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from tasker.core.tokens import (
    BadSignature,
    MalformedToken,
    TokenExpired,
    TokenService,
)

from fakes import FakeClock

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return FakeClock(START)


@pytest.fixture
def service(fixed_clock):
    return TokenService("unit-secret", clock=fixed_clock)


def test_issue_embeds_user_and_one_hour_expiry(service):
    token = service.issue(7)
    claims = jwt.get_unverified_claims(token)

    assert claims["sub"] == "7"
    assert claims["typ"] == "access"
    assert claims["exp"] - claims["iat"] == 3600


def test_verify_returns_user_id(service):
    assert service.verify(service.issue(42)) == 42


def test_verify_succeeds_at_59_minutes(service, fixed_clock):
    token = service.issue(1)
    fixed_clock.advance(minutes=59)

    assert service.verify(token) == 1


def test_verify_fails_expired_at_61_minutes(service, fixed_clock):
    token = service.issue(1)
    fixed_clock.advance(minutes=61)

    with pytest.raises(TokenExpired):
        service.verify(token)


def test_verify_rejects_token_signed_with_another_key(service, fixed_clock):
    foreign = TokenService("someone-elses-secret", clock=fixed_clock).issue(1)

    with pytest.raises(BadSignature):
        service.verify(foreign)


@pytest.mark.parametrize("raw", ["garbage", "a.b.c", "", "Bearer"])
def test_verify_rejects_unparsable_tokens(service, raw):
    with pytest.raises(MalformedToken):
        service.verify(raw)


def test_verify_rejects_wrong_token_type(service):
    exp = int((START + timedelta(hours=1)).timestamp())
    token = jwt.encode({"sub": "1", "typ": "refresh", "exp": exp}, "unit-secret", algorithm="HS256")

    with pytest.raises(MalformedToken):
        service.verify(token)


def test_verify_rejects_non_numeric_subject(service):
    exp = int((START + timedelta(hours=1)).timestamp())
    token = jwt.encode({"sub": "alice", "typ": "access", "exp": exp}, "unit-secret", algorithm="HS256")

    with pytest.raises(MalformedToken):
        service.verify(token)


def test_ttl_is_configurable(fixed_clock):
    svc = TokenService("unit-secret", ttl=timedelta(minutes=5), clock=fixed_clock)
    token = svc.issue(3)
    fixed_clock.advance(minutes=6)

    with pytest.raises(TokenExpired):
        svc.verify(token)


def test_empty_secret_is_rejected():
    with pytest.raises(ValueError):
        TokenService("")
