import pytest

from tasker.core.errors import AuthError
from tasker.dependencies.auth import Identity, extract_bearer, get_current_identity


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc.def.ghi", "abc.def.ghi"),
        ("abc.def.ghi", "abc.def.ghi"),
        ("  Bearer   abc  ", "abc"),
        ("Bearer ", None),
        ("bearer", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer(raw, expected):
    assert extract_bearer(raw) == expected


def test_identity_from_valid_token(token_service):
    token = token_service.issue(5)

    assert get_current_identity(f"Bearer {token}", token_service) == Identity(user_id=5)


def test_missing_header_is_missing_token(token_service):
    with pytest.raises(AuthError) as excinfo:
        get_current_identity(None, token_service)

    assert excinfo.value.message == "missing token"
    assert excinfo.value.status_code == 401


def test_failure_kinds_are_merged(token_service, clock):
    expired = token_service.issue(5)
    clock.advance(hours=2)

    messages = set()
    for token in (expired, "garbage", "x.y.z"):
        with pytest.raises(AuthError) as excinfo:
            get_current_identity(token, token_service)
        messages.add(excinfo.value.message)

    assert messages == {"invalid token"}


def test_identity_is_immutable():
    ident = Identity(user_id=1)

    with pytest.raises(AttributeError):
        ident.user_id = 2
