import base64
import json

import pytest

from siteapi.infrastructure.security.jwt_provider import JwtProvider


def _segment(token: str, index: int) -> dict:
    raw = token.split(".")[index]
    raw += "=" * (-len(raw) % 4)
    return json.loads(base64.urlsafe_b64decode(raw))


def _flip_middle_char(token: str, index: int) -> str:
    # caractere do meio: o último pode cair em bits de padding do base64
    parts = token.split(".")
    segment = parts[index]
    middle = len(segment) // 2
    replacement = "A" if segment[middle] != "A" else "B"
    parts[index] = segment[:middle] + replacement + segment[middle + 1:]
    return ".".join(parts)


def test_issue_and_verify_round_trip(jwt_provider):
    token = jwt_provider.issue({"sub": "user-1", "custom": 42}, 60)

    payload = jwt_provider.verify(token)

    assert payload is not None
    assert payload["sub"] == "user-1"
    assert payload["custom"] == 42
    assert payload["exp"] == payload["iat"] + 60
    assert len(payload["jti"]) == 32


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": 42},
        {"sub": "user-1", "nbf": 4_102_444_800},
        {"iss": 7, "aud": ["a", "b"]},
        {"sub": "user-1", "nested": {"roles": ["admin"], "n": None}, "flag": True},
    ],
)
def test_any_json_claims_round_trip(jwt_provider, claims):
    payload = jwt_provider.verify(jwt_provider.issue(claims, 60))

    assert payload is not None
    for key, value in claims.items():
        assert payload[key] == value


def test_header_is_hs256_jwt(jwt_provider):
    token = jwt_provider.issue({"sub": "user-1"}, 60)

    assert _segment(token, 0) == {"typ": "JWT", "alg": "HS256"}


def test_each_token_gets_a_fresh_jti(jwt_provider):
    a = jwt_provider.verify(jwt_provider.issue({"sub": "u"}, 60))
    b = jwt_provider.verify(jwt_provider.issue({"sub": "u"}, 60))

    assert a["jti"] != b["jti"]


@pytest.mark.parametrize("index", [0, 1, 2])
def test_tampered_segment_is_rejected(jwt_provider, index):
    token = jwt_provider.issue({"sub": "user-1"}, 60)

    assert jwt_provider.verify(_flip_middle_char(token, index)) is None


def test_expired_token_is_rejected(jwt_provider):
    token = jwt_provider.issue({"sub": "user-1"}, -1)

    assert jwt_provider.verify(token) is None


def test_other_secret_is_rejected(jwt_provider):
    token = JwtProvider(secret="another-secret").issue({"sub": "user-1"}, 60)

    assert jwt_provider.verify(token) is None


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "not.a.token"])
def test_malformed_tokens_are_rejected(jwt_provider, token):
    assert jwt_provider.verify(token) is None


def test_access_and_refresh_claims_are_typed(jwt_provider):
    access = jwt_provider.issue_access_token(user_id="u-1", email="a@b.com", role="user")
    refresh = jwt_provider.issue_refresh_token(user_id="u-1")

    access_claims = jwt_provider.decode_access(access)
    refresh_claims = jwt_provider.decode_refresh(refresh)

    assert access_claims.sub == "u-1"
    assert access_claims.role == "user"
    assert access_claims.type == "access"
    assert refresh_claims.type == "refresh"

    # um tipo não passa pelo decoder do outro
    assert jwt_provider.decode_access(refresh) is None
    assert jwt_provider.decode_refresh(access) is None


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        JwtProvider(secret="")
