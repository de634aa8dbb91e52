import pytest

from siteapi.core.request_utils import extract_bearer_token, is_public_ip, resolve_client_ip


@pytest.mark.parametrize(
    "value,expected",
    [
        ("8.8.8.8", True),
        ("2606:4700:4700::1111", True),
        ("10.0.0.1", False),
        ("192.168.1.10", False),
        ("127.0.0.1", False),
        ("169.254.1.1", False),
        ("::1", False),
        ("0.0.0.0", False),
        ("not-an-ip", False),
    ],
)
def test_is_public_ip(value, expected):
    assert is_public_ip(value) is expected


def test_cloudflare_header_wins():
    environ = {
        "HTTP_CF_CONNECTING_IP": "1.1.1.1",
        "HTTP_X_FORWARDED_FOR": "8.8.8.8",
        "REMOTE_ADDR": "10.0.0.5",
    }
    assert resolve_client_ip(environ) == "1.1.1.1"


def test_first_forwarded_for_entry_is_used():
    environ = {"HTTP_X_FORWARDED_FOR": "8.8.4.4, 10.0.0.1", "REMOTE_ADDR": "10.0.0.5"}
    assert resolve_client_ip(environ) == "8.8.4.4"


def test_private_proxy_values_are_ignored():
    environ = {"HTTP_X_FORWARDED_FOR": "192.168.0.7", "HTTP_X_REAL_IP": "9.9.9.9", "REMOTE_ADDR": "10.0.0.5"}
    assert resolve_client_ip(environ) == "9.9.9.9"


def test_falls_back_to_remote_addr():
    assert resolve_client_ip({"HTTP_X_FORWARDED_FOR": "garbage", "REMOTE_ADDR": "127.0.0.1"}) == "127.0.0.1"
    assert resolve_client_ip({}) == "0.0.0.0"


def test_proxy_headers_can_be_ignored():
    environ = {"HTTP_X_FORWARDED_FOR": "8.8.8.8", "REMOTE_ADDR": "10.0.0.5"}
    assert resolve_client_ip(environ, trust_proxy_headers=False) == "10.0.0.5"


def test_extract_bearer_token():
    assert extract_bearer_token({"Authorization": "Bearer abc.def.ghi"}) == "abc.def.ghi"
    assert extract_bearer_token({"Authorization": "bearer xyz"}) == "xyz"
    assert extract_bearer_token({"Authorization": "Basic xyz"}) is None
    assert extract_bearer_token({"Authorization": "Bearer "}) is None
    assert extract_bearer_token({}, {"token": "from-query"}) == "from-query"
    assert extract_bearer_token({}) is None
