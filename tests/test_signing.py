from __future__ import annotations

import base64
import hashlib
import hmac
from urllib.parse import parse_qs, urlsplit

from rainbow.adapters.weather.signing import (
    build_endpoint,
    build_request,
    canonical_query,
    compute_signature,
    sign_url,
)
from rainbow.domain.models import AuthScheme

ENDPOINT = "https://api.example.com/v3/weather/daily.json"
PARAMS = {
    "ttl": 60,
    "ts": 1700000000,
    "public_key": "pub",
    "location": "WX4FBXXFKE4W",
    "start": 0,
    "days": 3,
}
EXPECTED_CANONICAL = "days=3&location=WX4FBXXFKE4W&public_key=pub&start=0&ts=1700000000&ttl=60"


def _reference_sig(secret: str, message: str) -> str:
    digest = hmac.new(secret.encode(), message.encode(), hashlib.sha1).digest()
    return base64.b64encode(digest).decode()


def _query(url: str) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


def test_build_endpoint_strips_one_trailing_slash():
    assert build_endpoint("https://api.example.com/v3/") == ENDPOINT
    assert build_endpoint("https://api.example.com/v3") == ENDPOINT


def test_canonical_query_sorts_serialized_pairs():
    assert canonical_query(PARAMS) == EXPECTED_CANONICAL


def test_canonical_query_ignores_existing_signature():
    assert canonical_query({**PARAMS, "sig": "stale"}) == EXPECTED_CANONICAL


def test_canonical_query_orders_by_pair_not_key():
    # A key-only sort would put "a" before "a.b"; "." sorts before "=".
    assert canonical_query({"a": 2, "a.b": 1}) == "a.b=1&a=2"


def test_compute_signature_matches_reference_hmac():
    assert compute_signature("testkey", EXPECTED_CANONICAL) == _reference_sig("testkey", EXPECTED_CANONICAL)


def test_sign_url_appends_signature_over_canonical_query():
    url = sign_url(ENDPOINT, "testkey", PARAMS)

    query = _query(url)
    assert url.startswith(ENDPOINT + "?")
    assert query["sig"] == _reference_sig("testkey", EXPECTED_CANONICAL)
    assert query["location"] == "WX4FBXXFKE4W"
    assert query["ttl"] == "60"


def test_sign_url_is_deterministic_and_sensitive_to_params():
    first = sign_url(ENDPOINT, "testkey", PARAMS)
    second = sign_url(ENDPOINT, "testkey", dict(PARAMS))
    changed = sign_url(ENDPOINT, "testkey", {**PARAMS, "days": 4})

    assert first == second
    assert _query(first)["sig"] != _query(changed)["sig"]


def test_sign_url_signs_query_already_on_base_url():
    url = sign_url(ENDPOINT + "?language=zh-Hans", "testkey", PARAMS)

    expected = _reference_sig("testkey", "days=3&language=zh-Hans&" + EXPECTED_CANONICAL[7:])
    assert _query(url)["sig"] == expected


def test_public_scheme_builds_signed_url_without_params():
    request = build_request(
        AuthScheme.PUBLIC_KEY,
        baseurl="https://api.example.com/v3/",
        private_key="testkey",
        public_key="pub",
        location="WX4FBXXFKE4W",
        days=3,
        clock=lambda: 1700000000.2,
    )

    assert request.params == {}
    assert _query(request.url)["ts"] == "1700000000"
    assert _query(request.url)["sig"] == _reference_sig("testkey", EXPECTED_CANONICAL)


def test_private_scheme_sends_key_in_params():
    request = build_request(
        AuthScheme.PRIVATE_KEY,
        baseurl="https://api.example.com/v3",
        private_key="secret",
        public_key="",
        location="WX4FBXXFKE4W",
        days=5,
    )

    assert request.url == ENDPOINT
    assert request.params == {"key": "secret", "location": "WX4FBXXFKE4W", "start": 0, "days": 5}
    assert "secret" not in repr(request)
