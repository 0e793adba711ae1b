from __future__ import annotations

import base64
import hashlib
import hmac
import time
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ...domain.models import AuthScheme, SignedRequest
from .base import RequestSigner

DAILY_FORECAST_PATH = "/weather/daily.json"
SIGNATURE_TTL_SECONDS = 60


def build_endpoint(baseurl: str) -> str:
    base = baseurl[:-1] if baseurl.endswith("/") else baseurl
    return f"{base}{DAILY_FORECAST_PATH}"


def canonical_query(params: Mapping[str, Any]) -> str:
    """Join ``key=value`` pairs sorted by their serialized form.

    Sorting happens on the joined ``"key=value"`` string, not on the key
    alone. ``sig`` is never part of the signed string.
    """
    pairs = [f"{key}={value}" for key, value in params.items() if key != "sig"]
    return "&".join(sorted(pairs))


def compute_signature(secret: str, canonical: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_url(url: str, secret: str, params: Mapping[str, Any]) -> str:
    parts = urlsplit(url)
    merged: dict[str, str] = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in params.items():
        merged[key] = str(value)
    merged["sig"] = compute_signature(secret, canonical_query(merged))
    return urlunsplit(parts._replace(query=urlencode(merged)))


def sign_public(
    endpoint: str,
    *,
    private_key: str,
    public_key: str,
    location: str,
    days: int,
    clock: Callable[[], float] = time.time,
) -> SignedRequest:
    params = {
        "ttl": SIGNATURE_TTL_SECONDS,
        "ts": round(clock()),
        "public_key": public_key,
        "location": location,
        "start": 0,
        "days": days,
    }
    return SignedRequest(url=sign_url(endpoint, private_key, params))


def sign_private(
    endpoint: str,
    *,
    private_key: str,
    public_key: str,
    location: str,
    days: int,
    clock: Callable[[], float] = time.time,
) -> SignedRequest:
    # The provider expects the private key in clear as the ``key`` parameter.
    return SignedRequest(
        url=endpoint,
        params={"key": private_key, "location": location, "start": 0, "days": days},
    )


SIGNERS: dict[AuthScheme, RequestSigner] = {
    AuthScheme.PUBLIC_KEY: sign_public,
    AuthScheme.PRIVATE_KEY: sign_private,
}


def build_request(
    scheme: AuthScheme,
    *,
    baseurl: str,
    private_key: str,
    public_key: str,
    location: str,
    days: int,
    clock: Callable[[], float] = time.time,
) -> SignedRequest:
    signer = SIGNERS[scheme]
    return signer(
        build_endpoint(baseurl),
        private_key=private_key,
        public_key=public_key,
        location=location,
        days=days,
        clock=clock,
    )
