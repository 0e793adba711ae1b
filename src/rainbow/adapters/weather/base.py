from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from ...domain.models import SignedRequest


class RequestSigner(Protocol):
    def __call__(
        self,
        endpoint: str,
        *,
        private_key: str,
        public_key: str,
        location: str,
        days: int,
        clock: Callable[[], float],
    ) -> SignedRequest:
        """Turn a forecast request into something the provider will accept."""


class WeatherClient(Protocol):
    async def fetch(self, request: SignedRequest) -> dict[str, Any]:
        """Issue the request and return the decoded provider payload."""
