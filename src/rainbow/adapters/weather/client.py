from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ...domain.models import DailyForecast, SignedRequest
from ...errors import (
    AuthOrQuotaError,
    EmptyPayloadError,
    EndpointConfigError,
    UnknownClientError,
)

LOGGER = logging.getLogger(__name__)
# httpx logs every request URL at INFO, query string included.
logging.getLogger("httpx").setLevel(logging.WARNING)

DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = "rainbow-weather/0.1"

# Provider status code for locations that need a paid plan.
PAID_AREA_STATUS_CODE = "AP010006"


def _response_status_code(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    status_code = body.get("status_code")
    return status_code if isinstance(status_code, str) else None


def _classify_status(response: httpx.Response) -> None:
    status = response.status_code
    if status < 400:
        return

    if status == 403:
        status_code = _response_status_code(response)
        raise AuthOrQuotaError(
            f"Provider refused the request (HTTP 403, status_code={status_code})",
            paid_area=status_code == PAID_AREA_STATUS_CODE,
        )
    if status == 404:
        raise EndpointConfigError(f"Provider endpoint not found (HTTP 404): {response.url.path}")

    snippet = (response.text or "")[:300]
    LOGGER.error("Weather provider returned HTTP %s. Body: %s", status, snippet)
    raise UnknownClientError(f"HTTP {status} from weather provider")


class SeniverseWeatherClient:
    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._transport = transport

    async def fetch(self, request: SignedRequest) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            ) as client:
                response = await client.get(request.url, params=request.params or None)
        except httpx.HTTPError as exc:
            # Only the endpoint is logged; the query may carry credentials.
            LOGGER.exception("Weather provider request to %s failed", request.url.split("?", 1)[0])
            raise UnknownClientError("Weather provider request failed") from exc

        _classify_status(response)

        try:
            payload = response.json()
        except ValueError as exc:
            LOGGER.exception("Weather provider returned a non-JSON body")
            raise UnknownClientError("Weather provider returned a non-JSON body") from exc

        if not isinstance(payload, dict):
            LOGGER.error("Unexpected weather payload type: %s", type(payload).__name__)
            raise UnknownClientError("Unexpected weather provider response shape")
        return payload


def parse_daily_forecast(payload: Any) -> list[DailyForecast]:
    results = payload.get("results") if isinstance(payload, dict) else None
    first = results[0] if isinstance(results, list) and results else None
    daily_data = first.get("daily") if isinstance(first, dict) else None
    if not isinstance(daily_data, list) or not daily_data:
        raise EmptyPayloadError("Provider response did not include results[0].daily")

    daily_forecast: list[DailyForecast] = []
    for index, item in enumerate(daily_data):
        try:
            daily_forecast.append(DailyForecast.model_validate(item))
        except ValidationError as exc:
            LOGGER.error("Invalid daily forecast record at index %d: %s", index, exc)
            raise EmptyPayloadError(f"Invalid daily forecast record at index {index}") from exc
    return daily_forecast
