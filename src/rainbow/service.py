from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from .adapters.weather.base import WeatherClient
from .adapters.weather.client import SeniverseWeatherClient
from .adapters.weather.signing import build_request
from .domain.models import AuthScheme
from .errors import GENERIC_ERROR_MESSAGE, ForecastError, InvalidDayCountError, UnknownCityError
from .location.gazetteer import CityTable
from .report import normalize, render_report
from .settings import AppSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ForecastOptions:
    baseurl: str
    auth_scheme: AuthScheme
    private_key: str
    public_key: str = ""
    default_day: int = 3

    def __repr__(self) -> str:
        return f"ForecastOptions(baseurl={self.baseurl!r}, auth_scheme={self.auth_scheme.value!r})"


def parse_day_count(raw: str | int | None, default: int) -> int:
    literal = "" if raw is None else str(raw).strip()
    if not literal:
        # The configured default obeys the same rule as user input.
        if default <= 0:
            raise InvalidDayCountError(str(default))
        return default

    try:
        value = float(literal)
    except ValueError as exc:
        raise InvalidDayCountError(str(raw)) from exc
    if not value.is_integer() or value <= 0:
        raise InvalidDayCountError(str(raw))
    return int(value)


def failure_message(city: str, exc: Exception) -> str:
    """Log a failed lookup and return the text that is safe to show the user."""
    if isinstance(exc, ForecastError):
        LOGGER.warning("Forecast lookup for %r failed: %s", city, exc)
        return exc.user_message
    LOGGER.error("Forecast lookup for %r failed unexpectedly", city, exc_info=exc)
    return GENERIC_ERROR_MESSAGE


class ForecastService:
    def __init__(
        self,
        *,
        table: CityTable,
        options: ForecastOptions,
        client: WeatherClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._table = table
        self._options = options
        self._client = client
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: AppSettings, table: CityTable) -> ForecastService:
        weather = settings.yaml.weather
        options = ForecastOptions(
            baseurl=weather.baseurl,
            auth_scheme=weather.auth_scheme,
            private_key=settings.private_key,
            public_key=settings.public_key,
            default_day=weather.default_day,
        )
        return cls(
            table=table,
            options=options,
            client=SeniverseWeatherClient(timeout_seconds=weather.timeout_seconds),
        )

    @property
    def table(self) -> CityTable:
        return self._table

    @property
    def auth_scheme(self) -> AuthScheme:
        return self._options.auth_scheme

    async def get_forecast(
        self,
        city: str,
        day: str | int | None = None,
        *,
        today: date | None = None,
    ) -> str:
        city_id = self._table.resolve(city)
        if city_id is None:
            raise UnknownCityError(city)
        days = parse_day_count(day, self._options.default_day)

        request = build_request(
            self._options.auth_scheme,
            baseurl=self._options.baseurl,
            private_key=self._options.private_key,
            public_key=self._options.public_key,
            location=city_id,
            days=days,
            clock=self._clock,
        )
        payload = await self._client.fetch(request)
        report = normalize(payload, days)
        if report.truncated:
            LOGGER.info("Provider returned %d of %d requested days for %s", len(report.days), days, city_id)
        return render_report(report, today)

    async def reply(self, city: str, day: str | int | None = None) -> str:
        """Entry point for chat hosts: always returns text to send to the user."""
        try:
            return await self.get_forecast(city, day)
        except Exception as exc:
            return failure_message(city, exc)
