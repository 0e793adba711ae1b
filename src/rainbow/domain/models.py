from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthScheme(str, Enum):
    PUBLIC_KEY = "public_key"
    PRIVATE_KEY = "private_key"

    @classmethod
    def _missing_(cls, value: object) -> AuthScheme | None:
        aliases = {"公钥": cls.PUBLIC_KEY, "私钥": cls.PRIVATE_KEY}
        if isinstance(value, str):
            return aliases.get(value.strip())
        return None


class CityRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    sequence: str = ""
    id: str
    parent_region: str = ""
    short_name: str
    pinyin: str = ""
    lat: float
    lon: float

    @field_validator("id", "short_name")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("city id and short name must not be empty")
        return text


class DailyForecast(BaseModel):
    """One day of the provider's daily forecast.

    Measurements stay as the provider's text so the report shows them exactly
    as sent (``"18"`` rather than ``18.0``).
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    date: date
    text_day: str
    code_day: str = ""
    text_night: str
    code_night: str = ""
    high: str
    low: str
    rainfall: str = ""
    precip: str = ""
    wind_direction: str
    wind_direction_degree: str = ""
    wind_speed: str = ""
    wind_scale: str
    humidity: str


class ForecastReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: tuple[DailyForecast, ...] = Field(default_factory=tuple)
    requested_days: int

    @property
    def truncated(self) -> bool:
        return len(self.days) < self.requested_days


@dataclass(frozen=True, slots=True)
class SignedRequest:
    url: str
    params: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        endpoint = self.url.split("?", 1)[0]
        return f"SignedRequest(url={endpoint!r}, params=<{len(self.params)} hidden>)"
