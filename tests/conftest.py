from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from rainbow.domain.models import AuthScheme, SignedRequest
from rainbow.location.gazetteer import CityTable, load_city_table
from rainbow.service import ForecastOptions, ForecastService

DATA_DIR = Path(__file__).parent / "data"

CITY_ROWS = [
    "序号,城市ID,行政归属,城市简称,拼音,lat,lon",
    "1,WX4FBXXFKE4F,中国/北京,北京,beijing,39.90499,116.40529",
    "2,WX4G5JNM0K1C,中国/北京/朝阳,北京/朝阳,chaoyang,39.92149,116.44318",
    "3,WTW3SJ5ZBJUY,中国/上海,上海,shanghai,31.23171,121.47264",
    "4,WTW3SJ5ZPUDO,中国/上海/浦东,上海/浦东新,pudongxin,31.22114,121.54409",
    "5,WXRVB9QYXKY8,中国/辽宁/朝阳,辽宁/朝阳,chaoyang,41.57676,120.45118",
]


@pytest.fixture
def city_table() -> CityTable:
    return load_city_table(CITY_ROWS)


@pytest.fixture
def daily_payload() -> dict[str, Any]:
    return json.loads((DATA_DIR / "daily_3.json").read_text(encoding="utf-8"))


@pytest.fixture
def payload_with_days(daily_payload):
    """Build a provider payload holding ``count`` copies of the first fixture day."""

    def _build(count: int) -> dict[str, Any]:
        template = daily_payload["results"][0]["daily"][0]
        payload = copy.deepcopy(daily_payload)
        payload["results"][0]["daily"] = [
            {**template, "date": f"2025-05-{index + 1:02d}"} for index in range(count)
        ]
        return payload

    return _build


class FakeWeatherClient:
    def __init__(self, payload: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.requests: list[SignedRequest] = []

    async def fetch(self, request: SignedRequest) -> dict[str, Any]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.payload or {}


@pytest.fixture
def fake_client_cls() -> type[FakeWeatherClient]:
    return FakeWeatherClient


@pytest.fixture
def make_service(city_table):
    def _make(
        client: FakeWeatherClient,
        *,
        auth_scheme: AuthScheme = AuthScheme.PRIVATE_KEY,
        default_day: int = 3,
    ) -> ForecastService:
        options = ForecastOptions(
            baseurl="https://api.example.com/v3/",
            auth_scheme=auth_scheme,
            private_key="testkey",
            public_key="pub",
            default_day=default_day,
        )
        return ForecastService(
            table=city_table,
            options=options,
            client=client,
            clock=lambda: 1700000000.0,
        )

    return _make
