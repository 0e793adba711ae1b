from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .errors import (
    AuthOrQuotaError,
    EmptyPayloadError,
    EndpointConfigError,
    ForecastError,
    InvalidDayCountError,
    UnknownCityError,
    UnknownClientError,
)
from .location.gazetteer import load_city_table
from .service import ForecastService, failure_message
from .settings import AppSettings, load_settings

ERROR_STATUS_CODES: dict[type[ForecastError], int] = {
    InvalidDayCountError: 400,
    UnknownCityError: 404,
    AuthOrQuotaError: 502,
    EndpointConfigError: 502,
    EmptyPayloadError: 502,
    UnknownClientError: 502,
}


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_service(request: Request) -> ForecastService:
    return request.app.state.service


def _status_for(exc: Exception) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(application: FastAPI):
    settings = load_settings()
    table = load_city_table(settings.gazetteer_path)

    application.state.settings = settings
    application.state.service = ForecastService.from_settings(settings, table)
    application.state.started_at_utc = datetime.now(timezone.utc)
    yield


app = FastAPI(title="Rainbow Weather", version="0.1.0", lifespan=lifespan)


@app.get("/weather", response_class=PlainTextResponse)
async def weather(
    request: Request,
    city: str = Query(..., min_length=1),
    day: str | None = Query(default=None),
) -> PlainTextResponse:
    service = _get_service(request)
    try:
        text = await service.get_forecast(city, day)
    except Exception as exc:
        return PlainTextResponse(failure_message(city, exc), status_code=_status_for(exc))
    return PlainTextResponse(text)


@app.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    service = _get_service(request)
    return JSONResponse(
        {
            "status": "ok",
            "service": "rainbow-weather",
            "environment": settings.env.rainbow_env,
            "auth_scheme": service.auth_scheme.value,
            "city_count": len(service.table),
            "started_at_utc": request.app.state.started_at_utc.isoformat(),
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        }
    )
