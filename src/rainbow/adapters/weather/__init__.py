from .base import RequestSigner, WeatherClient
from .client import SeniverseWeatherClient, parse_daily_forecast
from .signing import build_endpoint, build_request, canonical_query, compute_signature, sign_url

__all__ = [
    "RequestSigner",
    "SeniverseWeatherClient",
    "WeatherClient",
    "build_endpoint",
    "build_request",
    "canonical_query",
    "compute_signature",
    "parse_daily_forecast",
    "sign_url",
]
