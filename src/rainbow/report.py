from __future__ import annotations

from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from .adapters.weather.client import parse_daily_forecast
from .domain.models import DailyForecast, ForecastReport

REPORT_TIMEZONE = ZoneInfo("Asia/Shanghai")
NO_PREVAILING_WIND = "无持续风向"


def local_today() -> date:
    return datetime.now(REPORT_TIMEZONE).date()


def normalize(payload: Any, requested_days: int) -> ForecastReport:
    days = parse_daily_forecast(payload)
    return ForecastReport(days=tuple(days), requested_days=requested_days)


def _format_date_label(forecast_date: date, today: date) -> str:
    label = forecast_date.isoformat()
    return f"{label}（今天）" if forecast_date == today else label


def _format_condition(day: DailyForecast) -> str:
    if day.text_day == day.text_night:
        return day.text_day
    return f"{day.text_day} 转 {day.text_night}"


def _format_wind(day: DailyForecast) -> str:
    unit = "" if day.wind_direction.startswith(NO_PREVAILING_WIND) else "风"
    return f"{day.wind_direction}{unit}{day.wind_scale}级"


def format_day(day: DailyForecast, today: date) -> str:
    return (
        f"{_format_date_label(day.date, today)}\n"
        f"    天气：{_format_condition(day)}\n"
        f"    温度：{day.low} - {day.high} ℃\n"
        f"    湿度：{day.humidity} %\n"
        f"    {_format_wind(day)}\n\n"
    )


def render_report(report: ForecastReport, today: date | None = None) -> str:
    reference = today or local_today()
    body = "".join(format_day(day, reference) for day in report.days)
    if report.truncated:
        return f"免费用户只能获取最近{len(report.days)}天的信息：\n{body}"
    return body
