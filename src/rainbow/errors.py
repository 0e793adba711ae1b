from __future__ import annotations

GENERIC_ERROR_MESSAGE = "❌ 未知错误，请查看日志！"


class ForecastError(RuntimeError):
    """Base class for every failure that ends a forecast lookup.

    ``user_message`` is safe to show in chat. ``str(exc)`` may carry operator
    detail and must only go to the logs.
    """

    user_message = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: str | None = None, *, user_message: str | None = None) -> None:
        if user_message is not None:
            self.user_message = user_message
        super().__init__(detail or self.user_message)


class InvalidDayCountError(ForecastError):
    def __init__(self, literal: str) -> None:
        self.literal = literal
        super().__init__(
            f"Rejected day count literal: {literal!r}",
            user_message=f"{literal} 并非合法天数",
        )


class UnknownCityError(ForecastError):
    def __init__(self, city: str) -> None:
        self.city = city
        super().__init__(
            f"No gazetteer entry matched {city!r}",
            user_message=f"未找到城市：{city} 区级请用 北京/朝阳 写法",
        )


class AuthOrQuotaError(ForecastError):
    """HTTP 403: bad key, paid-only location, or another provider refusal."""

    def __init__(self, detail: str | None = None, *, paid_area: bool = False) -> None:
        self.paid_area = paid_area
        message = (
            "🔒 请求被拒绝 查询的是付费区域"
            if paid_area
            else "🔒 请求被拒绝 可能是密钥设置错误或查询的是付费区域"
        )
        super().__init__(detail, user_message=message)


class EndpointConfigError(ForecastError):
    """HTTP 404: the configured base URL does not point at the provider API."""

    user_message = "🚫 请求失败 请检查url设置"


class EmptyPayloadError(ForecastError):
    user_message = "收到的返回为空"


class UnknownClientError(ForecastError):
    user_message = GENERIC_ERROR_MESSAGE


class MalformedSourceError(ForecastError):
    """Raised when the gazetteer source cannot be read into typed rows."""

    user_message = GENERIC_ERROR_MESSAGE
