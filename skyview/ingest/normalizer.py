"""Reshape OpenWeatherMap payloads into DailyWeather entries.

The forecast endpoint returns points at a fixed 3-hour cadence. The default
stride of 8 keeps one point per 24 hours at the time of day of the first
point. It is not anchored to midnight, so the first sampled entry can fall
on the current date.
"""

import logging
import math
from typing import Any

from skyview.config.schema import SamplingMode
from skyview.errors import UpstreamError
from skyview.models.weather import DailyWeather

logger = logging.getLogger(__name__)

DEFAULT_STRIDE = 8
DEFAULT_MAX_DAYS = 6
_NOON_HOUR = 12


def round_half_up(value: Any) -> int:
    """Round to the nearest integer with halves going up (21.5 -> 22, -2.5 -> -2).

    Used for both temperature and humidity.
    """
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value {value!r}")
    return math.floor(number + 0.5)


def daily_from_current(payload: dict, fetched_at: str) -> DailyWeather:
    """Current conditions, dated with the retrieval instant."""
    return _to_daily(payload, fetched_at, "current weather")


def daily_from_forecast_item(item: dict) -> DailyWeather:
    try:
        date = item["dt_txt"]
    except (KeyError, TypeError) as e:
        raise UpstreamError("Unexpected forecast payload: point without dt_txt") from e
    return _to_daily(item, str(date), "forecast")


def _to_daily(payload: dict, date: str, source: str) -> DailyWeather:
    try:
        main = payload["main"]
        weather = payload["weather"][0]
        wind = payload.get("wind") or {}
        wind_speed = float(wind.get("speed") or 0)
        if not math.isfinite(wind_speed):
            raise ValueError(f"non-finite wind speed {wind_speed!r}")
        if wind_speed < 0:
            raise ValueError(f"negative wind speed {wind_speed!r}")
        return DailyWeather(
            date=date,
            temperature=round_half_up(main["temp"]),
            condition=str(weather["main"]),
            description=str(weather["description"]),
            humidity=round_half_up(main["humidity"]),
            wind_speed=wind_speed,
            icon=str(weather["icon"]),
        )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise UpstreamError(f"Unexpected {source} payload: {e!r}") from e


def sample_stride(
    points: list, stride: int = DEFAULT_STRIDE, limit: int = DEFAULT_MAX_DAYS
) -> list:
    """Every `stride`-th point starting at index 0, at most `limit` of them."""
    return points[::stride][:limit]


def sample_calendar(points: list, limit: int = DEFAULT_MAX_DAYS) -> list:
    """One point per dt_txt date, the one closest to noon, in list order."""
    best: dict[str, tuple[int, Any]] = {}
    for item in points:
        try:
            dt_txt = str(item["dt_txt"])
            day, hour = dt_txt[:10], int(dt_txt[11:13])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Unexpected forecast payload: bad dt_txt ({e!r})") from e
        distance = abs(hour - _NOON_HOUR)
        if day not in best or distance < best[day][0]:
            best[day] = (distance, item)
    return [item for _, item in best.values()][:limit]


def normalize_forecast(
    payload: dict,
    mode: SamplingMode = SamplingMode.STRIDE,
    stride: int = DEFAULT_STRIDE,
    limit: int = DEFAULT_MAX_DAYS,
) -> list[DailyWeather]:
    """Turn a /forecast payload into up to `limit` daily entries, oldest first."""
    points = payload.get("list") or []
    if not isinstance(points, list):
        raise UpstreamError("Unexpected forecast payload: 'list' is not an array")

    if mode == SamplingMode.CALENDAR:
        sampled = sample_calendar(points, limit)
    else:
        sampled = sample_stride(points, stride, limit)

    logger.debug(
        "Sampled %d of %d forecast points (mode=%s)", len(sampled), len(points), mode
    )
    return [daily_from_forecast_item(item) for item in sampled]
