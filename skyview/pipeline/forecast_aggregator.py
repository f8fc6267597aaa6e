"""Forecast aggregator: geocode -> current -> forecast -> normalized days."""

import logging
from collections.abc import Mapping

from skyview.config.loader import resolve_api_key
from skyview.config.schema import SkyviewConfig
from skyview.errors import UpstreamError
from skyview.ingest.normalizer import daily_from_current, normalize_forecast
from skyview.ingest.owm_client import OpenWeatherClient
from skyview.models.common import utc_now_iso
from skyview.models.weather import ForecastResult, LocationInfo

logger = logging.getLogger(__name__)


class ForecastAggregator:
    def __init__(self, config: SkyviewConfig, client: OpenWeatherClient):
        self.config = config
        self.client = client

    async def get_forecast(self) -> ForecastResult:
        """Build a fresh ForecastResult for the configured location.

        The three upstream calls run in sequence; the first failure aborts
        the whole operation with UpstreamError.
        """
        query = self.config.location.query
        matches = await self.client.geocode(query, limit=1)
        if not matches:
            logger.warning("Geocoding returned no match for %r", query)
            raise UpstreamError("Location not found")

        hit = matches[0]
        try:
            lat, lon = float(hit["lat"]), float(hit["lon"])
            location = LocationInfo(
                name=str(hit["name"]), country=str(hit.get("country") or "")
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Unexpected geocoding payload: {e!r}") from e
        logger.info("Location coordinates: lat=%.4f lon=%.4f", lat, lon)

        current_raw = await self.client.get_current(lat, lon)
        fetched_at = utc_now_iso()
        forecast_raw = await self.client.get_forecast(lat, lon)

        fc = self.config.forecast
        current = daily_from_current(current_raw, fetched_at)
        upcoming = normalize_forecast(
            forecast_raw,
            mode=fc.sampling,
            stride=fc.forecast_stride,
            limit=fc.max_forecast_days,
        )

        logger.info(
            "Weather data fetched successfully for %s (%d forecast days)",
            location.name, len(upcoming),
        )
        return ForecastResult(location=location, days=(current, *upcoming))


def build_aggregator(
    config: SkyviewConfig, env: Mapping[str, str] | None = None
) -> ForecastAggregator:
    """Wire an aggregator from config. Raises ConfigError when the key is missing."""
    api_key = resolve_api_key(config, env)
    p = config.provider
    client = OpenWeatherClient(
        api_key=api_key,
        base_url=p.base_url,
        geo_url=p.geo_url,
        units=p.units,
        lang=p.lang,
        timeout=p.timeout_seconds,
    )
    return ForecastAggregator(config, client)
