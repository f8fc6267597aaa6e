"""OpenWeatherMap API client: geocoding, current conditions and 5-day forecast."""

import logging
from typing import Any

import httpx

from skyview.config.defaults import OWM_BASE_URL, OWM_GEO_URL
from skyview.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "skyview/0.1.0"


class OpenWeatherClient:
    """Async client for the three OpenWeatherMap endpoints.

    No retries: any non-2xx status, transport error, timeout or non-JSON body
    raises UpstreamError. The API key travels only in query params and is
    never logged.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = OWM_BASE_URL,
        geo_url: str = OWM_GEO_URL,
        units: str = "metric",
        lang: str = "en",
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.geo_url = geo_url.rstrip("/")
        self.units = units
        self.lang = lang
        self.timeout = timeout
        self.user_agent = user_agent

    async def geocode(self, query: str, limit: int = 1) -> list[dict]:
        """Resolve a place name to candidate `{lat, lon, name, country}` matches."""
        data = await self._get_json(
            "Geocoding",
            f"{self.geo_url}/direct",
            {"q": query, "limit": limit, "appid": self.api_key},
        )
        if not isinstance(data, list):
            raise UpstreamError("Unexpected geocoding payload: expected a list")
        return data

    async def get_current(self, lat: float, lon: float) -> dict:
        data = await self._get_json(
            "Weather", f"{self.base_url}/weather", self._weather_params(lat, lon)
        )
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected current weather payload: expected an object")
        return data

    async def get_forecast(self, lat: float, lon: float) -> dict:
        """Fetch the 3-hourly forecast list (typically 40 points over 5 days)."""
        data = await self._get_json(
            "Forecast", f"{self.base_url}/forecast", self._weather_params(lat, lon)
        )
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected forecast payload: expected an object")
        return data

    def _weather_params(self, lat: float, lon: float) -> dict[str, Any]:
        return {
            "lat": lat,
            "lon": lon,
            "units": self.units,
            "appid": self.api_key,
            "lang": self.lang,
        }

    async def _get_json(self, label: str, url: str, params: dict[str, Any]) -> Any:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
                resp = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("%s API %s timed out after %.1fs", label, url, self.timeout)
            raise UpstreamError(f"{label} API request timed out") from e
        except httpx.RequestError as e:
            logger.warning("%s API request to %s failed: %s", label, url, type(e).__name__)
            raise UpstreamError(f"{label} API request failed: {type(e).__name__}") from e

        if not resp.is_success:
            logger.error("%s API %s returned %d", label, url, resp.status_code)
            raise UpstreamError(f"{label} API error: {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"{label} API returned invalid JSON") from e
