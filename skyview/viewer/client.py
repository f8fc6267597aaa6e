"""HTTP client the viewer uses to poll the aggregator's /api/weather route."""

import logging

import httpx

from skyview.errors import ClientFetchError
from skyview.models.weather import ForecastResult

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Failed to fetch weather data"


class WeatherApiClient:
    def __init__(self, api_url: str, timeout: float = 10.0):
        self.api_url = api_url
        self.timeout = timeout

    async def fetch(self) -> ForecastResult:
        """GET the route and parse it. Every failure becomes ClientFetchError."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(self.api_url)
        except httpx.TimeoutException as e:
            raise ClientFetchError("Weather service timed out") from e
        except httpx.RequestError as e:
            logger.warning("Request to %s failed: %s", self.api_url, e)
            raise ClientFetchError(FALLBACK_MESSAGE) from e

        if not resp.is_success:
            raise ClientFetchError(_error_message(resp))

        try:
            body = resp.json()
        except ValueError as e:
            raise ClientFetchError("Weather service returned invalid JSON") from e
        return ForecastResult.from_payload(body)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return FALLBACK_MESSAGE
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return FALLBACK_MESSAGE
