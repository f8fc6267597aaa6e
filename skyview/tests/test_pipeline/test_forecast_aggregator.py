"""Tests for the forecast aggregator against a mocked OpenWeatherMap."""

import asyncio
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx

from skyview.config.schema import ForecastConfig, SamplingMode, SkyviewConfig
from skyview.errors import ConfigError, UpstreamError
from skyview.pipeline.forecast_aggregator import ForecastAggregator, build_aggregator


def _mock_provider(config: SkyviewConfig, geocode, current, forecast):
    p = config.provider
    return (
        respx.get(f"{p.geo_url}/direct").mock(return_value=geocode),
        respx.get(f"{p.base_url}/weather").mock(return_value=current),
        respx.get(f"{p.base_url}/forecast").mock(return_value=forecast),
    )


@pytest.fixture
def aggregator(test_config: SkyviewConfig, api_env: dict) -> ForecastAggregator:
    return build_aggregator(test_config, env=api_env)


class TestGetForecast:
    @respx.mock
    def test_success(
        self,
        aggregator: ForecastAggregator,
        test_config: SkyviewConfig,
        geocode_payload,
        current_payload,
        forecast_payload,
    ):
        _mock_provider(
            test_config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(200, json=current_payload),
            httpx.Response(200, json=forecast_payload),
        )

        result = asyncio.run(aggregator.get_forecast())

        assert result.location.name == "Jianye District"
        assert result.location.country == "CN"
        assert len(result.days) == 6  # current + 5 sampled from 40 points

        current = result.days[0]
        assert current.temperature == 22
        assert current.humidity == 55
        assert current.wind_speed == 3.1
        fetched = datetime.fromisoformat(current.date)
        assert abs(datetime.now(UTC) - fetched) < timedelta(minutes=1)

        assert result.days[1].date == "2026-10-19 15:00:00"
        assert result.days[-1].date == "2026-10-23 15:00:00"

    @respx.mock
    def test_coordinates_passed_through(
        self, aggregator, test_config, geocode_payload, current_payload, forecast_payload
    ):
        _, weather_route, forecast_route = _mock_provider(
            test_config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(200, json=current_payload),
            httpx.Response(200, json=forecast_payload),
        )

        asyncio.run(aggregator.get_forecast())

        for route in (weather_route, forecast_route):
            params = route.calls[0].request.url.params
            assert params["lat"] == "32.0034"
            assert params["lon"] == "118.7222"

    @respx.mock
    def test_location_not_found_stops_early(self, aggregator, test_config):
        geo, weather, forecast = _mock_provider(
            test_config,
            httpx.Response(200, json=[]),
            httpx.Response(200, json={}),
            httpx.Response(200, json={}),
        )

        with pytest.raises(UpstreamError, match="Location not found"):
            asyncio.run(aggregator.get_forecast())

        assert geo.call_count == 1
        assert not weather.called
        assert not forecast.called

    @respx.mock
    def test_current_failure_skips_forecast(self, aggregator, test_config, geocode_payload):
        _, _, forecast = _mock_provider(
            test_config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(500),
            httpx.Response(200, json={}),
        )

        with pytest.raises(UpstreamError, match="Weather API error: 500"):
            asyncio.run(aggregator.get_forecast())
        assert not forecast.called

    @respx.mock
    def test_forecast_failure(self, aggregator, test_config, geocode_payload, current_payload):
        _mock_provider(
            test_config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(200, json=current_payload),
            httpx.Response(502),
        )

        with pytest.raises(UpstreamError, match="Forecast API error: 502"):
            asyncio.run(aggregator.get_forecast())

    @respx.mock
    def test_geocode_without_coordinates(self, aggregator, test_config):
        _mock_provider(
            test_config,
            httpx.Response(200, json=[{"name": "Somewhere"}]),
            httpx.Response(200, json={}),
            httpx.Response(200, json={}),
        )

        with pytest.raises(UpstreamError, match="geocoding"):
            asyncio.run(aggregator.get_forecast())

    @respx.mock
    def test_short_forecast_list(
        self, aggregator, test_config, geocode_payload, current_payload, forecast_payload
    ):
        short = {**forecast_payload, "list": forecast_payload["list"][:7]}
        _mock_provider(
            test_config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(200, json=current_payload),
            httpx.Response(200, json=short),
        )

        result = asyncio.run(aggregator.get_forecast())
        assert len(result.days) == 2

    @respx.mock
    def test_calendar_sampling(
        self, test_config, api_env, geocode_payload, current_payload, forecast_payload
    ):
        config = test_config.model_copy(
            update={"forecast": ForecastConfig(sampling=SamplingMode.CALENDAR)}
        )
        _mock_provider(
            config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(200, json=current_payload),
            httpx.Response(200, json=forecast_payload),
        )

        result = asyncio.run(build_aggregator(config, env=api_env).get_forecast())
        assert len(result.days) == 7
        assert result.days[2].date == "2026-10-20 12:00:00"

    @respx.mock
    def test_max_days_respected(
        self, test_config, api_env, geocode_payload, current_payload, forecast_payload
    ):
        config = test_config.model_copy(
            update={"forecast": ForecastConfig(max_forecast_days=2)}
        )
        _mock_provider(
            config,
            httpx.Response(200, json=geocode_payload),
            httpx.Response(200, json=current_payload),
            httpx.Response(200, json=forecast_payload),
        )

        result = asyncio.run(build_aggregator(config, env=api_env).get_forecast())
        assert len(result.days) == 3


class TestBuildAggregator:
    def test_missing_key(self, test_config):
        with pytest.raises(ConfigError, match="configuration error"):
            build_aggregator(test_config, env={})

    def test_blank_key(self, test_config):
        with pytest.raises(ConfigError):
            build_aggregator(test_config, env={"OPENWEATHERMAP_API_KEY": "  "})

    def test_client_wired_from_config(self, test_config, api_env):
        agg = build_aggregator(test_config, env=api_env)
        assert agg.client.base_url == test_config.provider.base_url
        assert agg.client.api_key == api_env["OPENWEATHERMAP_API_KEY"]
