"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field

from skyview.config.defaults import (
    DEFAULT_API_KEY_ENV,
    DEFAULT_LOCATION_QUERY,
    OWM_BASE_URL,
    OWM_GEO_URL,
)


class SamplingMode(StrEnum):
    STRIDE = "stride"      # every Nth 3-hour point
    CALENDAR = "calendar"  # one point per dt_txt date, nearest to noon


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OWM_BASE_URL
    geo_url: str = OWM_GEO_URL
    units: str = "metric"
    lang: str = "en"
    timeout_seconds: float = Field(default=10.0, gt=0.0)
    api_key_env: str = DEFAULT_API_KEY_ENV


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    query: str = Field(default=DEFAULT_LOCATION_QUERY, min_length=1)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    sampling: SamplingMode = SamplingMode.STRIDE
    forecast_stride: int = Field(default=8, ge=1)
    max_forecast_days: int = Field(default=6, ge=0, le=16)


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "127.0.0.1"
    port: int = Field(default=8777, ge=1, le=65535)
    cors_origins: list[str] = ["*"]


class ViewerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_url: str = "http://127.0.0.1:8777/api/weather"
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class SkyviewConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    location: LocationConfig = LocationConfig()
    forecast: ForecastConfig = ForecastConfig()
    server: ServerConfig = ServerConfig()
    viewer: ViewerConfig = ViewerConfig()
