"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from skyview.config.schema import ProviderConfig, SkyviewConfig

FIXTURE_DIR = Path(__file__).parent / "fixtures"

TEST_BASE_URL = "https://test-owm.example.com/data/2.5"
TEST_GEO_URL = "https://test-owm.example.com/geo/1.0"
TEST_API_KEY = "test-key-123"


def load_fixture(name: str):
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def test_config() -> SkyviewConfig:
    """Default config pointed at the mocked provider hosts."""
    return SkyviewConfig(
        provider=ProviderConfig(base_url=TEST_BASE_URL, geo_url=TEST_GEO_URL)
    )


@pytest.fixture
def api_env() -> dict[str, str]:
    return {"OPENWEATHERMAP_API_KEY": TEST_API_KEY}


@pytest.fixture
def geocode_payload() -> list[dict]:
    return load_fixture("owm_geocode_jianye.json")


@pytest.fixture
def current_payload() -> dict:
    return load_fixture("owm_current_jianye.json")


@pytest.fixture
def forecast_payload() -> dict:
    return load_fixture("owm_forecast_jianye.json")


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "location": {"query": "Paris,FR"},
        "forecast": {"sampling": "calendar", "max_forecast_days": 4},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
