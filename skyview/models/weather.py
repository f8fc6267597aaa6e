"""Normalized weather data models and their JSON wire shape."""

from dataclasses import dataclass
from typing import Any

from skyview.errors import ClientFetchError


@dataclass(frozen=True)
class DailyWeather:
    date: str  # ISO instant for the current entry, provider dt_txt otherwise
    temperature: int  # °C, rounded
    condition: str
    description: str
    humidity: int  # percent
    wind_speed: float  # m/s
    icon: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "temperature": self.temperature,
            "condition": self.condition,
            "humidity": self.humidity,
            "description": self.description,
            "windSpeed": self.wind_speed,
            "icon": self.icon,
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "DailyWeather":
        return cls(
            date=str(data["date"]),
            temperature=int(data["temperature"]),
            condition=str(data["condition"]),
            description=str(data["description"]),
            humidity=int(data["humidity"]),
            wind_speed=float(data.get("windSpeed") or 0),
            icon=str(data["icon"]),
        )


@dataclass(frozen=True)
class LocationInfo:
    name: str
    country: str

    def to_payload(self) -> dict[str, str]:
        return {"name": self.name, "country": self.country}

    @property
    def label(self) -> str:
        return f"{self.name}, {self.country}" if self.country else self.name


@dataclass(frozen=True)
class ForecastResult:
    location: LocationInfo
    days: tuple[DailyWeather, ...]  # [0] = current conditions

    def to_payload(self) -> dict[str, Any]:
        """Body of a successful GET /api/weather response."""
        return {
            "location": self.location.to_payload(),
            "weather": [d.to_payload() for d in self.days],
        }

    @classmethod
    def from_payload(cls, data: Any) -> "ForecastResult":
        """Parse a /api/weather body. Raises ClientFetchError on a malformed body."""
        try:
            loc = data["location"]
            return cls(
                location=LocationInfo(
                    name=str(loc["name"]), country=str(loc.get("country") or "")
                ),
                days=tuple(DailyWeather.from_payload(d) for d in data["weather"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ClientFetchError(f"Malformed weather response: {e}") from e
