"""Plain-text rendering of the viewer state for the terminal."""

from datetime import datetime

from skyview.config.defaults import OWM_ICON_URL
from skyview.models.weather import DailyWeather
from skyview.viewer.state import ViewerState

LOADING_TEXT = "Loading weather data..."
EMPTY_TEXT = "No weather data available"


def icon_url(icon: str, large: bool = False) -> str:
    suffix = "@2x" if large else ""
    return f"{OWM_ICON_URL}/{icon}{suffix}.png"


def _parse_date(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def format_long_date(value: str) -> str:
    dt = _parse_date(value)
    if dt is None:
        return value
    return f"{dt:%A}, {dt:%B} {dt.day}"


def format_short_day(value: str) -> str:
    dt = _parse_date(value)
    return f"{dt:%a}" if dt is not None else value[:3]


def format_detail(day: DailyWeather) -> str:
    lines = [
        format_long_date(day.date),
        day.description[:1].upper() + day.description[1:],
        f"{day.temperature}°C  {day.condition}  ({icon_url(day.icon, large=True)})",
        f"Humidity: {day.humidity}%  Wind: {day.wind_speed:g} m/s",
    ]
    return "\n".join(lines)


def format_strip(days: tuple[DailyWeather, ...], selected: int) -> str:
    """One cell per day; the selected cell is bracketed."""
    cells = []
    for i, day in enumerate(days):
        cell = f"{i}:{format_short_day(day.date)} {day.temperature}°C"
        cells.append(f"[{cell}]" if i == selected else f" {cell} ")
    return " ".join(cells)


def render_state(state: ViewerState) -> str:
    """Render loading, empty or detail view, with an error banner on top."""
    header = state.location.label if state.location else "Loading location..."
    lines = [header, "Weather Forecast", ""]

    if state.error:
        lines.append(f"! {state.error}  (r to retry)")
        lines.append("")

    if state.loading:
        lines.append(LOADING_TEXT)
        return "\n".join(lines)

    day = state.selected_day
    if day is None:
        lines.append(EMPTY_TEXT)
        return "\n".join(lines)

    lines.append(format_detail(day))
    if not state.error:
        lines.append("")
        lines.append(format_strip(state.days, state.selected_index % len(state.days)))
        lines.append("p: previous  n: next  <number>: select  r: refresh  q: quit")
    return "\n".join(lines)
