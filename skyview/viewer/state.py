"""Viewer state snapshot and the pure transitions that produce new snapshots."""

from dataclasses import dataclass, replace

from skyview.models.weather import DailyWeather, ForecastResult, LocationInfo


@dataclass(frozen=True)
class ViewerState:
    days: tuple[DailyWeather, ...] = ()
    location: LocationInfo | None = None
    selected_index: int = 0
    loading: bool = True
    error: str | None = None

    @property
    def selected_day(self) -> DailyWeather | None:
        if not self.days:
            return None
        return self.days[self.selected_index % len(self.days)]


def next_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return index + 1 if index < count - 1 else 0


def previous_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return index - 1 if index > 0 else count - 1


def apply_success(state: ViewerState, result: ForecastResult) -> ViewerState:
    """Replace location and days wholesale; keep the cursor inside the new bounds."""
    count = len(result.days)
    return replace(
        state,
        days=result.days,
        location=result.location,
        selected_index=state.selected_index % count if count else 0,
        loading=False,
        error=None,
    )


def apply_failure(state: ViewerState, message: str) -> ViewerState:
    """Record the error but leave the last good data on screen."""
    return replace(state, loading=False, error=message)


def select_next(state: ViewerState) -> ViewerState:
    return replace(state, selected_index=next_index(state.selected_index, len(state.days)))


def select_previous(state: ViewerState) -> ViewerState:
    return replace(
        state, selected_index=previous_index(state.selected_index, len(state.days))
    )


def select_index(state: ViewerState, index: int) -> ViewerState:
    count = len(state.days)
    return replace(state, selected_index=index % count if count else 0)


def begin_loading(state: ViewerState) -> ViewerState:
    return replace(state, loading=True)
