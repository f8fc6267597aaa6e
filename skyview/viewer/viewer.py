"""Forecast viewer: polls the weather route and owns the display state.

Runs on a single asyncio loop. Entering the async context starts the
polling task; leaving it cancels the task whatever happened inside.

Usage:
    async with ForecastViewer(WeatherApiClient(url), on_change=print_state) as viewer:
        await viewer.wait_until_loaded()
        viewer.select_next()
"""

import asyncio
import logging
from collections.abc import Callable

from skyview.errors import SkyviewError
from skyview.viewer import state as transitions
from skyview.viewer.client import FALLBACK_MESSAGE, WeatherApiClient
from skyview.viewer.render import render_state
from skyview.viewer.state import ViewerState

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 600  # 10 minutes


class ForecastViewer:
    def __init__(
        self,
        client: WeatherApiClient,
        on_change: Callable[[ViewerState], None] | None = None,
    ):
        self.client = client
        self.on_change = on_change
        self._state = ViewerState()
        self._in_flight = False
        self._loaded = asyncio.Event()
        self._poll_task: asyncio.Task | None = None

    @property
    def state(self) -> ViewerState:
        return self._state

    def render(self) -> str:
        return render_state(self._state)

    # ── Lifecycle ───────────────────────────────────────────────

    async def __aenter__(self) -> "ForecastViewer":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def start(self) -> None:
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def wait_until_loaded(self) -> None:
        """Block until the first refresh has finished, successfully or not."""
        await self._loaded.wait()

    async def _poll(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

    # ── Operations ──────────────────────────────────────────────

    async def refresh(self) -> None:
        """Fetch once and fold the outcome into state. Never raises on fetch failure."""
        if self._in_flight:
            logger.debug("Refresh already in flight, skipping")
            return
        self._in_flight = True
        try:
            result = await self.client.fetch()
        except SkyviewError as e:
            logger.warning("Error fetching weather data: %s", e)
            self._set_state(transitions.apply_failure(self._state, str(e) or FALLBACK_MESSAGE))
        except Exception:
            logger.exception("Unexpected error fetching weather data")
            self._set_state(transitions.apply_failure(self._state, FALLBACK_MESSAGE))
        else:
            self._set_state(transitions.apply_success(self._state, result))
        finally:
            self._in_flight = False
            self._loaded.set()

    async def retry(self) -> None:
        """Show the loading state and refresh now instead of waiting for the next tick."""
        self._set_state(transitions.begin_loading(self._state))
        await self.refresh()

    def select_previous(self) -> None:
        self._set_state(transitions.select_previous(self._state))

    def select_next(self) -> None:
        self._set_state(transitions.select_next(self._state))

    def select_index(self, index: int) -> None:
        self._set_state(transitions.select_index(self._state, index))

    def _set_state(self, new_state: ViewerState) -> None:
        self._state = new_state
        if self.on_change is None:
            return
        try:
            self.on_change(new_state)
        except Exception:
            logger.exception("State change callback failed")
