"""FastAPI backend exposing the normalized forecast at GET /api/weather."""

import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skyview.config.loader import load_config
from skyview.config.schema import SkyviewConfig
from skyview.errors import SkyviewError
from skyview.models.common import utc_now_iso
from skyview.pipeline.forecast_aggregator import ForecastAggregator, build_aggregator

logger = logging.getLogger(__name__)

CONFIG_ENV = "SKYVIEW_CONFIG"
GENERIC_ERROR = "Failed to fetch weather data"


def _error_response(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=500)


def get_aggregator(request: Request) -> ForecastAggregator:
    """Build a stateless aggregator per request so a newly set key is picked up."""
    return build_aggregator(request.app.state.config)


def create_app(config: SkyviewConfig | None = None) -> FastAPI:
    if config is None:
        config = load_config(os.environ.get(CONFIG_ENV))

    app = FastAPI(title="Skyview Weather", version="0.1.0")
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(SkyviewError)
    async def _skyview_error(request: Request, exc: SkyviewError) -> JSONResponse:
        logger.error("Error in weather API route: %s", exc)
        return _error_response(str(exc) or GENERIC_ERROR)

    @app.get("/api/weather")
    async def get_weather(aggregator: ForecastAggregator = Depends(get_aggregator)):
        """Current conditions plus sampled forecast days for the configured location."""
        try:
            result = await aggregator.get_forecast()
        except SkyviewError:
            raise
        except Exception:
            logger.exception("Unexpected error in weather API route")
            return _error_response(GENERIC_ERROR)
        return result.to_payload()

    @app.get("/api/health")
    def get_health():
        return {"status": "ok", "timestamp": utc_now_iso()}

    return app


app = create_app()
