"""CLI entry point for the skyview weather display."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from skyview.config.loader import get_config_value, load_config
from skyview.config.schema import SkyviewConfig
from skyview.errors import SkyviewError
from skyview.models.weather import ForecastResult
from skyview.pipeline.forecast_aggregator import build_aggregator
from skyview.viewer.client import WeatherApiClient
from skyview.viewer.render import render_state
from skyview.viewer.state import ViewerState
from skyview.viewer.viewer import ForecastViewer

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyview",
        description="Single-location weather forecast display",
    )
    parser.add_argument(
        "--config", default=None, help=f"Config YAML path (default: {DEFAULT_CONFIG})"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the /api/weather HTTP server")
    serve_p.add_argument("--host", default=None)
    serve_p.add_argument("--port", type=int, default=None)

    # fetch
    fetch_p = sub.add_parser("fetch", help="Fetch and print the forecast once")
    fetch_p.add_argument("--json", action="store_true", help="Print the JSON payload")

    # view
    view_p = sub.add_parser("view", help="Poll the server and show the forecast")
    view_p.add_argument("--url", default=None, help="Override viewer.api_url")
    view_p.add_argument(
        "--once", action="store_true", help="Render one refresh and exit"
    )

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Print one config value")
    get_p.add_argument("key", help="Dotted key, e.g. forecast.sampling")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(_config_path(args.config))
    except (OSError, SkyviewError) as e:
        print(f"Error: {e}")
        return 1

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "view":
        return _cmd_view(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _config_path(explicit: str | None) -> str | None:
    """An explicit --config must exist; the default file is used only when present."""
    if explicit is not None:
        return explicit
    if Path(DEFAULT_CONFIG).is_file():
        return DEFAULT_CONFIG
    logger.debug("%s not found, using built-in defaults", DEFAULT_CONFIG)
    return None


def _cmd_serve(config: SkyviewConfig, args) -> int:
    import uvicorn

    from skyview.api import create_app

    host = args.host or config.server.host
    port = args.port or config.server.port
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def _cmd_fetch(config: SkyviewConfig, args) -> int:
    try:
        aggregator = build_aggregator(config)
        result = asyncio.run(aggregator.get_forecast())
    except SkyviewError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_payload(), indent=2))
    else:
        print(format_result_text(result))
    return 0


def format_result_text(result: ForecastResult) -> str:
    lines = [f"=== {result.location.label} ==="]
    for i, day in enumerate(result.days):
        label = "Now" if i == 0 else day.date
        lines.append(
            f"{label:<20} {day.temperature:>4}°C  {day.humidity:>3}%  "
            f"{day.wind_speed:>5.1f} m/s  {day.description}"
        )
    return "\n".join(lines)


def _cmd_view(config: SkyviewConfig, args) -> int:
    client = WeatherApiClient(
        args.url or config.viewer.api_url, timeout=config.viewer.timeout_seconds
    )
    if args.once:
        return asyncio.run(_view_once(client))
    try:
        asyncio.run(_view_interactive(client))
    except KeyboardInterrupt:
        logger.info("Viewer interrupted by keyboard")
    return 0


async def _view_once(client: WeatherApiClient) -> int:
    viewer = ForecastViewer(client)
    await viewer.refresh()
    print(viewer.render())
    return 1 if viewer.state.error else 0


def _print_state(state: ViewerState) -> None:
    print(render_state(state))
    print()


async def _view_interactive(client: WeatherApiClient) -> None:
    async with ForecastViewer(client, on_change=_print_state) as viewer:
        await viewer.wait_until_loaded()
        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                break
            if not await handle_command(viewer, line):
                break


async def handle_command(viewer: ForecastViewer, line: str) -> bool:
    """Apply one typed command. Returns False when the viewer should quit."""
    cmd = line.strip().lower()
    if cmd in ("q", "quit"):
        return False
    if cmd in ("n", "next"):
        viewer.select_next()
    elif cmd in ("p", "prev", "previous"):
        viewer.select_previous()
    elif cmd in ("r", "retry"):
        await viewer.retry()
    elif cmd.isdigit():
        viewer.select_index(int(cmd))
    elif cmd:
        print(f"Unknown command: {cmd!r}")
    return True


def _cmd_config(config: SkyviewConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        if hasattr(value, "model_dump_json"):
            print(value.model_dump_json(indent=2))
        else:
            print(value)
        return 0
    else:
        print("Use: config show | config get key")
        return 1
