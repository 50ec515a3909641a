#!/usr/bin/env python3
"""
Market Timers - main async runner

- loads YAML config and configures the logger
- opens one MarketTimerProvider and serves it over FastAPI/uvicorn
- optionally feeds an initial lifecycle record from a YAML/JSON file
- graceful shutdown on Ctrl+C / SIGTERM or API task failure
"""

import argparse
import asyncio
from pathlib import Path
from typing import List, Optional

import uvicorn
import yaml
from fastapi import FastAPI

from market_timers.api.dependencies import set_provider
from market_timers.api.main import create_app
from market_timers.errors import ConfigError
from market_timers.lifecycle import ShutdownCoordinator, TaskCategory, TaskRegistry, create_tracked_task
from market_timers.lifecycle.handlers import APIServerShutdownHandler
from market_timers.managers import ConfigManager
from market_timers.models.config import ApiConfig
from market_timers.models.lifecycle_record import LifecycleRecord
from market_timers.services import EventBus, MarketTimerProvider
from market_timers.services.middleware import log_middleware
from market_timers.utils.logger import configure_logger, get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# API SERVER
# ---------------------------------------------------------------------------

def build_api_server(app: FastAPI, api_config: ApiConfig) -> uvicorn.Server:
    """
    Uvicorn server bound to our event loop.

    uvicorn's own signal handlers are disabled; the shutdown coordinator
    owns SIGINT/SIGTERM.
    """
    config = uvicorn.Config(
        app=app,
        host=api_config.host,
        port=api_config.port,
        loop="asyncio",
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(config)
    server.install_signal_handlers = lambda: None
    return server


async def run_api_server(server: uvicorn.Server) -> None:
    try:
        log.debug(f"🌐 Starting API server on {server.config.host}:{server.config.port}")
        await server.serve()
    except asyncio.CancelledError:
        log.debug("🌐 API server cancelled (expected during shutdown)")
        raise


# ---------------------------------------------------------------------------
# Initial record
# ---------------------------------------------------------------------------

def load_record_file(path: Path) -> LifecycleRecord:
    """
    Read a lifecycle record from YAML or JSON (JSON parses as YAML).

    Raises:
        ConfigError: unreadable file or missing fields
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as ex:
        raise ConfigError(f"Cannot read lifecycle record {path}: {ex}") from ex

    if not isinstance(data, dict):
        raise ConfigError(f"Lifecycle record {path} must be a mapping")

    try:
        return LifecycleRecord.from_dict(data)
    except (KeyError, TypeError, ValueError) as ex:
        raise ConfigError(f"Invalid lifecycle record {path}: {ex}") from ex


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="market-timers",
        description="Serve adaptive market countdowns over HTTP",
    )
    parser.add_argument("--config", default="config/config.yaml",
                        help="main config file (include-based)")
    parser.add_argument("--record", type=Path, default=None,
                        help="initial lifecycle record (YAML or JSON)")
    parser.add_argument("--host", default=None, help="override api.host")
    parser.add_argument("--port", type=int, default=None, help="override api.port")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> None:
    """Main async entry point."""
    config_manager = ConfigManager(config_path=args.config)
    app_config = config_manager.load()

    configure_logger(app_config.logging.level, use_colors=app_config.logging.use_colors)
    log.info("Starting Market Timers...")

    api_config = ApiConfig(
        host=args.host or app_config.api.host,
        port=args.port or app_config.api.port,
        cors_origins=app_config.api.cors_origins,
    )

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    provider = MarketTimerProvider(app_config.timers, event_bus=event_bus, name="market-timers")
    async with provider:
        set_provider(provider)

        if args.record is not None:
            record = load_record_file(args.record)
            await provider.update(record)
            log.info(f"Initial lifecycle record loaded from {args.record}", phase=record.phase.name)

        app = create_app(cors_origins=api_config.cors_origins)
        server = build_api_server(app, api_config)
        api_task = create_tracked_task(
            run_api_server(server),
            category=TaskCategory.API,
            description="FastAPI/uvicorn server",
        )

        coordinator = ShutdownCoordinator()
        coordinator.register(provider)
        coordinator.register(APIServerShutdownHandler(server, api_task))

        loop = asyncio.get_running_loop()
        coordinator.setup_signal_handlers(loop)

        await coordinator.wait_for_shutdown()
        set_provider(None)
        await coordinator.shutdown_all()

    log.info(TaskRegistry.instance().summary())


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        pass
    except ConfigError as ex:
        log.error("Startup failed", exception=ex)
        raise SystemExit(2) from ex


if __name__ == "__main__":
    main()
