"""
Command line entry point: load configuration, set up logging, serve the dashboard.

Usage:
    unifi-dashboard                      # reads UNIFI_API_KEY / UNIFI_API_URL from env or .env
    unifi-dashboard --port 8080
    unifi-dashboard --env-file /etc/unifi-dashboard.env --log-level DEBUG
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from aiohttp import web

from .config import LOG_LEVELS, load_config
from .const import VERSION
from .errors import ConfigError
from .server import create_app

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="unifi-dashboard",
        description="Serve the UniFi site dashboard and its upstream API proxy.",
    )
    parser.add_argument("--host", help="Interface to bind (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: PORT or 3000)")
    parser.add_argument("--env-file", help="Path to a .env file (default: ./.env)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level or logging.INFO, format=LOG_FORMAT)

    try:
        config = load_config(dotenv_path=args.env_file)
    except ConfigError as exc:
        _LOGGER.error("Configuration error: %s", exc)
        _LOGGER.error("Set it in your environment or .env file")
        return 1

    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
        if value is not None
    }
    config = dataclasses.replace(config, **overrides)
    logging.getLogger().setLevel(config.log_level)

    _LOGGER.info("Using API URL: %s", config.api_url)
    _LOGGER.info("API key configured: yes")
    _LOGGER.info("UniFi Dashboard BFF running on http://localhost:%s", config.port)

    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
