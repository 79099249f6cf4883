"""Configuration for the UniFi dashboard BFF, read from the environment and .env."""
from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping

import voluptuous as vol
from dotenv import load_dotenv

from .const import MAX_CONCURRENT_FETCHES, REFRESH_INTERVAL, REQUEST_TIMEOUT
from .errors import ConfigError

_LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

non_empty_string = vol.All(str, vol.Strip, vol.Length(min=1))
port_number = vol.All(vol.Coerce(int), vol.Range(min=1, max=65535))

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required("UNIFI_API_KEY"): non_empty_string,
        vol.Required("UNIFI_API_URL"): vol.All(non_empty_string, vol.Url()),
        vol.Optional("HOST", default="0.0.0.0"): non_empty_string,
        vol.Optional("PORT", default=3000): port_number,
        vol.Optional("REFRESH_INTERVAL", default=REFRESH_INTERVAL): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional("REQUEST_TIMEOUT", default=REQUEST_TIMEOUT): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional("MAX_CONCURRENT_FETCHES", default=MAX_CONCURRENT_FETCHES): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional("LOG_LEVEL", default="INFO"): vol.All(str, vol.Upper, vol.In(LOG_LEVELS)),
    },
    extra=vol.REMOVE_EXTRA,
)
CONFIG_KEYS = [marker.schema for marker in CONFIG_SCHEMA.schema]


@dataclasses.dataclass(frozen=True)
class Config:
    api_key: str = dataclasses.field(repr=False)
    api_url: str
    host: str = "0.0.0.0"
    port: int = 3000
    refresh_interval: int = REFRESH_INTERVAL
    request_timeout: int = REQUEST_TIMEOUT
    max_concurrent_fetches: int = MAX_CONCURRENT_FETCHES
    log_level: str = "INFO"


def load_config(env: Mapping[str, str] | None = None, dotenv_path: str | None = None) -> Config:
    """
    Build a validated Config.

    When env is None the process environment is used, after loading a .env
    file (dotenv_path, or .env searched from the working directory). Values
    already present in the environment win over the file.

    Raises ConfigError describing the first invalid or missing key.
    """
    if env is None:
        load_dotenv(dotenv_path)
        env = os.environ

    raw = {key: env[key] for key in CONFIG_KEYS if key in env}
    # Unset and empty optional values fall back to their defaults
    raw = {key: value for key, value in raw.items() if value != "" or key.startswith("UNIFI_")}

    try:
        data = CONFIG_SCHEMA(raw)
    except vol.Invalid as exc:
        raise ConfigError(_describe(exc)) from exc

    config = Config(
        api_key=data["UNIFI_API_KEY"],
        api_url=data["UNIFI_API_URL"].rstrip("/"),
        host=data["HOST"],
        port=data["PORT"],
        refresh_interval=data["REFRESH_INTERVAL"],
        request_timeout=data["REQUEST_TIMEOUT"],
        max_concurrent_fetches=data["MAX_CONCURRENT_FETCHES"],
        log_level=data["LOG_LEVEL"],
    )
    _LOGGER.debug("Loaded configuration: %s", config)
    return config


def _describe(exc: vol.Invalid) -> str:
    if isinstance(exc, vol.MultipleInvalid):
        exc = exc.errors[0]
    key = exc.path[0] if exc.path else "configuration"
    if exc.error_message == "required key not provided":
        return f"{key} environment variable is required"
    return f"Invalid {key}: {exc.error_message}"
