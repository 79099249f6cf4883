"""
Domain models for the UniFi dashboard.

This module contains pure data classes representing upstream entities.
These classes have no dependencies on HTTP, API logic, or the web server.
"""
from __future__ import annotations

import dataclasses
import logging

from .const import DEVICE_STATE_ONLINE

_LOGGER = logging.getLogger(__name__)


def _text(value) -> str:
    return "" if value is None else str(value)


def _optional_text(value) -> str | None:
    """str(value), or None for a missing or empty value."""
    if value is None or value == "":
        return None
    return str(value)


@dataclasses.dataclass(frozen=True)
class Site:
    """Representation of a single managed site."""

    id: str
    name: str
    internal_reference: str | None = None

    @classmethod
    def from_json(cls, raw: dict) -> Site:
        """Map a raw upstream site dict onto a Site."""
        return cls(
            id=str(raw["id"]),
            name=_text(raw.get("name")),
            internal_reference=_optional_text(raw.get("internalReference")),
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "internalReference": self.internal_reference,
        }


@dataclasses.dataclass(frozen=True)
class Device:
    """Representation of a single network device (gateway, switch, AP)."""

    id: str
    name: str
    model: str = ""
    state: str = ""

    @property
    def is_online(self) -> bool:
        return self.state == DEVICE_STATE_ONLINE

    @classmethod
    def from_json(cls, raw: dict) -> Device:
        """Map a raw upstream device dict onto a Device."""
        return cls(
            id=str(raw["id"]),
            name=_text(raw.get("name")),
            model=_text(raw.get("model")),
            state=_text(raw.get("state")),
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "state": self.state,
        }


@dataclasses.dataclass(frozen=True)
class Client:
    """Representation of a single connected client."""

    id: str
    name: str
    ip_address: str | None = None
    type: str | None = None

    @property
    def connection_kind(self) -> str | None:
        """'wireless' or 'wired' for display, None when the type is unknown."""
        if not self.type:
            return None
        return "wireless" if self.type.lower() == "wireless" else "wired"

    @classmethod
    def from_json(cls, raw: dict) -> Client:
        """Map a raw upstream client dict onto a Client."""
        return cls(
            id=str(raw["id"]),
            name=_text(raw.get("name")),
            ip_address=_optional_text(raw.get("ipAddress")),
            type=_optional_text(raw.get("type")),
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "ipAddress": self.ip_address,
            "type": self.type,
        }


def parse_items(model: type, items: list, kind: str) -> list:
    """
    Parse a list of raw upstream dicts with model.from_json.

    Entries that are not dicts or lack an id are skipped with a warning so one
    malformed record does not hide the rest of the list.
    """
    parsed = []
    for raw in items:
        if not isinstance(raw, dict) or raw.get("id") is None:
            _LOGGER.warning("Skipping malformed %s entry: %s", kind, raw)
            continue
        parsed.append(model.from_json(raw))
    return parsed
