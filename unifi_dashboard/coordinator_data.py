"""
Immutable snapshot types produced by one refresh cycle.

This is a pure data module with no network or web dependencies.
"""
from __future__ import annotations

import dataclasses

from .const import AVAILABILITY_UNKNOWN
from .models import Client, Device, Site


@dataclasses.dataclass(frozen=True)
class SiteSnapshot:
    """One site with the devices and clients fetched for it in a single cycle."""

    site: Site
    devices: tuple[Device, ...] = ()
    clients: tuple[Client, ...] = ()
    availability: str = AVAILABILITY_UNKNOWN

    @property
    def id(self) -> str:
        return self.site.id

    @property
    def name(self) -> str:
        return self.site.name

    def to_json(self) -> dict:
        return {
            **self.site.to_json(),
            "availability": self.availability,
            "devices": [d.to_json() for d in self.devices],
            "clients": [c.to_json() for c in self.clients],
        }


@dataclasses.dataclass(frozen=True)
class Snapshot:
    """
    Ordered, immutable view of all sites from one cycle.

    Always build a new Snapshot; never mutate in place.
    """

    sites: tuple[SiteSnapshot, ...] = ()

    @property
    def total_client_count(self) -> int:
        return sum(len(site.clients) for site in self.sites)

    @property
    def is_empty(self) -> bool:
        return not self.sites

    def site_ids(self) -> list[str]:
        return [site.id for site in self.sites]


@dataclasses.dataclass(frozen=True)
class ClientDelta:
    """Net change of the connected-client count between two cycles."""

    difference: int
    total: int

    @property
    def sign(self) -> str:
        return "+" if self.difference > 0 else "-"

    @property
    def magnitude(self) -> int:
        return abs(self.difference)

    @property
    def message(self) -> str:
        """Notification text, e.g. '+3 clients connected (Total: 13)'."""
        noun = "client" if self.magnitude == 1 else "clients"
        verb = "connected" if self.difference > 0 else "disconnected"
        return f"{self.sign}{self.magnitude} {noun} {verb} (Total: {self.total})"

    def to_json(self) -> dict:
        return {
            "sign": self.sign,
            "magnitude": self.magnitude,
            "total": self.total,
            "message": self.message,
        }


@dataclasses.dataclass(frozen=True)
class CycleResult:
    """Outcome of one refresh cycle: the new snapshot and an optional delta."""

    snapshot: Snapshot = dataclasses.field(default_factory=Snapshot)
    delta: ClientDelta | None = None
