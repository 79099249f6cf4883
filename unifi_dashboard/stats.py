"""Aggregate health statistics over a (possibly filtered) set of sites."""
from __future__ import annotations

import dataclasses
import math
from collections.abc import Iterable

from .const import AVAILABILITY_OFFLINE, AVAILABILITY_ONLINE, AVAILABILITY_UNKNOWN
from .coordinator_data import SiteSnapshot


@dataclasses.dataclass(frozen=True)
class DashboardStats:
    total_sites: int = 0
    online_sites: int = 0
    offline_sites: int = 0
    unknown_sites: int = 0
    total_devices: int = 0
    online_devices: int = 0
    offline_devices: int = 0
    total_clients: int = 0
    health_percent: int = 0

    def to_json(self) -> dict:
        return {
            "sites": {
                "total": self.total_sites,
                "online": self.online_sites,
                "offline": self.offline_sites,
                "unknown": self.unknown_sites,
            },
            "devices": {
                "total": self.total_devices,
                "online": self.online_devices,
                "offline": self.offline_devices,
            },
            "clients": self.total_clients,
            "healthPercent": self.health_percent,
        }


def health_percentage(online_devices: int, total_devices: int) -> int:
    """
    Share of online devices as a whole percentage, 0 when there are no devices.

    Halves round up (12.5 -> 13), matching what the browser dashboard showed.
    """
    if total_devices == 0:
        return 0
    return math.floor(online_devices / total_devices * 100 + 0.5)


def aggregate_stats(sites: Iterable[SiteSnapshot]) -> DashboardStats:
    """
    Fold site snapshots into dashboard counters.

    Used both for the overall cards (all selected sites) and for a single
    site's card, so callers filter first and aggregate second.
    """
    by_availability = {AVAILABILITY_ONLINE: 0, AVAILABILITY_OFFLINE: 0, AVAILABILITY_UNKNOWN: 0}
    total_sites = total_devices = online_devices = total_clients = 0

    for site in sites:
        total_sites += 1
        by_availability[site.availability] = by_availability.get(site.availability, 0) + 1
        total_devices += len(site.devices)
        online_devices += sum(1 for device in site.devices if device.is_online)
        total_clients += len(site.clients)

    return DashboardStats(
        total_sites=total_sites,
        online_sites=by_availability[AVAILABILITY_ONLINE],
        offline_sites=by_availability[AVAILABILITY_OFFLINE],
        unknown_sites=by_availability[AVAILABILITY_UNKNOWN],
        total_devices=total_devices,
        online_devices=online_devices,
        offline_devices=total_devices - online_devices,
        total_clients=total_clients,
        health_percent=health_percentage(online_devices, total_devices),
    )
