"""
Pure derivation helpers for the refresh cycle.

Responsibilities:
- Infer a site's availability from its device states.
- Assemble immutable SiteSnapshot values.
- Compute the client-count delta between two cycles.

No network imports; every function here is deterministic.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from .const import AVAILABILITY_OFFLINE, AVAILABILITY_ONLINE, AVAILABILITY_UNKNOWN
from .coordinator_data import ClientDelta, SiteSnapshot
from .models import Client, Device, Site


def infer_site_availability(devices: Sequence[Device]) -> str:
    """
    UNKNOWN with no devices, ONLINE if any device is online, OFFLINE otherwise.
    """
    if not devices:
        return AVAILABILITY_UNKNOWN
    if any(device.is_online for device in devices):
        return AVAILABILITY_ONLINE
    return AVAILABILITY_OFFLINE


def build_site_snapshot(
    site: Site, devices: Iterable[Device], clients: Iterable[Client]
) -> SiteSnapshot:
    """Freeze one site's fetched lists and attach its derived availability."""
    devices = tuple(devices)
    return SiteSnapshot(
        site=site,
        devices=devices,
        clients=tuple(clients),
        availability=infer_site_availability(devices),
    )


def compute_client_delta(previous_count: int | None, current_count: int) -> ClientDelta | None:
    """
    Return the delta against the previous cycle, or None when there is no
    previous count or the count did not change.
    """
    if previous_count is None or previous_count == current_count:
        return None
    return ClientDelta(difference=current_count - previous_count, total=current_count)
