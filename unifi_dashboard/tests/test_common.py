"""
Shared helpers and factory functions for the dashboard tests.
Import from this module in each test file to avoid duplication.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from unifi_dashboard.config import Config
from unifi_dashboard.coordinator import DashboardCoordinator
from unifi_dashboard.coordinator_data import SiteSnapshot, Snapshot
from unifi_dashboard.coordinator_utils import build_site_snapshot
from unifi_dashboard.models import Client, Device, Site


def make_site(site_id: str = "site-1", **kwargs) -> Site:
    defaults = dict(id=site_id, name=f"Site {site_id}", internal_reference=None)
    defaults.update(kwargs)
    return Site(**defaults)


def make_device(device_id: str = "dev-1", state: str = "ONLINE", **kwargs) -> Device:
    defaults = dict(id=device_id, name=f"Device {device_id}", model="U6-Pro", state=state)
    defaults.update(kwargs)
    return Device(**defaults)


def make_client(client_id: str = "client-1", **kwargs) -> Client:
    defaults = dict(id=client_id, name=f"Client {client_id}", ip_address="10.0.0.10", type="WIRELESS")
    defaults.update(kwargs)
    return Client(**defaults)


def make_clients(count: int, prefix: str = "client") -> list[Client]:
    return [make_client(f"{prefix}-{i}") for i in range(count)]


def make_site_snapshot(site_id: str = "site-1", devices=(), clients=(), **site_kwargs) -> SiteSnapshot:
    return build_site_snapshot(make_site(site_id, **site_kwargs), devices, clients)


def make_snapshot(*sites: SiteSnapshot) -> Snapshot:
    return Snapshot(sites=tuple(sites))


def make_api(sites=(), devices: dict | None = None, clients: dict | None = None) -> MagicMock:
    """
    Build a mocked UnifiApi.

    devices/clients map site_id to a list, or to an exception instance that
    the corresponding fetch should raise.
    """
    devices = devices or {}
    clients = clients or {}

    def _lookup(table: dict):
        def lookup(site_id):
            value = table.get(site_id, [])
            if isinstance(value, BaseException):
                raise value
            return list(value)
        return lookup

    api = MagicMock()
    api.get_sites = AsyncMock(return_value=list(sites))
    api.get_site_devices = AsyncMock(side_effect=_lookup(devices))
    api.get_site_clients = AsyncMock(side_effect=_lookup(clients))
    api.get_json = AsyncMock(return_value={"data": []})
    api.close = AsyncMock()
    return api


def make_coordinator(api=None, **kwargs) -> DashboardCoordinator:
    if api is None:
        api = make_api()
    return DashboardCoordinator(api, **kwargs)


def make_config(**kwargs) -> Config:
    defaults = dict(
        api_key="test-key",
        api_url="https://controller.example.com/v1",
        refresh_interval=15,
    )
    defaults.update(kwargs)
    return Config(**defaults)
