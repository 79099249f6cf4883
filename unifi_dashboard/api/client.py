"""
UnifiApi: authenticated client for the upstream network-controller API.

Owns one aiohttp session for its lifetime and exposes:
- typed fetches used by the refresh cycle (sites, devices, clients)
- a raw JSON passthrough used by the BFF proxy routes
"""
from __future__ import annotations

import logging

import aiohttp

from unifi_dashboard.const import REQUEST_TIMEOUT
from unifi_dashboard.models import Client, Device, Site
from unifi_dashboard.requests import make_request

from .auth import get_standard_headers
from .clients import fetch_clients
from .devices import fetch_devices
from .sites import fetch_sites

_LOGGER = logging.getLogger(__name__)


class UnifiApi:
    """Read-only client for the sites, devices and clients endpoints."""

    def __init__(self, base_url: str, api_key: str, timeout: float = REQUEST_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = get_standard_headers(api_key)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Shared session, created lazily so it binds to the running loop."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def get_json(self, path: str):
        """Return the raw JSON body of GET {base_url}/{path}."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        return await make_request(self.session, "GET", url, self._headers)

    async def get_sites(self) -> list[Site]:
        return await fetch_sites(self.session, self.base_url, self._headers)

    async def get_site_devices(self, site_id: str) -> list[Device]:
        return await fetch_devices(self.session, self.base_url, self._headers, site_id)

    async def get_site_clients(self, site_id: str) -> list[Client]:
        return await fetch_clients(self.session, self.base_url, self._headers, site_id)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            _LOGGER.debug("Closing upstream session for %s", self.base_url)
            await self._session.close()
        self._session = None
