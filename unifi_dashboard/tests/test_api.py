"""
Unit tests for the api package: UnifiApi and the per-endpoint fetchers.

make_request is patched where each module imports it, so no network is used.
"""

from __future__ import annotations

import unittest
from unittest.mock import AsyncMock, patch

from unifi_dashboard.api import UnifiApi
from unifi_dashboard.api.auth import get_standard_headers
from unifi_dashboard.errors import ApiResponseError
from unifi_dashboard.models import Client, Device, Site

BASE_URL = "https://controller.example.com/v1"


class TestHeaders(unittest.TestCase):

    def test_standard_headers(self):
        self.assertEqual(
            get_standard_headers("secret"),
            {"accept": "application/json", "X-API-KEY": "secret"},
        )


class TestUnifiApi(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.api = UnifiApi(BASE_URL + "/", "secret", timeout=5)

    async def asyncTearDown(self):
        await self.api.close()

    def test_base_url_trailing_slash_is_stripped(self):
        self.assertEqual(self.api.base_url, BASE_URL)

    async def test_get_sites(self):
        body = {"data": [{"id": "s1", "name": "HQ", "internalReference": "default"}, {"name": "no id"}]}
        with patch("unifi_dashboard.api.sites.make_request", AsyncMock(return_value=body)) as request:
            sites = await self.api.get_sites()

        self.assertEqual(sites, [Site(id="s1", name="HQ", internal_reference="default")])
        args = request.call_args.args
        self.assertEqual(args[1:4], ("GET", f"{BASE_URL}/sites", {"accept": "application/json", "X-API-KEY": "secret"}))

    async def test_get_site_devices_quotes_site_id(self):
        body = {"data": [{"id": "d1", "name": "AP", "model": "U6", "state": "ONLINE"}]}
        with patch("unifi_dashboard.api.devices.make_request", AsyncMock(return_value=body)) as request:
            devices = await self.api.get_site_devices("a/b")

        self.assertEqual(devices, [Device(id="d1", name="AP", model="U6", state="ONLINE")])
        self.assertEqual(request.call_args.args[2], f"{BASE_URL}/sites/a%2Fb/devices")

    async def test_get_site_clients(self):
        body = {"data": [{"id": "c1", "name": "Phone", "ipAddress": "10.0.0.2", "type": "WIRELESS"}]}
        with patch("unifi_dashboard.api.clients.make_request", AsyncMock(return_value=body)) as request:
            clients = await self.api.get_site_clients("site-1")

        self.assertEqual(clients, [Client(id="c1", name="Phone", ip_address="10.0.0.2", type="WIRELESS")])
        self.assertEqual(request.call_args.args[2], f"{BASE_URL}/sites/site-1/clients")

    async def test_get_site_clients_without_data(self):
        with patch("unifi_dashboard.api.clients.make_request", AsyncMock(return_value={})):
            self.assertEqual(await self.api.get_site_clients("site-1"), [])

    async def test_errors_propagate(self):
        error = ApiResponseError(403, "Forbidden")
        with patch("unifi_dashboard.api.sites.make_request", AsyncMock(side_effect=error)):
            with self.assertRaises(ApiResponseError):
                await self.api.get_sites()

    async def test_get_json_returns_raw_body(self):
        body = {"data": [{"id": "s1"}], "totalCount": 1}
        with patch("unifi_dashboard.api.client.make_request", AsyncMock(return_value=body)) as request:
            result = await self.api.get_json("/sites")

        self.assertEqual(result, body)
        self.assertEqual(request.call_args.args[2], f"{BASE_URL}/sites")

    async def test_session_is_reused_and_recreated_after_close(self):
        first = self.api.session
        self.assertIs(self.api.session, first)

        await self.api.close()

        self.assertTrue(first.closed)
        self.assertIsNot(self.api.session, first)

    async def test_close_without_session(self):
        api = UnifiApi(BASE_URL, "secret")
        await api.close()
        await api.close()
