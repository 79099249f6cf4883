"""
Real API integration tests for UnifiApi and the refresh cycle.
Requires UNIFI_API_KEY and UNIFI_API_URL environment variables to run.
Skip with:  pytest -k "not Integration"
"""

from __future__ import annotations

import os
import unittest

from dotenv import load_dotenv

from unifi_dashboard.api import UnifiApi
from unifi_dashboard.const import AVAILABILITY_OFFLINE, AVAILABILITY_ONLINE, AVAILABILITY_UNKNOWN
from unifi_dashboard.coordinator import DashboardCoordinator


class TestUnifiApiIntegration(unittest.IsolatedAsyncioTestCase):
    """
    Integration tests that hit a real network controller.
    Skipped automatically when UNIFI_API_KEY / UNIFI_API_URL are not set.
    """

    async def asyncSetUp(self):
        load_dotenv()
        api_key = os.getenv("UNIFI_API_KEY")
        api_url = os.getenv("UNIFI_API_URL")
        if not api_key or not api_url:
            self.skipTest("UNIFI_API_KEY / UNIFI_API_URL not set, skipping integration tests")

        self.api = UnifiApi(api_url, api_key)

    async def asyncTearDown(self):
        await self.api.close()

    async def test_fetch_sites(self):
        sites = await self.api.get_sites()

        self.assertGreater(len(sites), 0)
        for site in sites:
            self.assertTrue(site.id)

    async def test_fetch_devices_and_clients(self):
        sites = await self.api.get_sites()
        site_id = sites[0].id

        devices = await self.api.get_site_devices(site_id)
        clients = await self.api.get_site_clients(site_id)

        for device in devices:
            self.assertIsNotNone(device.id)
            self.assertTrue(device.state)
        for client in clients:
            self.assertIsNotNone(client.id)

    async def test_full_refresh(self):
        coord = DashboardCoordinator(self.api)

        result = await coord.async_refresh()

        self.assertIsNotNone(result, coord.state.last_error)
        for site in result.snapshot.sites:
            self.assertIn(site.availability, (AVAILABILITY_ONLINE, AVAILABILITY_OFFLINE, AVAILABILITY_UNKNOWN))
        self.assertEqual(coord.state.previous_client_count, result.snapshot.total_client_count)
