"""
Tests for the immutable snapshot types.
"""

from __future__ import annotations

import dataclasses
import unittest

from unifi_dashboard.coordinator_data import ClientDelta, CycleResult, Snapshot

from .test_common import make_clients, make_device, make_site_snapshot, make_snapshot


class TestSnapshot(unittest.TestCase):

    def test_default_snapshot_is_empty(self):
        snapshot = Snapshot()
        self.assertEqual(snapshot.sites, ())
        self.assertTrue(snapshot.is_empty)
        self.assertEqual(snapshot.total_client_count, 0)

    def test_total_client_count_sums_all_sites(self):
        snapshot = make_snapshot(
            make_site_snapshot("a", clients=make_clients(3, "a")),
            make_site_snapshot("b"),
            make_site_snapshot("c", clients=make_clients(4, "c")),
        )
        self.assertEqual(snapshot.total_client_count, 7)
        self.assertEqual(
            snapshot.total_client_count,
            sum(len(site.clients) for site in snapshot.sites),
        )

    def test_site_ids_keep_order(self):
        snapshot = make_snapshot(make_site_snapshot("b"), make_site_snapshot("a"))
        self.assertEqual(snapshot.site_ids(), ["b", "a"])

    def test_snapshot_is_frozen(self):
        snapshot = make_snapshot(make_site_snapshot("a"))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snapshot.sites = ()

    def test_replace_leaves_original_untouched(self):
        original = make_snapshot(make_site_snapshot("a"))
        updated = dataclasses.replace(original, sites=())
        self.assertIsNot(original, updated)
        self.assertEqual(len(original.sites), 1)

    def test_default_cycle_result_is_empty(self):
        result = CycleResult()
        self.assertTrue(result.snapshot.is_empty)
        self.assertIsNone(result.delta)


class TestSiteSnapshot(unittest.TestCase):

    def test_to_json_uses_upstream_keys(self):
        site = make_site_snapshot(
            "a",
            devices=[make_device("d1")],
            clients=make_clients(1),
            internal_reference="HQ-1",
        )
        data = site.to_json()
        self.assertEqual(data["id"], "a")
        self.assertEqual(data["internalReference"], "HQ-1")
        self.assertEqual(data["availability"], "ONLINE")
        self.assertEqual(data["devices"][0]["state"], "ONLINE")
        self.assertEqual(data["clients"][0]["ipAddress"], "10.0.0.10")


class TestClientDelta(unittest.TestCase):

    def test_increase(self):
        delta = ClientDelta(difference=3, total=13)
        self.assertEqual(delta.sign, "+")
        self.assertEqual(delta.magnitude, 3)
        self.assertEqual(delta.message, "+3 clients connected (Total: 13)")

    def test_single_decrease_is_singular(self):
        delta = ClientDelta(difference=-1, total=9)
        self.assertEqual(delta.sign, "-")
        self.assertEqual(delta.magnitude, 1)
        self.assertEqual(delta.message, "-1 client disconnected (Total: 9)")

    def test_to_json(self):
        self.assertEqual(
            ClientDelta(difference=-4, total=6).to_json(),
            {"sign": "-", "magnitude": 4, "total": 6, "message": "-4 clients disconnected (Total: 6)"},
        )
