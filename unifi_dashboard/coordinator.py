"""
Refresh cycle engine and coordinator for the UniFi dashboard.

Responsibilities:
- run_cycle: fetch all sites, fan out per-site device/client fetches,
  derive availability, assemble an immutable Snapshot and diff the client
  count against the previous cycle.
- DashboardCoordinator: own the session state (snapshot, previous client
  count, site selection) and the fixed-interval auto-refresh task.
- Notify listeners when the connected-client count changes.
"""
from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import logging
import math
import time
from collections.abc import Callable
from datetime import datetime, timezone

from .const import MAX_CONCURRENT_FETCHES, REFRESH_INTERVAL
from .coordinator_data import ClientDelta, CycleResult, SiteSnapshot, Snapshot
from .coordinator_utils import build_site_snapshot, compute_client_delta
from .errors import SiteListFetchError
from .models import Site
from .selection import SiteSelection
from .stats import DashboardStats, aggregate_stats

__all__ = ["DashboardCoordinator", "DashboardState", "run_cycle"]

_LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Refresh cycle
# ---------------------------------------------------------------------------

async def run_cycle(
    api,
    previous_count: int | None,
    semaphore: asyncio.Semaphore | None = None,
) -> CycleResult:
    """
    Run one polling round against the upstream API.

    Raises SiteListFetchError when the site list cannot be fetched. An empty
    site list is not an error and yields an empty CycleResult without a delta.
    Per-site device/client failures degrade to empty lists for that site.
    """
    try:
        sites = await api.get_sites()
    except Exception as exc:  # noqa: BLE001
        raise SiteListFetchError(
            f"Failed to fetch sites: {str(exc) or type(exc).__name__}"
        ) from exc

    if not sites:
        _LOGGER.info("Upstream returned no sites")
        return CycleResult()

    site_snapshots = await asyncio.gather(
        *(_fetch_site(api, site, semaphore) for site in sites)
    )
    snapshot = Snapshot(sites=tuple(site_snapshots))
    delta = compute_client_delta(previous_count, snapshot.total_client_count)

    _LOGGER.debug(
        "Cycle complete: %s sites, %s clients, delta=%s",
        len(snapshot.sites), snapshot.total_client_count,
        delta.difference if delta else None,
    )
    return CycleResult(snapshot=snapshot, delta=delta)


async def _fetch_site(api, site: Site, semaphore: asyncio.Semaphore | None) -> SiteSnapshot:
    """Fetch devices and clients of one site concurrently and freeze the result."""
    devices, clients = await asyncio.gather(
        _fetch_or_empty(api.get_site_devices, site, "devices", semaphore),
        _fetch_or_empty(api.get_site_clients, site, "clients", semaphore),
    )
    return build_site_snapshot(site, devices, clients)


async def _fetch_or_empty(fetch, site: Site, kind: str, semaphore: asyncio.Semaphore | None) -> list:
    """Await fetch(site.id); any failure is logged and mapped to an empty list."""
    try:
        async with semaphore or contextlib.nullcontext():
            return await fetch(site.id)
    except Exception as exc:  # noqa: BLE001
        _LOGGER.warning("Failed to fetch %s for site %s: %s", kind, site.id, str(exc) or type(exc).__name__)
        return []


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

@dataclasses.dataclass
class DashboardState:
    """
    Mutable state carried across cycles.

    Only DashboardCoordinator writes to it.
    """

    snapshot: Snapshot = dataclasses.field(default_factory=Snapshot)
    previous_client_count: int | None = None
    selection: SiteSelection = dataclasses.field(default_factory=SiteSelection)
    last_delta: ClientDelta | None = None
    last_error: str | None = None
    last_refresh: datetime | None = None


# ---------------------------------------------------------------------------
# DashboardCoordinator
# ---------------------------------------------------------------------------

class DashboardCoordinator:
    """
    Owner of the dashboard session.

    Runs refresh cycles on a fixed interval, keeps the latest snapshot and the
    previous client count, and exposes the selection-filtered view.
    """

    def __init__(
        self,
        api,
        refresh_interval: float = REFRESH_INTERVAL,
        max_concurrent_fetches: int = MAX_CONCURRENT_FETCHES,
    ) -> None:
        self.api = api
        self.refresh_interval = refresh_interval
        self.max_concurrent_fetches = max_concurrent_fetches
        self.state = DashboardState()

        self._listeners: list[Callable[[ClientDelta], None]] = []
        self._refresh_task: asyncio.Task | None = None
        # time.monotonic() of the next scheduled refresh, None while stopped
        self._next_refresh_at: float | None = None

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def async_run_cycle(self, previous_count: int | None) -> CycleResult:
        semaphore = None
        if self.max_concurrent_fetches > 0:
            semaphore = asyncio.Semaphore(self.max_concurrent_fetches)
        return await run_cycle(self.api, previous_count, semaphore)

    async def async_refresh(self) -> CycleResult | None:
        """
        Run one cycle and fold its result into the session state.

        On a site-list failure the error is recorded, the previous snapshot is
        kept and None is returned; upstream errors never escape this method.
        """
        state = self.state
        try:
            result = await self.async_run_cycle(state.previous_client_count)
        except SiteListFetchError as exc:
            _LOGGER.error("Dashboard refresh failed: %s", exc)
            state.last_error = str(exc)
            return None

        state.snapshot = result.snapshot
        state.last_error = None
        state.last_delta = result.delta
        state.last_refresh = datetime.now(timezone.utc)
        state.selection.sync(result.snapshot)

        # An empty site list leaves the previous count in place
        if not result.snapshot.is_empty:
            state.previous_client_count = result.snapshot.total_client_count

        if result.delta is not None:
            _LOGGER.info("Client count changed: %s", result.delta.message)
            self._notify_listeners(result.delta)

        return result

    async def async_manual_refresh(self) -> CycleResult | None:
        """Refresh now and, when auto-refresh is on, restart its countdown."""
        result = await self.async_refresh()
        if self.auto_refresh_enabled:
            self.start_auto_refresh()
        return result

    # ------------------------------------------------------------------
    # Delta listeners
    # ------------------------------------------------------------------

    def async_add_listener(self, callback: Callable[[ClientDelta], None]) -> Callable[[], None]:
        """Register a client-count change callback; returns a function that removes it."""
        self._listeners.append(callback)

        def remove_listener() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove_listener

    def _notify_listeners(self, delta: ClientDelta) -> None:
        for callback in list(self._listeners):
            try:
                callback(delta)
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Client change listener %s failed", callback)

    # ------------------------------------------------------------------
    # Auto-refresh
    # ------------------------------------------------------------------

    def start_auto_refresh(self, refresh_now: bool = False) -> None:
        """Start the fixed-interval refresh task, replacing any running one."""
        self.stop_auto_refresh()
        self._next_refresh_at = time.monotonic() + self.refresh_interval
        self._refresh_task = asyncio.ensure_future(self._refresh_loop(refresh_now))
        _LOGGER.debug("Auto-refresh started (every %ss)", self.refresh_interval)

    def stop_auto_refresh(self) -> None:
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            self._refresh_task = None
            _LOGGER.debug("Auto-refresh stopped")
        self._next_refresh_at = None

    @property
    def auto_refresh_enabled(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    @property
    def seconds_until_refresh(self) -> int | None:
        """Whole seconds until the next scheduled refresh, None while stopped."""
        if self._next_refresh_at is None:
            return None
        return math.ceil(max(0.0, self._next_refresh_at - time.monotonic()))

    async def _refresh_loop(self, refresh_now: bool) -> None:
        if refresh_now:
            await self._scheduled_refresh()
            self._next_refresh_at = time.monotonic() + self.refresh_interval

        while True:
            await asyncio.sleep(max(0.0, self._next_refresh_at - time.monotonic()))
            await self._scheduled_refresh()
            # Fixed schedule; a cycle that overran the interval triggers the next one at once
            self._next_refresh_at = max(
                self._next_refresh_at + self.refresh_interval, time.monotonic()
            )

    async def _scheduled_refresh(self) -> None:
        """Run async_refresh from the timer; nothing raised here may end the loop."""
        try:
            await self.async_refresh()
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Unexpected error during scheduled refresh")

    # ------------------------------------------------------------------
    # Selection and filtered views
    # ------------------------------------------------------------------

    def update_selection(self, action: str, site_id: str | None = None) -> None:
        """Apply a selection action: all, none, online or toggle (needs site_id)."""
        selection = self.state.selection
        snapshot = self.state.snapshot
        if action == "all":
            selection.select_all(snapshot)
        elif action == "none":
            selection.select_none()
        elif action == "online":
            selection.select_online(snapshot)
        elif action == "toggle":
            if not site_id:
                raise ValueError("Selection action 'toggle' requires a site id")
            selection.toggle(site_id)
        else:
            raise ValueError(f"Unknown selection action: {action}")

    def filtered_sites(self) -> tuple[SiteSnapshot, ...]:
        return self.state.selection.apply(self.state.snapshot)

    def stats(self) -> DashboardStats:
        return aggregate_stats(self.filtered_sites())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def async_shutdown(self) -> None:
        """Stop the refresh task and close the upstream session."""
        task = self._refresh_task
        self.stop_auto_refresh()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        await self.api.close()
