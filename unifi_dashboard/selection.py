"""
SiteSelection: which sites the dashboard currently shows.

Selection is presentation state only. It is applied to a snapshot before stats
aggregation and rendering and never changes what the refresh cycle fetches.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from .const import AVAILABILITY_ONLINE
from .coordinator_data import SiteSnapshot, Snapshot

_LOGGER = logging.getLogger(__name__)


class SiteSelection:
    """
    Set of selected site ids.

    Every site is selected when the first non-empty snapshot arrives, replacing
    anything chosen before it. After that the selection is only changed by
    explicit user actions, so refreshes never reset it.
    """

    def __init__(self) -> None:
        self._selected: set[str] = set()
        self._initialized: bool = False

    @property
    def selected_ids(self) -> frozenset[str]:
        return frozenset(self._selected)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def is_selected(self, site_id: str) -> bool:
        return site_id in self._selected

    def sync(self, snapshot: Snapshot) -> None:
        """Select all sites on first load; later snapshots leave the selection alone."""
        if self._initialized or snapshot.is_empty:
            return
        self._selected = set(snapshot.site_ids())
        self._initialized = True
        _LOGGER.debug("Initial selection: %s sites", len(self._selected))

    def toggle(self, site_id: str) -> bool:
        """Flip one site; returns whether it is selected afterwards."""
        if site_id in self._selected:
            self._selected.discard(site_id)
            return False
        self._selected.add(site_id)
        return True

    def select_all(self, snapshot: Snapshot) -> None:
        self._selected = set(snapshot.site_ids())

    def select_none(self) -> None:
        self._selected.clear()

    def select_online(self, snapshot: Snapshot) -> None:
        self._selected = {
            site.id for site in snapshot.sites if site.availability == AVAILABILITY_ONLINE
        }

    def apply(self, snapshot: Snapshot) -> tuple[SiteSnapshot, ...]:
        """Selected sites in snapshot order."""
        return tuple(site for site in snapshot.sites if site.id in self._selected)

    def counts(self, snapshot: Snapshot) -> tuple[int, int]:
        """(selected, total) for the "N of M selected" label."""
        return len(self.apply(snapshot)), len(snapshot.sites)


def filter_order(sites: Iterable[SiteSnapshot]) -> list[SiteSnapshot]:
    """Order for the filter list: online sites first, then by name."""
    return sorted(
        sites,
        key=lambda site: (site.availability != AVAILABILITY_ONLINE, site.name.casefold()),
    )
