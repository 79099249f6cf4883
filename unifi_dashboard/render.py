"""
HTML rendering for the dashboard page.

Everything here is a pure function of the snapshot, the selection and a few
display values; no network or coordinator access.
"""
from __future__ import annotations

from collections.abc import Sequence
from html import escape

from .const import LIST_PREVIEW_SIZE, VERSION
from .coordinator_data import ClientDelta, SiteSnapshot, Snapshot
from .models import Client, Device
from .selection import SiteSelection, filter_order
from .stats import DashboardStats, aggregate_stats

STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, sans-serif; background: #f5f5f7; margin: 0; padding: 24px; color: #1d1d1f; }
header { display: flex; justify-content: space-between; align-items: center; }
.banner { padding: 12px 16px; border-radius: 8px; margin: 12px 0; }
.banner-error { background: #ffe5e3; color: #b3261e; }
.banner-increase { background: #e3f9e5; color: #1b7f2a; }
.banner-decrease { background: #fff4e0; color: #9a5b00; }
.stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 16px; margin: 16px 0; }
.stat-card, .site-card, .filter { background: #fff; border-radius: 12px; padding: 16px; box-shadow: 0 1px 3px rgba(0,0,0,.1); }
.stat-card-value { font-size: 2em; font-weight: 600; }
.online { color: #34c759; } .offline { color: #ff3b30; }
.badge { font-size: .75em; padding: 2px 8px; border-radius: 10px; background: #e5e5ea; }
.badge-online { background: #34c759; color: #fff; } .badge-offline { background: #ff3b30; color: #fff; }
.badge-wireless { background: #007aff; color: #fff; } .badge-wired { background: #8e8e93; color: #fff; }
.site-card { margin-bottom: 16px; }
.site-stats { display: flex; gap: 24px; margin: 12px 0; }
.detail-item { display: flex; justify-content: space-between; padding: 4px 0; border-bottom: 1px solid #f0f0f0; }
.filter form { display: inline; }
.empty-state { color: #86868b; padding: 16px; text-align: center; }
"""


def render_dashboard(
    snapshot: Snapshot,
    selection: SiteSelection,
    *,
    refresh_interval: int,
    seconds_until_refresh: int | None = None,
    last_error: str | None = None,
    last_delta: ClientDelta | None = None,
) -> str:
    """Render the full dashboard page for the current session state."""
    sites = selection.apply(snapshot)
    countdown = (
        f"Next refresh in {seconds_until_refresh}s" if seconds_until_refresh is not None
        else "Auto-refresh off"
    )
    refresh_meta = (
        f'<meta http-equiv="refresh" content="{int(refresh_interval)}">'
        if seconds_until_refresh is not None else ""
    )

    parts = [
        "<!DOCTYPE html>",
        '<html lang="en"><head><meta charset="utf-8">',
        refresh_meta,
        "<title>UniFi Dashboard</title>",
        f"<style>{STYLE}</style></head><body>",
        f"<header><h1>UniFi Dashboard</h1><span class=\"countdown\">{escape(countdown)}</span></header>",
    ]
    if last_error:
        parts.append(f'<div class="banner banner-error">Error: {escape(last_error)}</div>')
    if last_delta is not None:
        kind = "increase" if last_delta.difference > 0 else "decrease"
        parts.append(f'<div class="banner banner-{kind}">{escape(last_delta.message)}</div>')

    if snapshot.is_empty:
        parts.append('<div class="empty-state">No sites found</div>')
    else:
        parts.append(render_site_filter(snapshot, selection))
        parts.append(render_stats(aggregate_stats(sites)))
        parts.append(render_sites(sites))

    parts.append(f"<footer><small>v{VERSION}</small></footer></body></html>")
    return "\n".join(part for part in parts if part)


def render_site_filter(snapshot: Snapshot, selection: SiteSelection) -> str:
    selected, total = selection.counts(snapshot)
    rows = []
    for site in filter_order(snapshot.sites):
        mark = "&#9745;" if selection.is_selected(site.id) else "&#9744;"
        rows.append(
            '<form method="post" action="/selection">'
            '<input type="hidden" name="action" value="toggle">'
            f'<input type="hidden" name="site_id" value="{escape(site.id)}">'
            f'<button type="submit">{mark} {escape(site.name)}</button> '
            f"{_availability_badge(site.availability)}</form>"
        )
    buttons = "".join(
        '<form method="post" action="/selection">'
        f'<input type="hidden" name="action" value="{action}">'
        f'<button type="submit">{label}</button></form>'
        for action, label in (("all", "All"), ("none", "None"), ("online", "Online Only"))
    )
    return (
        '<section class="filter">'
        f'<div><strong>Select Sites</strong> <span>{selected} of {total} selected</span> {buttons}</div>'
        f'<div class="filter-list">{"".join(rows)}</div>'
        "</section>"
    )


def render_stats(stats: DashboardStats) -> str:
    return (
        '<section class="stats">'
        + _stat_card("Sites", stats.total_sites, stats.online_sites, stats.offline_sites)
        + _stat_card("Total Devices", stats.total_devices, stats.online_devices, stats.offline_devices)
        + '<div class="stat-card clients"><div>Connected Clients</div>'
        f'<div class="stat-card-value">{stats.total_clients}</div><div>Active connections</div></div>'
        '<div class="stat-card health"><div>Network Health</div>'
        f'<div class="stat-card-value">{stats.health_percent}%</div><div>Devices online</div></div>'
        "</section>"
    )


def _stat_card(title: str, total: int, online: int, offline: int) -> str:
    return (
        f'<div class="stat-card"><div>{title}</div>'
        f'<div class="stat-card-value">{total}</div>'
        f'<div><span class="online">{online}</span> Online &middot; '
        f'<span class="offline">{offline}</span> Offline</div></div>'
    )


def render_sites(sites: Sequence[SiteSnapshot]) -> str:
    if not sites:
        return '<div class="empty-state">No sites selected. Use the filter above to select sites to view.</div>'
    return "\n".join(render_site(site) for site in sites)


def render_site(site: SiteSnapshot) -> str:
    stats = aggregate_stats([site])
    reference = (
        f'<div class="site-reference">ID: {escape(site.site.internal_reference)}</div>'
        if site.site.internal_reference else ""
    )
    attention = '<div class="offline">Needs attention</div>' if stats.offline_devices > 0 else ""
    return (
        f'<section class="site-card site-{site.availability.lower()}" id="site-{escape(site.id)}">'
        f"<h2>{escape(site.name)} {_availability_badge(site.availability)}</h2>{reference}"
        '<div class="site-stats">'
        f"<div><strong>{stats.total_devices}</strong> Total Devices</div>"
        f"<div><strong>{stats.total_clients}</strong> Connected Clients</div>"
        f'<div><strong class="online">{stats.online_devices}</strong> Online '
        f"({stats.health_percent}% uptime)</div>"
        f'<div><strong class="offline">{stats.offline_devices}</strong> Offline{attention}</div>'
        "</div>"
        f"{render_device_list(site.devices)}{render_client_list(site.clients)}"
        "</section>"
    )


def render_device_list(devices: Sequence[Device]) -> str:
    return _detail_list("Devices", "devices", [_device_row(device) for device in devices])


def render_client_list(clients: Sequence[Client]) -> str:
    return _detail_list("Clients", "clients", [_client_row(client) for client in clients])


def _detail_list(title: str, noun: str, rows: list[str]) -> str:
    if not rows:
        return f'<div class="detail-section"><h3>{title}</h3><div class="empty-state">No {noun}</div></div>'
    shown = "".join(rows[:LIST_PREVIEW_SIZE])
    hidden = rows[LIST_PREVIEW_SIZE:]
    more = (
        f"<details><summary>Show {len(hidden)} more {noun}</summary>{''.join(hidden)}</details>"
        if hidden else ""
    )
    return f'<div class="detail-section"><h3>{title} ({len(rows)})</h3>{shown}{more}</div>'


def _device_row(device: Device) -> str:
    badge = "badge-online" if device.is_online else "badge-offline"
    return (
        f'<div class="detail-item"><span>{escape(device.name)}</span>'
        f'<span>{escape(device.model)} <span class="badge {badge}">{escape(device.state)}</span></span></div>'
    )


def _client_row(client: Client) -> str:
    kind = client.connection_kind
    badge = f' <span class="badge badge-{kind}">{escape(client.type)}</span>' if kind else ""
    return (
        f'<div class="detail-item"><span>{escape(client.name)}</span>'
        f"<span>{escape(client.ip_address or 'N/A')}{badge}</span></div>"
    )


def _availability_badge(availability: str) -> str:
    return f'<span class="badge badge-{escape(availability.lower())}">{escape(availability)}</span>'
