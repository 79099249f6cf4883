"""
aiohttp web application: the backend-for-frontend.

- /api/sites... : credential-injecting passthrough to the upstream API
- /api/dashboard and friends: JSON view of the coordinator's session
- / : server-rendered HTML dashboard
"""
from __future__ import annotations

import json
import logging
from urllib.parse import quote

from aiohttp import web

from .api import UnifiApi
from .config import Config
from .const import VERSION
from .coordinator import DashboardCoordinator
from .errors import ApiResponseError
from .render import render_dashboard
from .stats import aggregate_stats

_LOGGER = logging.getLogger(__name__)

API_KEY = web.AppKey("api", UnifiApi)
COORDINATOR_KEY = web.AppKey("coordinator", DashboardCoordinator)


def create_app(config: Config, api: UnifiApi | None = None, auto_refresh: bool = True) -> web.Application:
    """
    Build the web application.

    The coordinator's first refresh and its timer start with the app; both are
    torn down, together with the upstream session, on cleanup.
    """
    if api is None:
        api = UnifiApi(config.api_url, config.api_key, timeout=config.request_timeout)
    coordinator = DashboardCoordinator(
        api,
        refresh_interval=config.refresh_interval,
        max_concurrent_fetches=config.max_concurrent_fetches,
    )

    app = web.Application()
    app[API_KEY] = api
    app[COORDINATOR_KEY] = coordinator

    app.router.add_get("/health", handle_health)
    app.router.add_get("/", handle_index)
    app.router.add_post("/selection", handle_selection_form)

    # Upstream passthrough
    app.router.add_get("/api/sites", handle_sites)
    app.router.add_get("/api/sites/{site_id}/devices", handle_site_devices)
    app.router.add_get("/api/sites/{site_id}/clients", handle_site_clients)

    # Dashboard session
    app.router.add_get("/api/dashboard", handle_dashboard)
    app.router.add_post("/api/selection", handle_selection)
    app.router.add_post("/api/refresh", handle_refresh)
    app.router.add_post("/api/auto-refresh", handle_auto_refresh)

    if auto_refresh:
        app.on_startup.append(_start_auto_refresh)
    app.on_cleanup.append(_shutdown_coordinator)
    return app


async def _start_auto_refresh(app: web.Application) -> None:
    app[COORDINATOR_KEY].start_auto_refresh(refresh_now=True)


async def _shutdown_coordinator(app: web.Application) -> None:
    await app[COORDINATOR_KEY].async_shutdown()


# ---------------------------------------------------------------------------
# Upstream passthrough
# ---------------------------------------------------------------------------

async def _proxy(request: web.Request, path: str, what: str) -> web.Response:
    """Forward a GET to the upstream, mirroring its status on failure."""
    api = request.app[API_KEY]
    try:
        data = await api.get_json(path)
    except ApiResponseError as exc:
        _LOGGER.warning("Upstream rejected %s request: %s", what, exc)
        return web.json_response(
            {"error": f"API request failed: {exc.reason}"}, status=exc.status
        )
    except Exception as exc:  # noqa: BLE001
        _LOGGER.error("Error fetching %s: %s", what, str(exc) or type(exc).__name__)
        return web.json_response({"error": str(exc) or type(exc).__name__}, status=500)
    return web.json_response(data)


async def handle_sites(request: web.Request) -> web.Response:
    return await _proxy(request, "sites", "sites")


async def handle_site_devices(request: web.Request) -> web.Response:
    site_id = request.match_info["site_id"]
    return await _proxy(request, f"sites/{quote(site_id, safe='')}/devices", "devices")


async def handle_site_clients(request: web.Request) -> web.Response:
    site_id = request.match_info["site_id"]
    return await _proxy(request, f"sites/{quote(site_id, safe='')}/clients", "clients")


# ---------------------------------------------------------------------------
# Dashboard session
# ---------------------------------------------------------------------------

def dashboard_payload(coordinator: DashboardCoordinator) -> dict:
    """JSON view of the filtered snapshot plus session status."""
    state = coordinator.state
    sites = coordinator.filtered_sites()
    selected_count, total_count = state.selection.counts(state.snapshot)
    return {
        "sites": [site.to_json() for site in sites],
        "stats": aggregate_stats(sites).to_json(),
        "selection": {
            "selected": sorted(state.selection.selected_ids),
            "selectedCount": selected_count,
            "totalCount": total_count,
        },
        "delta": state.last_delta.to_json() if state.last_delta else None,
        "error": state.last_error,
        "lastRefresh": state.last_refresh.isoformat() if state.last_refresh else None,
        "autoRefresh": coordinator.auto_refresh_enabled,
        "nextRefreshIn": coordinator.seconds_until_refresh,
    }


async def handle_dashboard(request: web.Request) -> web.Response:
    return web.json_response(dashboard_payload(request.app[COORDINATOR_KEY]))


async def _read_json(request: web.Request) -> dict:
    try:
        body = await request.json()
    except ValueError as exc:
        raise web.HTTPBadRequest(
            text=json.dumps({"error": f"Invalid JSON body: {exc}"}), content_type="application/json"
        ) from exc
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(
            text=json.dumps({"error": "Expected a JSON object"}), content_type="application/json"
        )
    return body


async def handle_selection(request: web.Request) -> web.Response:
    coordinator = request.app[COORDINATOR_KEY]
    body = await _read_json(request)
    try:
        coordinator.update_selection(body.get("action"), body.get("siteId"))
    except ValueError as exc:
        return web.json_response({"error": str(exc)}, status=400)
    return web.json_response(dashboard_payload(coordinator))


async def handle_refresh(request: web.Request) -> web.Response:
    coordinator = request.app[COORDINATOR_KEY]
    result = await coordinator.async_manual_refresh()
    status = 502 if result is None else 200
    return web.json_response(dashboard_payload(coordinator), status=status)


async def handle_auto_refresh(request: web.Request) -> web.Response:
    coordinator = request.app[COORDINATOR_KEY]
    body = await _read_json(request)
    enabled = body.get("enabled")
    if not isinstance(enabled, bool):
        return web.json_response({"error": "'enabled' must be true or false"}, status=400)
    if enabled:
        coordinator.start_auto_refresh()
    else:
        coordinator.stop_auto_refresh()
    return web.json_response(
        {"autoRefresh": coordinator.auto_refresh_enabled, "nextRefreshIn": coordinator.seconds_until_refresh}
    )


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

async def handle_index(request: web.Request) -> web.Response:
    coordinator = request.app[COORDINATOR_KEY]
    state = coordinator.state
    html = render_dashboard(
        state.snapshot,
        state.selection,
        refresh_interval=coordinator.refresh_interval,
        seconds_until_refresh=coordinator.seconds_until_refresh,
        last_error=state.last_error,
        last_delta=state.last_delta,
    )
    return web.Response(text=html, content_type="text/html")


async def handle_selection_form(request: web.Request) -> web.Response:
    coordinator = request.app[COORDINATOR_KEY]
    form = await request.post()
    try:
        coordinator.update_selection(form.get("action"), form.get("site_id"))
    except ValueError as exc:
        raise web.HTTPBadRequest(text=str(exc)) from exc
    raise web.HTTPSeeOther("/")


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "version": VERSION})
