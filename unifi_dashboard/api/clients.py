"""
Per-site client fetching from the upstream API.
"""
from urllib.parse import quote

import aiohttp

from unifi_dashboard.models import Client, parse_items
from unifi_dashboard.requests import make_request, unwrap_data


async def fetch_clients(
    session: aiohttp.ClientSession, base_url: str, headers: dict, site_id: str
) -> list[Client]:
    """
    Fetch the connected clients of a single site.

    Corresponding CURL command:
    curl -H 'X-API-KEY: KEY' '{base_url}/sites/{site_id}/clients'
    """
    url = f"{base_url}/sites/{quote(site_id, safe='')}/clients"
    raw_json = await make_request(session, "GET", url, headers)
    return parse_items(Client, unwrap_data(raw_json, url), "client")
