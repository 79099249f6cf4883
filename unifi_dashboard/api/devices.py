"""
Per-site device fetching from the upstream API.

Responsible for:
- Fetching the raw device list of one site
- Mapping the JSON response fields onto Device model instances
"""
from urllib.parse import quote

import aiohttp

from unifi_dashboard.models import Device, parse_items
from unifi_dashboard.requests import make_request, unwrap_data


async def fetch_devices(
    session: aiohttp.ClientSession, base_url: str, headers: dict, site_id: str
) -> list[Device]:
    """
    Fetch the devices of a single site.

    Corresponding CURL command:
    curl -H 'X-API-KEY: KEY' '{base_url}/sites/{site_id}/devices'
    """
    url = f"{base_url}/sites/{quote(site_id, safe='')}/devices"
    raw_json = await make_request(session, "GET", url, headers)
    return parse_items(Device, unwrap_data(raw_json, url), "device")
