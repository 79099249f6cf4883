"""
Site list fetching from the upstream API.

Responsible for:
- Fetching the raw site list
- Mapping the JSON response onto Site model instances
"""
import logging

import aiohttp

from unifi_dashboard.models import Site, parse_items
from unifi_dashboard.requests import make_request, unwrap_data

_LOGGER = logging.getLogger(__name__)


async def fetch_sites(
    session: aiohttp.ClientSession, base_url: str, headers: dict
) -> list[Site]:
    """
    Fetch all sites visible to the API key.

    Errors are not caught here: a failed site list is fatal to the refresh
    cycle and the caller decides how to report it.

    Corresponding CURL command:
    curl -H 'X-API-KEY: KEY' '{base_url}/sites'
    """
    url = f"{base_url}/sites"
    raw_json = await make_request(session, "GET", url, headers)
    sites = parse_items(Site, unwrap_data(raw_json, url), "site")
    _LOGGER.debug("Fetched %s sites", len(sites))
    return sites
