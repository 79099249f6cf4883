"""
Low-level HTTP request helpers for upstream API communication.
This module performs single-attempt JSON requests and maps error responses onto ApiResponseError.
Failed requests are not retried; the next scheduled refresh cycle fetches again.
"""
import logging

import aiohttp

from .errors import ApiResponseError

_LOGGER = logging.getLogger(__name__)


async def make_request(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    headers: dict,
):
    """
    Make a single HTTP request and return the parsed JSON body.

    Args:
        session: Shared aiohttp session owned by the API client
        method: HTTP method (only GET is used by the dashboard)
        url: Target URL for the request
        headers: HTTP headers dictionary

    Returns:
        Parsed JSON response

    Raises:
        ApiResponseError: If the upstream answers with a non-2xx status
        ValueError: If a successful response is not JSON
        aiohttp.ClientError, asyncio.TimeoutError: For network errors
    """
    async with session.request(method.upper(), url, headers=headers) as response:
        return await _process_response(response, url)


async def _process_response(response, url: str):
    """
    Process HTTP response and extract JSON data.

    Args:
        response: aiohttp response object
        url: Request URL (for logging)

    Returns:
        Parsed JSON response

    Raises:
        ApiResponseError: For any non-2xx status
        ValueError: If a 2xx response has an unexpected content type
    """
    content_type = response.headers.get("Content-Type", "")

    if 200 <= response.status < 300:
        if "application/json" in content_type:
            return await response.json()
        text = await response.text()
        _LOGGER.warning(
            "Unexpected content type in successful response: %s (status %s) from %s",
            content_type, response.status, url,
        )
        raise ValueError(f"Expected JSON but got {content_type}: {text[:200]}")

    reason = response.reason or ""
    _LOGGER.debug("Upstream returned %s %s for %s", response.status, reason, url)
    raise ApiResponseError(response.status, reason, url)


def unwrap_data(raw_json, url: str) -> list:
    """
    Return the list carried in an upstream `{"data": [...]}` envelope.

    A missing or null `data` key yields an empty list; anything else that is
    not a list raises ValueError.
    """
    if not isinstance(raw_json, dict):
        raise ValueError(f"Unexpected response format from {url}: {str(raw_json)[:200]}")
    data = raw_json.get("data")
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Unexpected 'data' format from {url}: {str(data)[:200]}")
    return data
