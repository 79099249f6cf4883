"""
Authentication headers for the upstream network-controller API.

The upstream accepts a static API key; there is no token exchange or refresh.
"""
from unifi_dashboard.const import API_KEY_HEADER


def get_standard_headers(api_key: str) -> dict:
    """
    Build the standard HTTP headers used by all authenticated upstream requests.

    :param api_key: Static API key issued by the controller.
    :return: Dictionary of HTTP headers.
    """
    return {
        "accept": "application/json",
        API_KEY_HEADER: api_key,
    }
