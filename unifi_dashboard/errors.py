"""Exception hierarchy for the UniFi dashboard."""


class UnifiDashboardError(Exception):
    """Base class for all dashboard errors."""


class ApiResponseError(UnifiDashboardError):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, status: int, reason: str, url: str = "") -> None:
        self.status = status
        self.reason = reason
        self.url = url
        super().__init__(f"{status} {reason}")


class SiteListFetchError(UnifiDashboardError):
    """The site list could not be fetched; fatal to a refresh cycle."""


class ConfigError(UnifiDashboardError):
    """Invalid or missing configuration."""
