"""UniFi site dashboard: polling refresh cycle plus a small backend-for-frontend."""
from .const import VERSION

__version__ = VERSION
