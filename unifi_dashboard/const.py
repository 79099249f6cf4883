VERSION = "1.0.0"

# Site availability, derived from device states
AVAILABILITY_ONLINE = "ONLINE"
AVAILABILITY_OFFLINE = "OFFLINE"
AVAILABILITY_UNKNOWN = "UNKNOWN"

DEVICE_STATE_ONLINE = "ONLINE"

# Upstream API
API_KEY_HEADER = "X-API-KEY"
REQUEST_TIMEOUT = 10         # seconds per upstream request

# Refresh cycle
REFRESH_INTERVAL = 15        # seconds between scheduled refreshes
MAX_CONCURRENT_FETCHES = 0   # per-site fetches in flight at once, 0 = unbounded

# Presentation
LIST_PREVIEW_SIZE = 5        # devices/clients shown before the "show more" block
