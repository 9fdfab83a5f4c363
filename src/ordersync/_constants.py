"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000/api"
USER_AGENT = "ordersync/1 (+aiohttp)"

#: HTTP statuses that mean "the credential is no longer valid".
AUTH_REJECTED_STATUSES: frozenset[int] = frozenset({401, 403})

# ------------------------------------------------------------------
# Timing defaults (seconds)
# ------------------------------------------------------------------

POLL_INTERVAL = 10.0
REQUEST_TIMEOUT = 10.0
TOAST_TIMEOUT = 5.0
STATUS_TOAST_TIMEOUT = 5.0
NEW_ORDER_TOAST_TIMEOUT = 7.0
OS_NOTIFICATION_TIMEOUT = 8.0
BANNER_DELAY = 2.0

# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

ORDERS_ENDPOINT = "/shipping/orders"


def order_status_endpoint(order_id: int) -> str:
    return f"{ORDERS_ENDPOINT}/{order_id}/status"


def order_tracking_endpoint(order_id: int) -> str:
    return f"{ORDERS_ENDPOINT}/{order_id}/tracking"


PRIVILEGED_ROLES: tuple[str, ...] = ("admin", "manager")
DEFAULT_ICON = "/favicon.ico"
