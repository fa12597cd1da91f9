"""Internal constants shared across the library."""

CACHE_VERSION = "khardingclassics-v3"
APP_NAME = "Khardingclassics"
DEFAULT_ORIGIN = "http://localhost:8080"
USER_AGENT = "pyswcache/1.0"

API_PREFIX = "/api/"
OFFLINE_PAGE = "/offline.html"

STATIC_ASSETS: tuple[str, ...] = (
    "/",
    "/offline.html",
    "/manifest.json",
    "/icons/icon-72.svg",
    "/icons/icon-96.svg",
    "/icons/icon-128.svg",
    "/icons/icon-192.svg",
    "/icons/icon-512.svg",
)

# Partition name suffixes, joined to the version tag with "-".
STATIC_SUFFIX = "static"
DYNAMIC_SUFFIX = "dynamic"
IMAGE_SUFFIX = "images"

# ------------------------------------------------------------------
# Background sync
# ------------------------------------------------------------------

SYNC_CART = "sync-cart"
SYNC_ORDER = "sync-order"
CART_SYNC_PATTERNS: tuple[str, ...] = ("/api/cart", "/api/checkout")
ORDER_SYNC_PATTERNS: tuple[str, ...] = ("/api/orders",)

# ------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------

NOTIFICATION_ICON = "/icons/icon-192.svg"
NOTIFICATION_BADGE = "/icons/icon-72.svg"
NOTIFICATION_VIBRATE: tuple[int, ...] = (100, 50, 100)
EXPLORE_ACTION = "explore"
CLOSE_ACTION = "close"
EXPLORE_PATH = "/collection"
ROOT_PATH = "/"

# Only this status is ever written to a partition.
CACHEABLE_STATUS = 200
