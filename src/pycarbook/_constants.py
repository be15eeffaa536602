"""Internal constants shared across the library."""

USER_AGENT = "pycarbook"

BOOKINGS_STORAGE_KEY = "bookings"
ORDERS_STORAGE_KEY = "purchaseOrders"

BOOKINGS_SNAPSHOT_PATH = "/data/bookings.json"
ORDERS_SNAPSHOT_PATH = "/data/purchase-orders.json"

SAVE_ORDER_PATH = "/api/save-order.php"
UPDATE_ORDER_PATH = "/api/update-order.php"

DEFAULT_STATUS_FIELD = "status"
