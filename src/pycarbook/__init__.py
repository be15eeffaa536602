"""pycarbook - Local-first booking and purchase-order record stores."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycarbook")
except PackageNotFoundError:
    __version__ = "0+local"
from pycarbook.catalog import (
    calculate_booking_price,
    get_accra_locations,
    get_car_brands,
    get_car_models,
)
from pycarbook.client import CarbookClient
from pycarbook.config import CarbookConfig, CollectionConfig, bookings_collection, orders_collection
from pycarbook.exceptions import (
    CarbookConfigError,
    CarbookError,
    CarbookStorageError,
    CarbookTransportError,
    StorageUnavailableError,
)
from pycarbook.models import Record, StoreResult
from pycarbook.storage import FileStorage, MemoryStorage, StorageBackend, UnavailableStorage
from pycarbook.store import RecordStore

__all__ = [
    "__version__",
    "CarbookClient",
    "CarbookConfig",
    "CarbookConfigError",
    "CarbookError",
    "CarbookStorageError",
    "CarbookTransportError",
    "CollectionConfig",
    "FileStorage",
    "MemoryStorage",
    "Record",
    "RecordStore",
    "StorageBackend",
    "StorageUnavailableError",
    "StoreResult",
    "UnavailableStorage",
    "bookings_collection",
    "calculate_booking_price",
    "get_accra_locations",
    "get_car_brands",
    "get_car_models",
    "orders_collection",
]
