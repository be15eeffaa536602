"""High-level async client for the car-booking site's records."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from pycarbook import catalog
from pycarbook._transport import HttpTransport, Transport
from pycarbook.config import CarbookConfig
from pycarbook.exceptions import CarbookError
from pycarbook.models.result import Record, StoreResult
from pycarbook.storage import FileStorage, MemoryStorage, StorageBackend
from pycarbook.store import RecordStore

_logger = logging.getLogger(__name__)


def _storage_from_config(config: CarbookConfig) -> StorageBackend:
    if config.storage_path is not None:
        return FileStorage(config.storage_path)
    return MemoryStorage()


class CarbookClient:
    """Async client owning the booking and purchase-order stores.

    Usage::

        async with CarbookClient(CarbookConfig.from_env()) as client:
            await client.save_booking({"bookingId": "BK-1", "status": "pending"})
            bookings = await client.get_all_bookings()

    Parameters
    ----------
    config : CarbookConfig
        Client configuration.
    session : aiohttp.ClientSession or None
        Externally owned HTTP session. When omitted, the client creates
        one on enter (only if ``config.base_url`` is set) and closes it
        on exit.
    storage : StorageBackend or None
        Local storage backend. Defaults to a :class:`FileStorage` at
        ``config.storage_path`` or an in-memory store.
    transport : Transport or None
        Remote transport override, mostly for tests. Takes precedence
        over the HTTP transport built from ``config.base_url``.
    """

    def __init__(
        self,
        config: CarbookConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        storage: StorageBackend | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._storage = storage if storage is not None else _storage_from_config(config)
        self._transport_override = transport
        self._bookings: RecordStore | None = None
        self._orders: RecordStore | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CarbookClient:
        transport: Transport | None = self._transport_override
        if transport is None and self._config.base_url is not None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(
                self._config.base_url,
                self._http_session,
                timeout=self._config.request_timeout,
            )
        elif transport is None:
            _logger.debug("No base_url configured; stores are local only")

        self._bookings = RecordStore(
            self._config.bookings,
            self._storage,
            transport,
            await_mirror=self._config.await_mirror,
        )
        self._orders = RecordStore(
            self._config.orders,
            self._storage,
            transport,
            await_mirror=self._config.await_mirror,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        for store in (self._bookings, self._orders):
            if store is not None:
                await store.wait_for_mirrors()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._bookings = None
        self._orders = None

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    @property
    def bookings(self) -> RecordStore:
        if self._bookings is None:
            raise CarbookError("Client not initialized. Use 'async with CarbookClient(...) as client:'")
        return self._bookings

    @property
    def orders(self) -> RecordStore:
        if self._orders is None:
            raise CarbookError("Client not initialized. Use 'async with CarbookClient(...) as client:'")
        return self._orders

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def load_bookings(self) -> list[Record]:
        return await self.bookings.load()

    async def save_booking(self, booking: Mapping[str, Any]) -> StoreResult:
        return await self.bookings.append(booking)

    async def get_all_bookings(self) -> list[Record]:
        return await self.bookings.list_all()

    async def update_booking_status(self, booking_id: str, status: str) -> StoreResult:
        return await self.bookings.update_status(booking_id, status)

    # ------------------------------------------------------------------
    # Purchase orders
    # ------------------------------------------------------------------

    async def load_orders(self) -> list[Record]:
        return await self.orders.load()

    async def save_order(self, order: Mapping[str, Any]) -> StoreResult:
        return await self.orders.append(order)

    async def get_all_orders(self) -> list[Record]:
        return await self.orders.list_all()

    async def update_order_status(self, order_id: str, status: str) -> StoreResult:
        return await self.orders.update_status(order_id, status)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @staticmethod
    def get_car_brands() -> list[str]:
        return catalog.get_car_brands()

    @staticmethod
    def get_accra_locations() -> list[str]:
        return catalog.get_accra_locations()

    @staticmethod
    def get_car_models(brand: str) -> list[str]:
        return catalog.get_car_models(brand)

    @staticmethod
    def calculate_booking_price(car_brand: str, car_model: str | None, days: int | float) -> int | float:
        return catalog.calculate_booking_price(car_brand, car_model, days)
