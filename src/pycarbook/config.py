"""Client configuration for pycarbook."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pycarbook._constants import (
    BOOKINGS_SNAPSHOT_PATH,
    BOOKINGS_STORAGE_KEY,
    DEFAULT_STATUS_FIELD,
    ORDERS_SNAPSHOT_PATH,
    ORDERS_STORAGE_KEY,
    SAVE_ORDER_PATH,
    UPDATE_ORDER_PATH,
)
from pycarbook.exceptions import CarbookConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CollectionConfig:
    """Where and how one record collection is stored.

    Parameters
    ----------
    name : str
        Collection name. Also used as the key holding the full
        collection in update-mirror payloads (e.g. ``"orders"``).
    label : str
        Human-readable record label used in result messages.
    storage_key : str
        Local storage key holding the serialized JSON array.
    id_field : str
        Identifying field of each record (``bookingId``, ``orderId``).
    status_field : str
        Mutable status field of each record.
    snapshot_path : str or None
        Path (relative to ``CarbookConfig.base_url``) of the static JSON
        snapshot used to seed an empty collection.
    mirror_append_path : str or None
        Endpoint receiving each newly appended record.
    mirror_update_path : str or None
        Endpoint receiving status updates together with the full collection.
    """

    name: str
    label: str
    storage_key: str
    id_field: str
    status_field: str = DEFAULT_STATUS_FIELD
    snapshot_path: str | None = None
    mirror_append_path: str | None = None
    mirror_update_path: str | None = None

    def __post_init__(self) -> None:
        for field_name in ("name", "storage_key", "id_field", "status_field"):
            if not getattr(self, field_name):
                raise CarbookConfigError(f"CollectionConfig.{field_name} must be non-empty")


def bookings_collection(**overrides: Any) -> CollectionConfig:
    """Default configuration of the car-booking collection (no mirror)."""
    kwargs: dict[str, Any] = {
        "name": "bookings",
        "label": "Booking",
        "storage_key": BOOKINGS_STORAGE_KEY,
        "id_field": "bookingId",
        "snapshot_path": BOOKINGS_SNAPSHOT_PATH,
    }
    kwargs.update(overrides)
    return CollectionConfig(**kwargs)


def orders_collection(**overrides: Any) -> CollectionConfig:
    """Default configuration of the purchase-order collection."""
    kwargs: dict[str, Any] = {
        "name": "orders",
        "label": "Order",
        "storage_key": ORDERS_STORAGE_KEY,
        "id_field": "orderId",
        "snapshot_path": ORDERS_SNAPSHOT_PATH,
        "mirror_append_path": SAVE_ORDER_PATH,
        "mirror_update_path": UPDATE_ORDER_PATH,
    }
    kwargs.update(overrides)
    return CollectionConfig(**kwargs)


@dataclasses.dataclass(frozen=True)
class CarbookConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str or None
        Site base URL for snapshot fetches and mirror calls. ``None``
        disables every remote call; the stores are then purely local.
    storage_path : str or None
        JSON file backing the local key space. ``None`` keeps storage
        in memory for the lifetime of the client.
    request_timeout : float or None
        Total timeout in seconds for each HTTP request. ``None`` keeps
        the aiohttp default.
    await_mirror : bool
        Await mirror calls before returning from ``append`` /
        ``update_status`` so the result message can report whether the
        server accepted the write. By default mirrors run detached.
    bookings : CollectionConfig
        Booking collection settings.
    orders : CollectionConfig
        Purchase-order collection settings.
    """

    base_url: str | None = None
    storage_path: str | None = None
    request_timeout: float | None = None
    await_mirror: bool = False
    bookings: CollectionConfig = dataclasses.field(default_factory=bookings_collection)
    orders: CollectionConfig = dataclasses.field(default_factory=orders_collection)

    def __post_init__(self) -> None:
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise CarbookConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.base_url is not None:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> CarbookConfig:
        """Create configuration from environment variables.

        Reads ``CARBOOK_BASE_URL``, ``CARBOOK_STORAGE_PATH``,
        ``CARBOOK_REQUEST_TIMEOUT``, ``CARBOOK_AWAIT_MIRROR``,
        ``CARBOOK_BOOKINGS_KEY`` and ``CARBOOK_ORDERS_KEY``. Explicit
        keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CarbookConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CARBOOK_BASE_URL": "base_url",
            "CARBOOK_STORAGE_PATH": "storage_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        timeout_env = env.get("CARBOOK_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise CarbookConfigError(f"CARBOOK_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "await_mirror" not in overrides:
            config_kwargs["await_mirror"] = _env_bool(env.get("CARBOOK_AWAIT_MIRROR"), False)

        bookings_key = env.get("CARBOOK_BOOKINGS_KEY")
        if bookings_key and "bookings" not in overrides:
            config_kwargs["bookings"] = bookings_collection(storage_key=bookings_key)

        orders_key = env.get("CARBOOK_ORDERS_KEY")
        if orders_key and "orders" not in overrides:
            config_kwargs["orders"] = orders_collection(storage_key=orders_key)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
