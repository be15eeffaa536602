"""Custom exception hierarchy for pycarbook."""

from __future__ import annotations


class CarbookError(Exception):
    """Base exception for all pycarbook errors."""


class CarbookConfigError(CarbookError):
    """Invalid or missing configuration."""


class CarbookStorageError(CarbookError):
    """Local storage could not be read or written."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class StorageUnavailableError(CarbookStorageError):
    """No local storage facility exists in the current environment."""


class CarbookTransportError(CarbookError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)
