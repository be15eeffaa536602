"""Data models for pycarbook results and records."""

from pycarbook.models.result import Record, StoreResult

__all__ = ["Record", "StoreResult"]
