from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any

import pytest

from pycarbook.exceptions import CarbookTransportError


@dataclass
class FakeSiteBackend:
    """In-memory stand-in for the site: static snapshots plus mirror endpoints."""

    snapshots: dict[str, Any] = field(default_factory=dict)
    get_error: BaseException | None = None
    post_error: BaseException | None = None
    post_gate: asyncio.Event | None = None
    gets: list[str] = field(default_factory=list)
    posts: list[tuple[str, Any]] = field(default_factory=list)

    async def get_json(self, path: str) -> Any:
        self.gets.append(path)
        if self.get_error is not None:
            raise self.get_error
        if path not in self.snapshots:
            raise CarbookTransportError(f"HTTP 404 from {path}", status_code=404, url=path)
        return copy.deepcopy(self.snapshots[path])

    async def post_json(self, path: str, payload: Any) -> None:
        if self.post_gate is not None:
            await self.post_gate.wait()
        self.posts.append((path, copy.deepcopy(payload)))
        if self.post_error is not None:
            raise self.post_error


@pytest.fixture
def backend() -> FakeSiteBackend:
    return FakeSiteBackend()
