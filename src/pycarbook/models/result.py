"""Result descriptors returned by the record stores.

Store operations never raise across the local/remote boundary; writes
answer with a :class:`StoreResult` instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

Record = dict[str, Any]
"""One booking or order: an opaque JSON object with an id and a status field."""


class StoreResult(BaseModel):
    """Outcome of a write against a record store.

    ``mirrored`` is ``True``/``False`` when the remote mirror was awaited,
    and ``None`` when no mirror ran or it was dispatched in the background.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    mirrored: bool | None = None

    def __bool__(self) -> bool:
        return self.success
