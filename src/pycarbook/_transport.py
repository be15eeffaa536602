"""HTTP transport for snapshot fetches and mirror calls."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pycarbook._constants import USER_AGENT
from pycarbook._redact import redact_for_log
from pycarbook.exceptions import CarbookTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the record stores.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, path: str) -> Any:
        ...

    async def post_json(self, path: str, payload: Any) -> None:
        ...


class HttpTransport:
    """JSON-over-HTTP transport bound to a site base URL."""

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout is not None else None

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": {"accept": "application/json", "user-agent": USER_AGENT}}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return kwargs

    async def get_json(self, path: str) -> Any:
        """GET *path* and return its decoded JSON body."""
        url = self.url_for(path)
        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, **self._request_kwargs()) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise CarbookTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except CarbookTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise CarbookTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CarbookTransportError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc

    async def post_json(self, path: str, payload: Any) -> None:
        """POST *payload* as JSON to *path*; any 2xx response counts as accepted."""
        url = self.url_for(path)
        if isinstance(payload, Mapping):
            _logger.debug("POST %s %s", url, redact_for_log(payload))
        else:
            _logger.debug("POST %s", url)

        kwargs = self._request_kwargs()
        kwargs["headers"]["content-type"] = "application/json; charset=UTF-8"
        body = json.dumps(payload, ensure_ascii=False)

        try:
            async with self._http.post(url, data=body.encode("utf-8"), **kwargs) as resp:
                if not 200 <= resp.status < 300:
                    text = await resp.text()
                    raise CarbookTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except CarbookTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise CarbookTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc
