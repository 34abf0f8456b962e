from __future__ import annotations

import asyncio
import json
import socket
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from inventory_sync.errors import BackendTimeoutError, NetworkError, ServerError, UnknownError


class JsonTransport:
    """Blocking JSON-over-HTTP calls, run off the event loop with ``asyncio.to_thread``."""

    def __init__(self, *, base_url: str, headers: dict[str, str], timeout_seconds: int, name: str) -> None:
        self.base_url = base_url.rstrip('/')
        self.headers = headers
        self.timeout_seconds = timeout_seconds
        self.name = name

    def _send(self, method: str, path: str, payload: dict | None, extra_headers: dict[str, str] | None) -> dict:
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        req = Request(
            url=f'{self.base_url}{path}',
            data=data,
            headers={**self.headers, **(extra_headers or {})},
            method=method,
        )
        try:
            with urlopen(req, timeout=self.timeout_seconds) as response:
                body = response.read().decode('utf-8')
        except HTTPError as exc:
            detail = exc.read().decode('utf-8', errors='ignore') if exc.fp else ''
            raise ServerError(exc.code, f'{self.name} API error on {path}: {detail}') from exc
        except (socket.timeout, TimeoutError) as exc:
            raise BackendTimeoutError(f'{self.name} API timed out on {path}') from exc
        except URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise BackendTimeoutError(f'{self.name} API timed out on {path}') from exc
            raise NetworkError(f'{self.name} API network error on {path}: {exc.reason}') from exc

        if not body:
            return {}
        try:
            return json.loads(body)
        except ValueError as exc:
            raise UnknownError(f'{self.name} API returned invalid JSON on {path}') from exc

    async def request(
        self, method: str, path: str, payload: dict | None = None, *, extra_headers: dict[str, str] | None = None
    ) -> dict:
        return await asyncio.to_thread(self._send, method, path, payload, extra_headers)

    async def get(self, path: str) -> dict:
        return await self.request('GET', path)

    async def post(self, path: str, payload: dict) -> dict:
        return await self.request('POST', path, payload)
