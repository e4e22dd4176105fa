import asyncio
import itertools
import time

import httpx

from feetracker.exceptions import RpcError


class RateLimitedClient:
    """Async JSON-RPC POST client with interval-based rate limiting.

    Non-2xx responses and JSON-RPC error objects are raised as RpcError whose
    message carries the HTTP status line, so callers can spot 429s.
    """

    def __init__(self, rate_per_second: float = 10.0, timeout: float = 30.0) -> None:
        self._min_interval = 1.0 / rate_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout)

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def rpc(self, url: str, method: str, params: list) -> object:
        """Send one JSON-RPC request and return its `result` field."""
        await self._wait_for_slot()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        resp = await self._client.post(url, json=payload)

        if resp.status_code >= 400:
            raise RpcError(
                f"RPC {method} failed: {resp.status_code} {resp.reason_phrase}",
                method=method,
                status_code=resp.status_code,
            )

        data = resp.json()
        if "error" in data:
            error = data["error"]
            msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise RpcError(f"RPC {method} error: {msg}", method=method)
        return data.get("result")

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
