"""Client for the pump.fun discovery endpoints (primary tier)."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from launchpad.services.errors import MalformedUpstreamPayload, UpstreamUnavailable

UPSTREAM = "pump.fun"

FEED_ENDPOINTS = {
    "trending": "/trending",
    "new": "/new",
}


class PumpFunClient:
    def __init__(
        self,
        base_url: str = "https://api.pump.fun",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch_feed(self, kind: str) -> list[dict[str, Any]]:
        """
        Return the raw ``tokens`` array for ``kind``.

        Raises UpstreamUnavailable for transport errors, timeouts and non-2xx
        answers, MalformedUpstreamPayload when the envelope has no token list.
        """
        url = f"{self.base_url}{FEED_ENDPOINTS[kind]}"
        headers = {"Accept": "application/json", "Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(UPSTREAM, f"timeout after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailable(UPSTREAM, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(UPSTREAM, repr(exc)) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedUpstreamPayload(UPSTREAM, "body is not JSON") from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("tokens"), list):
            raise MalformedUpstreamPayload(UPSTREAM, "missing 'tokens' array")

        return payload["tokens"]
