"""Bitquery GraphQL client (secondary tier)."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

import httpx

from launchpad.services.errors import MalformedUpstreamPayload, UpstreamUnavailable
from launchpad.utils.time import iso_z, utcnow

UPSTREAM = "bitquery"

SYSTEM_PROGRAM_MINT = "11111111111111111111111111111111"

# kind -> (descending order field, lookback days)
QUERY_PROFILES: dict[str, tuple[str, int]] = {
    "new": ("Block_Time", 1),
    "trending": ("Trade_Buy_Price", 7),
}

_QUERY_TEMPLATE = """{
  %(chain)s {
    DEXTrades(
      limitBy: { by: Trade_Buy_Currency_MintAddress, count: 1 }
      limit: { count: %(limit)d }
      orderBy: { descending: %(order_by)s }
      where: {
        Trade: {
          Dex: { ProtocolName: { is: "pump" } }
          Buy: {
            Currency: {
              MintAddress: { notIn: ["%(excluded_mint)s"] }
            }
          }
          PriceAsymmetry: { le: 0.1 }
          Sell: { AmountInUSD: { gt: "10" } }
        }
        Transaction: { Result: { Success: true } }
        Block: { Time: { since: "%(since)s" } }
      }
    ) {
      Trade {
        Buy {
          Price(maximum: Block_Time)
          PriceInUSD(maximum: Block_Time)
          Currency {
            Name
            Symbol
            MintAddress
            Decimals
            Fungible
            Uri
          }
        }
      }
      Block {
        Time
      }
      Transaction {
        Hash
      }
    }
  }
}"""


def build_query(kind: str, now: datetime | None = None, *, chain: str = "Solana", limit: int = 10) -> str:
    """GraphQL text for ``kind``; only the ordering and the lookback window differ."""
    order_by, lookback_days = QUERY_PROFILES[kind]
    since = (now or utcnow()) - timedelta(days=lookback_days)
    return _QUERY_TEMPLATE % {
        "chain": chain,
        "limit": limit,
        "order_by": order_by,
        "excluded_mint": SYSTEM_PROGRAM_MINT,
        "since": iso_z(since),
    }


class BitqueryClient:
    def __init__(
        self,
        api_url: str = "https://graphql.bitquery.io",
        api_key: str = "",
        timeout: float = 10.0,
        chain: str = "Solana",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.chain = chain
        self._transport = transport

    async def fetch_trades(self, kind: str, now: datetime | None = None) -> list[dict[str, Any]]:
        """Return the ``DEXTrades`` rows for ``kind``."""
        body = {"query": build_query(kind, now, chain=self.chain)}
        headers = {"Content-Type": "application/json", "X-API-KEY": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=body, headers=headers)
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

        return extract_trades(payload, self.chain)


def extract_trades(payload: Any, chain: str = "Solana") -> list[dict[str, Any]]:
    """Shape check for ``{data: {<chain>: {DEXTrades: [...]}}}``."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        errors = payload.get("errors") if isinstance(payload, dict) else None
        reason = f"graphql errors: {errors!r}"[:300] if errors else "missing 'data'"
        raise MalformedUpstreamPayload(UPSTREAM, reason)

    chain_block = data.get(chain)
    if not isinstance(chain_block, dict):
        raise MalformedUpstreamPayload(UPSTREAM, f"missing 'data.{chain}'")

    trades = chain_block.get("DEXTrades")
    if not isinstance(trades, list):
        raise MalformedUpstreamPayload(UPSTREAM, f"missing 'data.{chain}.DEXTrades'")
    return trades
