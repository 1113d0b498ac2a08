# launchpad/services/discovery.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, Optional, Protocol

import httpx

from launchpad.config.settings import Settings
from launchpad.schemas.tokens import FEED_KINDS, FeedKind, TokenSummary
from launchpad.services.bitquery import BitqueryClient
from launchpad.services.errors import InvalidInput, MalformedUpstreamPayload, UpstreamUnavailable
from launchpad.services.fallback import static_tokens
from launchpad.services.normalize import (
    DEFAULT_IMAGE_BASE_URL,
    DiscoveryPolicy,
    from_bitquery,
    from_pumpfun,
    unique_by_id,
)
from launchpad.services.pumpfun import PumpFunClient
from launchpad.utils.time import utcnow

logger = logging.getLogger("launchpad.discovery")

TIER_PRIMARY = "primary"
TIER_SECONDARY = "secondary"
TIER_STATIC = "static"


class FeedSource(Protocol):
    async def fetch_feed(self, kind: FeedKind) -> list[dict[str, Any]]: ...


class TradeSource(Protocol):
    async def fetch_trades(self, kind: FeedKind, now: datetime | None = None) -> list[dict[str, Any]]: ...


@dataclass(frozen=True)
class TierOutcome:
    """Result of one tier attempt: either usable tokens or the reason it was skipped."""

    tier: str
    ok: bool
    tokens: tuple[TokenSummary, ...] = ()
    reason: Optional[str] = None
    elapsed_ms: int = 0

    @classmethod
    def success(cls, tier: str, tokens: Iterable[TokenSummary], elapsed_ms: int = 0) -> "TierOutcome":
        return cls(tier=tier, ok=True, tokens=tuple(tokens), elapsed_ms=elapsed_ms)

    @classmethod
    def failure(cls, tier: str, reason: str, elapsed_ms: int = 0) -> "TierOutcome":
        return cls(tier=tier, ok=False, reason=reason, elapsed_ms=elapsed_ms)


class TokenAggregator:
    """
    Serves the trending/new discovery feeds.

    Tiers run strictly one after another: pump.fun, then Bitquery, then the
    built-in lists. The first tier producing a non-empty, well-formed list
    wins. list_tokens() never raises for upstream trouble.
    """

    def __init__(
        self,
        primary: FeedSource,
        secondary: TradeSource,
        *,
        primary_timeout: float = 5.0,
        secondary_timeout: float = 10.0,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
        policy: Optional[DiscoveryPolicy] = None,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.primary_timeout = primary_timeout
        self.secondary_timeout = secondary_timeout
        self.image_base_url = image_base_url
        self.policy = policy or DiscoveryPolicy()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        policy: Optional[DiscoveryPolicy] = None,
    ) -> "TokenAggregator":
        primary = PumpFunClient(
            base_url=settings.PUMPFUN_API_URL,
            timeout=settings.PUMPFUN_TIMEOUT_SECONDS,
            transport=transport,
        )
        secondary = BitqueryClient(
            api_url=settings.BITQUERY_API_URL,
            api_key=settings.BITQUERY_API_KEY,
            timeout=settings.BITQUERY_TIMEOUT_SECONDS,
            chain=settings.BITQUERY_CHAIN,
            transport=transport,
        )
        return cls(
            primary,
            secondary,
            primary_timeout=settings.PUMPFUN_TIMEOUT_SECONDS,
            secondary_timeout=settings.BITQUERY_TIMEOUT_SECONDS,
            image_base_url=settings.TOKEN_IMAGE_BASE_URL,
            policy=policy,
        )

    async def list_tokens(self, kind: FeedKind) -> list[TokenSummary]:
        if kind not in FEED_KINDS:
            raise InvalidInput(f"unknown feed kind: {kind!r}")

        now = utcnow()
        for attempt in (self.try_primary, self.try_secondary):
            outcome = await attempt(kind, now)
            if outcome.ok:
                logger.info(
                    "discovery served | kind=%s | tier=%s | tokens=%d | %dms",
                    kind, outcome.tier, len(outcome.tokens), outcome.elapsed_ms,
                )
                return list(outcome.tokens)
            logger.warning(
                "discovery tier failed | kind=%s | tier=%s | reason=%s | %dms",
                kind, outcome.tier, outcome.reason, outcome.elapsed_ms,
            )

        logger.warning("all discovery upstreams failed | kind=%s | tier=%s", kind, TIER_STATIC)
        return static_tokens(kind, image_base_url=self.image_base_url, now=now)

    async def try_primary(self, kind: FeedKind, now: datetime) -> TierOutcome:
        def normalize(records: list[dict[str, Any]]) -> list[Optional[TokenSummary]]:
            return [
                from_pumpfun(record, kind, image_base_url=self.image_base_url, now=now)
                for record in records
            ]

        return await self._attempt(
            TIER_PRIMARY,
            lambda: self.primary.fetch_feed(kind),
            self.primary_timeout,
            normalize,
        )

    async def try_secondary(self, kind: FeedKind, now: datetime) -> TierOutcome:
        def normalize(rows: list[dict[str, Any]]) -> list[Optional[TokenSummary]]:
            return [
                from_bitquery(row, kind, policy=self.policy, image_base_url=self.image_base_url, now=now)
                for row in rows
            ]

        return await self._attempt(
            TIER_SECONDARY,
            lambda: self.secondary.fetch_trades(kind, now),
            self.secondary_timeout,
            normalize,
        )

    async def _attempt(
        self,
        tier: str,
        call: Callable[[], Awaitable[list[dict[str, Any]]]],
        timeout: float,
        normalize: Callable[[list[dict[str, Any]]], list[Optional[TokenSummary]]],
    ) -> TierOutcome:
        t0 = time.perf_counter()

        def elapsed() -> int:
            return int((time.perf_counter() - t0) * 1000)

        try:
            raw = await asyncio.wait_for(call(), timeout=timeout)
            tokens = unique_by_id(normalize(raw))
        except asyncio.TimeoutError:
            return TierOutcome.failure(tier, f"timeout after {timeout}s", elapsed())
        except (UpstreamUnavailable, MalformedUpstreamPayload) as e:
            return TierOutcome.failure(tier, str(e), elapsed())
        except Exception as e:
            logger.exception("discovery tier crashed | tier=%s", tier)
            return TierOutcome.failure(tier, repr(e)[:300], elapsed())

        if not tokens:
            return TierOutcome.failure(tier, "no usable tokens", elapsed())
        return TierOutcome.success(tier, tokens, elapsed())
