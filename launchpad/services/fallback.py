"""Built-in token lists served when every discovery upstream fails."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from launchpad.schemas.tokens import TokenSummary
from launchpad.services.normalize import DEFAULT_IMAGE_BASE_URL, image_url
from launchpad.utils.time import iso_ago, utcnow

# (id, name, symbol, market_cap, price, volume_24h, seconds since last buy, replies, tags)
STATIC_TRENDING: tuple[tuple[Any, ...], ...] = (
    ("sol123456789", "Solana Doge", "SOLDOGE", 2_500_000, 0.00025, 350_000, 120, 42, ("meme", "trending")),
    ("sol987654321", "Pepe Sol", "PEPESOL", 4_200_000, 0.00042, 610_000, 45, 87, ("meme", "trending", "hot")),
    ("sol555666777", "Bonk Jr", "BONKJR", 1_100_000, 0.00011, 140_000, 300, 19, ("meme", "trending")),
)

STATIC_NEW: tuple[tuple[Any, ...], ...] = (
    ("sol111222333", "Fresh Mint", "FRMT", 850_000, 0.000085, 120_000, 30, 12, ("meme", "new")),
    ("sol444555666", "Moon Cat", "MCAT", 310_000, 0.000031, 42_000, 75, 6, ("meme", "new")),
    ("sol777888999", "Rocket Frog", "RFROG", 95_000, 0.0000095, 11_000, 160, 5, ("meme", "new")),
)


def _rows(kind: str) -> tuple[tuple[Any, ...], ...]:
    return STATIC_NEW if kind == "new" else STATIC_TRENDING


def static_tokens(
    kind: str,
    *,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    now: Optional[datetime] = None,
) -> list[TokenSummary]:
    now = now or utcnow()
    return [
        TokenSummary(
            id=token_id,
            name=name,
            symbol=symbol,
            market_cap=market_cap,
            price=price,
            volume_24h=volume,
            last_activity_time=iso_ago(now, seconds=age_s),
            reply_count=replies,
            tags=list(tags),
            is_new=kind == "new",
            image_url=image_url(token_id, image_base_url),
        )
        for token_id, name, symbol, market_cap, price, volume, age_s, replies, tags in _rows(kind)
    ]
