"""
Per-tier mapping of raw upstream records into TokenSummary.

Each tier owns a mapping table (output field -> source keys + default) plus a
small amount of derived logic. Nothing here performs I/O.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from launchpad.schemas.tokens import TokenSummary
from launchpad.services.errors import MalformedUpstreamPayload
from launchpad.utils.time import iso_z, utcnow

DEFAULT_IMAGE_BASE_URL = "https://pump.fun/token-images/"

UNKNOWN_NAME = "Unknown Token"
UNKNOWN_SYMBOL = "UNKNOWN"
BASE_TAG = "meme"


def image_url(token_id: str, base_url: str = DEFAULT_IMAGE_BASE_URL) -> str:
    return f"{base_url}{token_id}.png"


@dataclass(frozen=True)
class DiscoveryPolicy:
    """
    Heuristics applied to secondary-tier rows, which carry a price but no
    market cap, volume or social figures.
    """

    assumed_supply: int = 1_000_000_000
    volume_ratio: float = 0.15
    hot_market_cap: float = 3_000_000
    hot_price_usd: float = 0.0003
    reply_count_min: int = 5
    reply_count_max: int = 104
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def market_cap(self, price: float) -> float:
        return price * self.assumed_supply

    def volume_24h(self, market_cap: float) -> float:
        return market_cap * self.volume_ratio

    def is_hot(self, market_cap: float, price_usd: float) -> bool:
        return market_cap > self.hot_market_cap or price_usd > self.hot_price_usd

    def reply_count(self) -> int:
        return self.rng.randint(self.reply_count_min, self.reply_count_max)


# ----------------------------
# value coercion
# ----------------------------
def _first(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _number(value: Any) -> float:
    """Non-negative finite float; anything unusable counts as unknown (0)."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def _count(value: Any) -> int:
    return int(_number(value))


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


EPOCH_MS_THRESHOLD = 10_000_000_000  # larger epoch values are milliseconds


def _timestamp(value: Any, now: datetime) -> str:
    """ISO-8601 (Z) for a datetime, epoch number or ISO string; ``now`` when unparsable."""
    if isinstance(value, datetime):
        return iso_z(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if abs(value) >= EPOCH_MS_THRESHOLD else value
        try:
            return iso_z(datetime.fromtimestamp(seconds, tz=timezone.utc))
        except (OverflowError, OSError, ValueError):
            return iso_z(now)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return iso_z(datetime.fromisoformat(text))
        except ValueError:
            return iso_z(now)
    return iso_z(now)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    if isinstance(value, (int, float)):
        return value != 0
    return value is True


def _tags(*groups: Iterable[str]) -> list[str]:
    out: list[str] = []
    for group in groups:
        for tag in group:
            if tag and tag not in out:
                out.append(tag)
    return out


# ----------------------------
# primary tier: pump.fun
# ----------------------------
# output field -> (source keys, kind of value)
PUMPFUN_FIELDS: dict[str, tuple[tuple[str, ...], str]] = {
    "id": (("id", "address"), "text"),
    "name": (("name",), "text"),
    "symbol": (("symbol",), "text"),
    "market_cap": (("market_cap",), "number"),
    "price": (("price",), "number"),
    "volume_24h": (("volume_24h",), "number"),
    "last_activity_time": (("last_buy_time",), "timestamp"),
    "reply_count": (("reply_count",), "count"),
}


def from_pumpfun(
    record: Mapping[str, Any],
    kind: str,
    *,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    now: Optional[datetime] = None,
) -> Optional[TokenSummary]:
    """Map one pump.fun token object; returns None when it carries no identifier."""
    if not isinstance(record, Mapping):
        raise MalformedUpstreamPayload("pump.fun", f"token entry is {type(record).__name__}, not an object")

    now = now or utcnow()
    raw = {name: _first(record, keys) for name, (keys, _) in PUMPFUN_FIELDS.items()}

    token_id = _text(raw["id"], "")
    if not token_id:
        return None

    is_new = kind == "new" or _flag(record.get("is_new"))
    upstream_tags = record.get("tags") if isinstance(record.get("tags"), list) else []

    return _build(
        id=token_id,
        name=_text(raw["name"], UNKNOWN_NAME),
        symbol=_text(raw["symbol"], UNKNOWN_SYMBOL),
        market_cap=_number(raw["market_cap"]),
        price=_number(raw["price"]),
        volume_24h=_number(raw["volume_24h"]),
        last_activity_time=_timestamp(raw["last_activity_time"], now),
        reply_count=_count(raw["reply_count"]),
        tags=_tags([BASE_TAG], [str(t) for t in upstream_tags], ["new"] if is_new else []),
        is_new=is_new,
        image_url=image_url(token_id, image_base_url),
        upstream="pump.fun",
    )


# ----------------------------
# secondary tier: bitquery DEX trades
# ----------------------------
def _path(record: Any, *keys: str) -> Any:
    node = record
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def from_bitquery(
    row: Mapping[str, Any],
    kind: str,
    *,
    policy: DiscoveryPolicy,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
    now: Optional[datetime] = None,
) -> Optional[TokenSummary]:
    """Map one DEXTrades row; returns None when the bought currency has no mint address."""
    buy = _path(row, "Trade", "Buy")
    currency = _path(buy, "Currency")
    if not isinstance(currency, Mapping):
        raise MalformedUpstreamPayload("bitquery", "row without Trade.Buy.Currency")

    now = now or utcnow()
    token_id = _text(currency.get("MintAddress"), "")
    if not token_id:
        return None

    price = _number(buy.get("Price"))
    price_usd = _number(buy.get("PriceInUSD"))
    market_cap = policy.market_cap(price)
    hot = policy.is_hot(market_cap, price_usd)
    # Block sits beside Trade in the query result; older payloads nest it
    block_time = _path(row, "Block", "Time") or _path(row, "Trade", "Block", "Time")

    return _build(
        id=token_id,
        name=_text(currency.get("Name"), UNKNOWN_NAME),
        symbol=_text(currency.get("Symbol"), UNKNOWN_SYMBOL),
        market_cap=market_cap,
        price=price,
        volume_24h=policy.volume_24h(market_cap),
        last_activity_time=_timestamp(block_time, now),
        reply_count=policy.reply_count(),
        tags=_tags([BASE_TAG], ["new"] if kind == "new" else [], ["hot"] if hot else []),
        is_new=kind == "new",
        image_url=image_url(token_id, image_base_url),
        upstream="bitquery",
    )


def _build(*, upstream: str, **fields: Any) -> TokenSummary:
    try:
        return TokenSummary(**fields)
    except ValidationError as exc:
        raise MalformedUpstreamPayload(upstream, str(exc).splitlines()[0]) from exc


def unique_by_id(tokens: Iterable[Optional[TokenSummary]]) -> list[TokenSummary]:
    """Drop missing entries and repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[TokenSummary] = []
    for token in tokens:
        if token is None or token.id in seen:
            continue
        seen.add(token.id)
        out.append(token)
    return out
