# launchpad/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


DEVNET_RPC_URL = "https://api.devnet.solana.com"


def parse_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return default
    items = [x.strip() for x in value.split(",")]
    return [x for x in items if x]


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def parse_optional(value: str | None) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    # discovery upstreams
    PUMPFUN_API_URL: str = "https://api.pump.fun"
    PUMPFUN_TIMEOUT_SECONDS: float = 5.0
    BITQUERY_API_URL: str = "https://graphql.bitquery.io"
    BITQUERY_API_KEY: str = ""
    BITQUERY_TIMEOUT_SECONDS: float = 10.0
    BITQUERY_CHAIN: str = "Solana"
    TOKEN_IMAGE_BASE_URL: str = "https://pump.fun/token-images/"

    # solana
    SOLANA_RPC_URL: str = DEVNET_RPC_URL
    SOLANA_NETWORK: str = "devnet"
    ADMIN_WALLET_ADDRESS: Optional[str] = None

    # http surface
    FRONTEND_URLS: tuple[str, ...] = ("http://localhost:5173",)
    APP_ENV: str = "production"

    # logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def debug_errors(self) -> bool:
        """Failure payloads carry internal error text only in development."""
        return self.APP_ENV.strip().lower() == "development"

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            PUMPFUN_API_URL=os.getenv("PUMPFUN_API_URL", "https://api.pump.fun").rstrip("/"),
            PUMPFUN_TIMEOUT_SECONDS=parse_float(os.getenv("PUMPFUN_TIMEOUT_SECONDS"), 5.0),
            BITQUERY_API_URL=os.getenv("BITQUERY_API_URL", "https://graphql.bitquery.io"),
            BITQUERY_API_KEY=os.getenv("BITQUERY_API_KEY", ""),
            BITQUERY_TIMEOUT_SECONDS=parse_float(os.getenv("BITQUERY_TIMEOUT_SECONDS"), 10.0),
            BITQUERY_CHAIN=os.getenv("BITQUERY_CHAIN", "Solana"),
            TOKEN_IMAGE_BASE_URL=os.getenv("TOKEN_IMAGE_BASE_URL", "https://pump.fun/token-images/"),
            SOLANA_RPC_URL=os.getenv("SOLANA_RPC_URL") or DEVNET_RPC_URL,
            SOLANA_NETWORK=os.getenv("SOLANA_NETWORK", "devnet"),
            ADMIN_WALLET_ADDRESS=parse_optional(os.getenv("ADMIN_WALLET_ADDRESS")),
            FRONTEND_URLS=tuple(parse_csv(os.getenv("FRONTEND_URL"), ["http://localhost:5173"])),
            APP_ENV=os.getenv("APP_ENV", "production"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
            LOG_JSON=parse_bool(os.getenv("LOG_JSON"), False),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
