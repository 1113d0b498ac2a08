from __future__ import annotations

import pytest

from launchpad.config.settings import DEVNET_RPC_URL, Settings, parse_bool, parse_csv, parse_float


def test_defaults(monkeypatch):
    for key in (
        "PUMPFUN_API_URL",
        "PUMPFUN_TIMEOUT_SECONDS",
        "BITQUERY_TIMEOUT_SECONDS",
        "SOLANA_RPC_URL",
        "ADMIN_WALLET_ADDRESS",
        "FRONTEND_URL",
        "APP_ENV",
    ):
        monkeypatch.delenv(key, raising=False)

    s = Settings.from_env()

    assert s.PUMPFUN_API_URL == "https://api.pump.fun"
    assert s.PUMPFUN_TIMEOUT_SECONDS == 5.0
    assert s.BITQUERY_TIMEOUT_SECONDS == 10.0
    assert s.SOLANA_RPC_URL == DEVNET_RPC_URL
    assert s.ADMIN_WALLET_ADDRESS is None
    assert s.FRONTEND_URLS == ("http://localhost:5173",)
    assert s.debug_errors is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PUMPFUN_API_URL", "https://pump.example/")
    monkeypatch.setenv("PUMPFUN_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("ADMIN_WALLET_ADDRESS", "  ")
    monkeypatch.setenv("FRONTEND_URL", "https://a.example, https://b.example")
    monkeypatch.setenv("APP_ENV", "Development")
    monkeypatch.setenv("LOG_JSON", "yes")

    s = Settings.from_env()

    assert s.PUMPFUN_API_URL == "https://pump.example"
    assert s.PUMPFUN_TIMEOUT_SECONDS == 2.5
    assert s.ADMIN_WALLET_ADDRESS is None
    assert s.FRONTEND_URLS == ("https://a.example", "https://b.example")
    assert s.debug_errors is True
    assert s.LOG_JSON is True


def test_parsers():
    assert parse_bool(None, True) is True
    assert parse_bool("off", True) is False
    assert parse_csv("", ["x"]) == ["x"]
    assert parse_float(" ", 1.5) == 1.5
    with pytest.raises(ValueError):
        parse_float("soon", 1.0)
