from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from launchpad.services.bitquery import BitqueryClient, build_query, extract_trades
from launchpad.services.errors import MalformedUpstreamPayload, UpstreamUnavailable
from launchpad.services.pumpfun import PumpFunClient

NOW = datetime(2024, 3, 8, 0, 0, tzinfo=timezone.utc)


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_pumpfun_hits_kind_endpoint_and_returns_tokens():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.headers.get("accept")))
        return httpx.Response(200, json={"tokens": [{"id": "A"}]})

    client = PumpFunClient("https://pump.test/", transport=_transport(handler))

    assert await client.fetch_feed("new") == [{"id": "A"}]
    assert await client.fetch_feed("trending") == [{"id": "A"}]
    assert seen == [("GET", "/new", "application/json"), ("GET", "/trending", "application/json")]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"items": []}),
        httpx.Response(200, json={"tokens": {"id": "A"}}),
        httpx.Response(200, json=[{"id": "A"}]),
        httpx.Response(200, text="<html>maintenance</html>"),
    ],
)
async def test_pumpfun_shape_check(response):
    client = PumpFunClient("https://pump.test", transport=_transport(lambda request: response))
    with pytest.raises(MalformedUpstreamPayload):
        await client.fetch_feed("trending")


@pytest.mark.asyncio
async def test_pumpfun_non_2xx_is_unavailable():
    client = PumpFunClient("https://pump.test", transport=_transport(lambda request: httpx.Response(503)))
    with pytest.raises(UpstreamUnavailable) as info:
        await client.fetch_feed("trending")
    assert "503" in info.value.reason


@pytest.mark.asyncio
async def test_pumpfun_network_errors_are_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = PumpFunClient("https://pump.test", transport=_transport(handler))
    with pytest.raises(UpstreamUnavailable):
        await client.fetch_feed("new")


@pytest.mark.asyncio
async def test_pumpfun_timeout_is_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client = PumpFunClient("https://pump.test", timeout=0.01, transport=_transport(handler))
    with pytest.raises(UpstreamUnavailable) as info:
        await client.fetch_feed("new")
    assert "timeout" in info.value.reason


def _strip_variable_parts(query: str) -> str:
    return (
        query.replace("Block_Time }", "<ORDER> }")
        .replace("Trade_Buy_Price }", "<ORDER> }")
        .split('since: "')[0]
    )


def test_build_query_differs_only_in_order_and_lookback():
    new_q = build_query("new", NOW)
    trending_q = build_query("trending", NOW)

    assert "orderBy: { descending: Block_Time }" in new_q
    assert "orderBy: { descending: Trade_Buy_Price }" in trending_q
    assert 'since: "2024-03-07T00:00:00.000Z"' in new_q
    assert 'since: "2024-03-01T00:00:00.000Z"' in trending_q

    assert _strip_variable_parts(new_q) == _strip_variable_parts(trending_q)
    assert new_q.split('since: "')[1].split('"', 1)[1] == trending_q.split('since: "')[1].split('"', 1)[1]


def test_build_query_filters():
    q = build_query("new", NOW, chain="Solana")
    assert q.lstrip("{ \n").startswith("Solana")
    assert 'ProtocolName: { is: "pump" }' in q
    assert '"11111111111111111111111111111111"' in q
    assert "limit: { count: 10 }" in q


@pytest.mark.asyncio
async def test_bitquery_posts_query_with_api_key():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["key"] = request.headers.get("x-api-key")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"Solana": {"DEXTrades": [{"Trade": {}}]}}})

    client = BitqueryClient("https://bq.test/graphql", api_key="secret", transport=_transport(handler))
    rows = await client.fetch_trades("trending", NOW)

    assert rows == [{"Trade": {}}]
    assert captured["method"] == "POST"
    assert captured["key"] == "secret"
    assert captured["body"]["query"] == build_query("trending", NOW)


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {},
        {"data": None, "errors": [{"message": "quota exceeded"}]},
        {"data": {"Ethereum": {}}},
        {"data": {"Solana": {"DEXTrades": None}}},
        {"data": {"Solana": {"DEXTrades": {"Trade": {}}}}},
    ],
)
def test_extract_trades_shape_check(payload):
    with pytest.raises(MalformedUpstreamPayload):
        extract_trades(payload, "Solana")


@pytest.mark.asyncio
async def test_bitquery_non_2xx_is_unavailable():
    client = BitqueryClient("https://bq.test", transport=_transport(lambda request: httpx.Response(401)))
    with pytest.raises(UpstreamUnavailable):
        await client.fetch_trades("new", NOW)
