"""
Tests for the JSON-RPC chain client against an in-process httpx transport.
"""
import json

import httpx
import pytest

from agents.sentinel.services.chain import ChainClient, RpcError

RPC_URL = "http://rpc.test/ext/bc/C/rpc"


def make_client(handler) -> ChainClient:
    return ChainClient(rpc_url=RPC_URL, timeout=5, transport=httpx.MockTransport(handler))


def rpc_result(result):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})
    return handler


@pytest.mark.asyncio
async def test_call_sends_jsonrpc_envelope():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x2a"})

    client = make_client(handler)
    assert await client.latest_block_id() == "0x2a"
    await client.aclose()

    assert seen == [{"jsonrpc": "2.0", "id": 1, "method": "eth_blockNumber", "params": []}]


@pytest.mark.asyncio
async def test_block_by_id_requests_full_transactions():
    seen = []
    block = {
        "number": "0x10",
        "hash": "0xblock",
        "timestamp": "0x5",
        "transactions": [
            {"hash": "0x1", "from": "0xa", "to": "0xb", "value": "0x64", "gasPrice": "0x5", "nonce": "0x0"},
            {"hash": "0x2", "from": "0xa", "to": None, "value": "0x0", "gasPrice": "0x5"},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": block})

    client = make_client(handler)
    result = await client.block_by_id("0x10")
    await client.aclose()

    assert seen[0]["method"] == "eth_getBlockByNumber"
    assert seen[0]["params"] == ["0x10", True]
    assert result.height == 16
    assert [tx.hash for tx in result.transactions] == ["0x1", "0x2"]
    assert result.transactions[0].value_wei == 100
    assert result.transactions[1].to_address is None


@pytest.mark.asyncio
async def test_missing_block_returns_none():
    client = make_client(rpc_result(None))
    assert await client.block_by_id("0xffffff") is None
    await client.aclose()


@pytest.mark.asyncio
async def test_receipt_by_hash():
    client = make_client(rpc_result({"status": "0x1", "gasUsed": "0x5208", "logs": []}))
    receipt = await client.receipt_by_hash("0x1")
    await client.aclose()

    assert receipt.succeeded
    assert receipt.gas_used_int == 21000


@pytest.mark.asyncio
async def test_jsonrpc_error_object_raises():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "rate limited"}})

    client = make_client(handler)
    with pytest.raises(RpcError) as exc:
        await client.receipt_by_hash("0x1")
    await client.aclose()

    assert exc.value.method == "eth_getTransactionReceipt"
    assert "rate limited" in str(exc.value)


@pytest.mark.asyncio
async def test_http_status_error_raises():
    client = make_client(lambda request: httpx.Response(503, text="unavailable"))
    with pytest.raises(RpcError, match="HTTP 503"):
        await client.latest_block_id()
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(RpcError, match="connection refused"):
        await client.latest_block_id()
    await client.aclose()


@pytest.mark.asyncio
async def test_non_json_body_raises():
    client = make_client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    with pytest.raises(RpcError, match="invalid JSON"):
        await client.latest_block_id()
    await client.aclose()


@pytest.mark.asyncio
async def test_unexpected_block_shape_raises():
    # hashes only, as returned when full transactions are not requested
    client = make_client(rpc_result({"number": "0x10", "transactions": ["0x1", "0x2"]}))
    with pytest.raises(RpcError, match="unexpected block shape"):
        await client.block_by_id("0x10")
    await client.aclose()
