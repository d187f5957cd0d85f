"""
Chain Client — minimal JSON-RPC 2.0 client for the Avalanche C-Chain.

One POST per call, no retry. Every failure surfaces as RpcError so the
monitor can decide whether to skip a transaction or abort the tick.
"""
from typing import Any
import httpx
from pydantic import ValidationError
from shared.config import settings
from agents.sentinel.models.schemas import Block, Receipt
import structlog

logger = structlog.get_logger()

JSONRPC_VERSION = "2.0"
REQUEST_ID = 1


class RpcError(Exception):
    """Transport or protocol failure of a single JSON-RPC call."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method
        self.message = message


class ChainClient:
    def __init__(
        self,
        rpc_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rpc_url = rpc_url or settings.AVALANCHE_RPC_URL
        self._client = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.RPC_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def call(self, method: str, params: list | None = None) -> Any:
        payload = {
            "jsonrpc": JSONRPC_VERSION,
            "id": REQUEST_ID,
            "method": method,
            "params": params or [],
        }
        try:
            resp = await self._client.post(self.rpc_url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("rpc_call_failed", method=method, status=e.response.status_code)
            raise RpcError(method, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("rpc_call_failed", method=method, error=str(e))
            raise RpcError(method, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error("rpc_invalid_json", method=method, error=str(e))
            raise RpcError(method, "invalid JSON response") from e

        if not isinstance(body, dict):
            raise RpcError(method, "unexpected response shape")
        error = body.get("error")
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            logger.error("rpc_error_response", method=method, error=message)
            raise RpcError(method, message)
        return body.get("result")

    async def latest_block_id(self) -> str:
        result = await self.call("eth_blockNumber")
        if result is None:
            raise RpcError("eth_blockNumber", "empty result")
        return str(result)

    async def block_by_id(self, block_id: str) -> Block | None:
        """Full block with transactions, or None if the node has no such block."""
        result = await self.call("eth_getBlockByNumber", [block_id, True])
        if result is None:
            return None
        try:
            return Block.model_validate(result)
        except ValidationError as e:
            raise RpcError("eth_getBlockByNumber", f"unexpected block shape: {e.error_count()} errors") from e

    async def receipt_by_hash(self, tx_hash: str) -> Receipt | None:
        result = await self.call("eth_getTransactionReceipt", [tx_hash])
        if result is None:
            return None
        try:
            return Receipt.model_validate(result)
        except ValidationError as e:
            raise RpcError("eth_getTransactionReceipt", "unexpected receipt shape") from e

    async def aclose(self):
        await self._client.aclose()
