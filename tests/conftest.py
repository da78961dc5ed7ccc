"""
Shared fixtures for GasLens tests.
"""

import asyncio
from typing import Dict, Iterable, List, Optional

import pytest
from aiohttp import web

from gaslens.core.exceptions import SourceUnavailableError
from gaslens.interfaces.blockchain import ChainDataSource
from gaslens.models.fee_models import ChainBlock, ChainTransaction

CONTRACT_PAYLOAD = "0xa9059cbb000000000000000000000000"
TRANSFER_SELECTOR = "0xa9059cbb" + "00" * 64


def simple_tx(price: Optional[int]) -> ChainTransaction:
    return ChainTransaction(gas_price=price, payload="0x")


def contract_tx(price: Optional[int]) -> ChainTransaction:
    return ChainTransaction(gas_price=price, payload=CONTRACT_PAYLOAD)


def make_block(number: int, transactions: Iterable[ChainTransaction] = (), timestamp: Optional[int] = None) -> ChainBlock:
    return ChainBlock(
        number=number,
        timestamp=timestamp if timestamp is not None else 1_700_000_000 + number * 30,
        transactions=tuple(transactions)
    )


class FakeChainSource(ChainDataSource):
    """In-memory chain data source with optional failures and delays"""

    def __init__(self, height: int = 100, blocks: Optional[Dict[int, Optional[ChainBlock]]] = None,
                 gas_price: int = 100, failing_blocks: Iterable[int] = (),
                 block_delay: float = 0.0, fail_height: bool = False, fail_gas_price: bool = False):
        self.height = height
        self.blocks = blocks or {}
        self.gas_price = gas_price
        self.failing_blocks = set(failing_blocks)
        self.block_delay = block_delay
        self.fail_height = fail_height
        self.fail_gas_price = fail_gas_price

        self.requested: List[int] = []
        self.completed: List[int] = []
        self.cancelled: List[int] = []
        self.gas_price_calls = 0

    async def get_block_number(self) -> int:
        if self.fail_height:
            raise SourceUnavailableError("connection refused")
        return self.height

    async def get_block_with_transactions(self, number: int) -> Optional[ChainBlock]:
        self.requested.append(number)
        if number in self.failing_blocks:
            raise SourceUnavailableError(f"block {number} timed out")
        try:
            if self.block_delay:
                await asyncio.sleep(self.block_delay)
        except asyncio.CancelledError:
            self.cancelled.append(number)
            raise
        self.completed.append(number)
        if number in self.blocks:
            return self.blocks[number]
        return make_block(number)

    async def get_gas_price(self) -> int:
        self.gas_price_calls += 1
        if self.fail_gas_price:
            raise SourceUnavailableError("eth_gasPrice failed")
        return self.gas_price


def window_source(height: int, block_transactions: List[List[ChainTransaction]], **kwargs) -> FakeChainSource:
    """Source whose newest blocks carry the given transactions, newest first"""
    blocks = {
        height - offset: make_block(height - offset, txs)
        for offset, txs in enumerate(block_transactions)
    }
    return FakeChainSource(height=height, blocks=blocks, **kwargs)


def rpc_block(number, transactions, timestamp=1_700_000_000):
    return {
        "number": hex(number),
        "timestamp": hex(timestamp),
        "hash": "0x" + "ab" * 32,
        "transactions": transactions,
    }


def rpc_tx(gas_price, payload="0x"):
    tx = {"hash": "0x" + "cd" * 32, "input": payload}
    if gas_price is not None:
        tx["gasPrice"] = hex(gas_price)
    return tx


def make_rpc_app(results, raw_replies=None, status=200):
    """JSON-RPC app answering from `results[method]`, a value or a callable taking params"""
    raw_replies = raw_replies or {}
    calls = []

    async def handler(request):
        body = await request.json()
        method = body["method"]
        calls.append((method, body["params"]))

        if status != 200:
            return web.Response(status=status, text="unavailable")
        if method in raw_replies:
            return web.Response(text=raw_replies[method], content_type="application/json")

        result = results[method]
        if callable(result):
            result = result(body["params"])
        return web.json_response({"jsonrpc": "2.0", "id": body["id"], **result})

    app = web.Application()
    app.router.add_post("/", handler)
    app["calls"] = calls
    return app


@pytest.fixture
def empty_source():
    return FakeChainSource(height=1000, gas_price=100)
