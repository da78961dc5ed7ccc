import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import aiohttp

from gaslens.core.exceptions import SourceUnavailableError, MalformedDataError
from gaslens.models.fee_models import BARE_TRANSFER_PAYLOAD, ChainBlock, ChainTransaction
from gaslens.utils.helpers import decode_quantity, decode_optional_quantity, encode_quantity

logger = logging.getLogger("gaslens.interfaces.blockchain")


class ChainDataSource(ABC):
    """Read-only view of a chain used by the estimator"""

    @abstractmethod
    async def get_block_number(self) -> int:
        """Get current chain height"""
        pass

    @abstractmethod
    async def get_block_with_transactions(self, number: int) -> Optional[ChainBlock]:
        """Get a block with full transaction objects, or None if it does not exist"""
        pass

    @abstractmethod
    async def get_gas_price(self) -> int:
        """Get the node's current base gas price"""
        pass


class JsonRpcChainSource(ChainDataSource):
    """Chain data source backed by an Ethereum-compatible JSON-RPC endpoint"""

    def __init__(self, rpc_url: str, timeout: int = 30,
                 session: Optional[aiohttp.ClientSession] = None,
                 network: Optional[str] = None):
        self.rpc_url = rpc_url
        self.network = network
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session
        self._owns_session = session is None
        self._ids = itertools.count(1)

    async def __aenter__(self) -> 'JsonRpcChainSource':
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={'Content-Type': 'application/json', 'User-Agent': 'GasLens/1.0'}
            )
            self._owns_session = True
        return self.session

    async def close(self):
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()

    async def get_block_number(self) -> int:
        result = await self._call("eth_blockNumber")
        return decode_quantity(result, "block number")

    async def get_block_with_transactions(self, number: int) -> Optional[ChainBlock]:
        result = await self._call("eth_getBlockByNumber", [encode_quantity(number), True])
        if result is None:
            return None
        return self._parse_block(result, number)

    async def get_gas_price(self) -> int:
        result = await self._call("eth_gasPrice")
        return decode_quantity(result, "gas price")

    async def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        payload = {
            'jsonrpc': '2.0',
            'id': next(self._ids),
            'method': method,
            'params': params or []
        }
        session = self._ensure_session()

        try:
            async with session.post(self.rpc_url, json=payload, timeout=self.timeout) as response:
                if response.status != 200:
                    raise SourceUnavailableError(
                        f"{method} to {self.rpc_url} returned HTTP {response.status}"
                    )
                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedDataError(f"{method} returned a non-JSON body: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SourceUnavailableError(
                f"{method} to {self.rpc_url} failed: {e.__class__.__name__}: {e}"
            ) from e

        return self._unwrap(method, body)

    def _unwrap(self, method: str, body: Any) -> Any:
        if not isinstance(body, dict):
            raise MalformedDataError(f"{method} returned {type(body).__name__}, expected object")

        error = body.get('error')
        if error is not None:
            if isinstance(error, dict):
                raise SourceUnavailableError(
                    f"{method} failed with RPC error {error.get('code')}: {error.get('message')}"
                )
            raise SourceUnavailableError(f"{method} failed with RPC error: {error}")

        if 'result' not in body:
            raise MalformedDataError(f"{method} reply has neither result nor error")
        return body['result']

    def _parse_block(self, data: Any, requested: int) -> ChainBlock:
        if not isinstance(data, dict):
            raise MalformedDataError(f"Block {requested} is {type(data).__name__}, expected object")

        if 'transactions' not in data:
            raise MalformedDataError(f"Block {requested} has no transactions field")
        transactions = data['transactions']
        if not isinstance(transactions, list):
            raise MalformedDataError(f"Block {requested} has invalid transactions field")

        return ChainBlock(
            number=decode_quantity(data.get('number', requested), "block number"),
            timestamp=decode_quantity(data.get('timestamp'), "block timestamp"),
            transactions=tuple(self._parse_transaction(tx, requested) for tx in transactions)
        )

    def _parse_transaction(self, tx: Any, block_number: int) -> ChainTransaction:
        if not isinstance(tx, dict):
            # Hash-only transaction lists mean the node ignored the full-objects flag
            raise MalformedDataError(
                f"Block {block_number} contains a transaction that is not an object: {tx!r}"
            )

        payload = tx.get('input', tx.get('data'))
        if payload is None or payload == "":
            payload = BARE_TRANSFER_PAYLOAD
        elif not isinstance(payload, str):
            raise MalformedDataError(f"Transaction in block {block_number} has invalid input")

        return ChainTransaction(
            gas_price=decode_optional_quantity(tx.get('gasPrice'), "gas price"),
            payload=payload,
            tx_hash=tx.get('hash')
        )
