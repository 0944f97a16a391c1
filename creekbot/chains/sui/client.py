"""SUI RPC client with fallback support."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import ChainConfig
from ...errors import ExternalCallFailure

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class SuiClient:
    """SUI blockchain RPC client with automatic endpoint fallback.

    Reads fail over to the next endpoint. Submissions go to the current
    endpoint only, so a transaction is never sent twice.
    """

    def __init__(self, config: ChainConfig) -> None:
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0

    async def rpc_call(
        self, method: str, params: list[Any], fallback: bool = True
    ) -> Any:
        """Make RPC call with fallback to alternative endpoints."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        attempts = len(self.endpoints) if fallback else 1
        last_error: Exception | None = None
        for attempt in range(attempts):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        result = await response.json()
                        if "error" in result:
                            raise RuntimeError(f"RPC Error: {result['error']}")

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result.get("result", {})
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < attempts - 1:
                    logger.info("Trying next endpoint...")
                continue

        if not fallback:
            raise RuntimeError(f"RPC call {method} failed: {last_error}")
        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    async def _read(self, method: str, params: list[Any]) -> Any:
        try:
            return await self.rpc_call(method, params)
        except RuntimeError as e:
            raise ExternalCallFailure(f"{method} failed", detail=str(e)) from e

    async def get_balance(self, wallet_address: str, coin_type: str) -> int:
        """Total balance of one coin type, in base units."""
        result = await self._read("suix_getBalance", [wallet_address, coin_type])
        return int(result.get("totalBalance", 0))

    async def get_coins(
        self, wallet_address: str, coin_type: str
    ) -> list[dict[str, Any]]:
        """Get every coin object of a type owned by the wallet (paginated)."""
        all_coins: list[dict[str, Any]] = []
        cursor = None

        while True:
            result = await self._read(
                "suix_getCoins", [wallet_address, coin_type, cursor, PAGE_SIZE]
            )
            all_coins.extend(result.get("data", []))

            cursor = result.get("nextCursor")
            if not result.get("hasNextPage", False) or not cursor:
                break

        return all_coins

    async def get_owned_objects(
        self, wallet_address: str, struct_type: str | None = None
    ) -> list[dict[str, Any]]:
        """Get objects owned by the wallet, optionally of one struct type."""
        all_objects: list[dict[str, Any]] = []
        cursor = None
        query_filter = {"StructType": struct_type} if struct_type else None

        while True:
            result = await self._read(
                "suix_getOwnedObjects",
                [
                    wallet_address,
                    {
                        "filter": query_filter,
                        "options": {
                            "showType": True,
                            "showContent": True,
                            "showOwner": True,
                        },
                    },
                    cursor,
                    PAGE_SIZE,
                ],
            )

            all_objects.extend(result.get("data", []))

            cursor = result.get("nextCursor")
            if not result.get("hasNextPage", False) or not cursor:
                break

        return all_objects

    async def execute_transaction_block(
        self, tx_bytes: str, signatures: list[str]
    ) -> dict[str, Any]:
        """Submit signed transaction bytes and wait for local execution."""
        return await self.rpc_call(
            "sui_executeTransactionBlock",
            [
                tx_bytes,
                signatures,
                {"showEffects": True},
                "WaitForLocalExecution",
            ],
            fallback=False,
        )
