"""Chain client protocol: blockchain RPC abstraction."""
from typing import Any, Protocol


class ChainClient(Protocol):
    """Abstract interface for ledger reads."""

    async def get_balance(self, wallet_address: str, coin_type: str) -> int: ...

    async def get_coins(
        self, wallet_address: str, coin_type: str
    ) -> list[dict[str, Any]]: ...

    async def get_owned_objects(
        self, wallet_address: str, struct_type: str | None = None
    ) -> list[dict[str, Any]]: ...
