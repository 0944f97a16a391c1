"""Registration API protocol: off-chain wallet registration."""
from typing import Any, Protocol


class RegistrationApi(Protocol):
    """Abstract interface for the protocol's off-chain user API."""

    async def connect(self, wallet_address: str) -> dict[str, Any]: ...
