"""Creek off-chain API client (wallet registration)."""
import asyncio
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ...config import ApiConfig
from ...errors import ExternalCallFailure

logger = logging.getLogger(__name__)

CONNECT_ENDPOINT = "/api/user/connect"


class CreekApiClient:
    """Register wallets with the Creek backend."""

    def __init__(self, config: ApiConfig) -> None:
        self.base_url = config.base_url
        self.timeout = config.timeout

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.post(
                    url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status < 200 or response.status >= 300:
                        raise ExternalCallFailure(
                            f"HTTP error {response.status}: {response.reason}"
                        )
                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExternalCallFailure(f"Request to {url} failed", detail=str(e)) from e

        if not data.get("success"):
            raise ExternalCallFailure(
                f"API error ({data.get('code')}): {data.get('msg') or 'Unknown error'}"
            )
        return data

    async def connect(self, wallet_address: str) -> dict[str, Any]:
        """POST the wallet address to the connect endpoint."""
        data = await self._post(CONNECT_ENDPOINT, {"walletAddress": wallet_address})
        logger.debug("Connect API response for %s: %s", wallet_address, data)
        return data
