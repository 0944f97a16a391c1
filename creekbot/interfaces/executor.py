"""Transaction executor protocol: atomic submission of a composed transaction."""
from typing import Protocol

from ..chains.sui.transaction import ComposedTransaction
from ..models import ExecutionResult
from ..wallet import Wallet


class TransactionExecutor(Protocol):
    """Sign and submit a transaction; all commands take effect or none do."""

    async def execute(
        self, wallet: Wallet, transaction: ComposedTransaction
    ) -> ExecutionResult: ...
