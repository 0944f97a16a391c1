"""SUI chain support: RPC client, transaction builder, executor."""
from .client import SuiClient
from .executor import SuiCliExecutor
from .transaction import ComposedTransaction, TransactionBuilder

__all__ = ["ComposedTransaction", "SuiClient", "SuiCliExecutor", "TransactionBuilder"]
