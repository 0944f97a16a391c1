"""Protocol interfaces for the Creek bot."""
from .chain import ChainClient
from .executor import TransactionExecutor
from .registration import RegistrationApi

__all__ = ["ChainClient", "RegistrationApi", "TransactionExecutor"]
