"""Creek lending/staking protocol on Sui."""
from .adapter import CreekAdapter
from .api import CreekApiClient

__all__ = ["CreekAdapter", "CreekApiClient"]
