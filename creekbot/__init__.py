"""Multi-wallet automation for the Creek protocol on Sui testnet."""

__version__ = "0.1.0"
