"""Error kinds surfaced per (wallet, action)."""
from __future__ import annotations


class CreekBotError(Exception):
    """Base class for every failure an action can report."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InsufficientBalance(CreekBotError):
    def __init__(self, coin_type: str, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient {coin_type} balance. Need {required}, have {available}"
        )
        self.coin_type = coin_type
        self.required = required
        self.available = available


class NoHoldings(CreekBotError):
    def __init__(self, coin_type: str) -> None:
        super().__init__(f"No {coin_type} coins found.")
        self.coin_type = coin_type


class NoPosition(CreekBotError):
    pass


class NoWithdrawTarget(CreekBotError):
    pass


class ExternalCallFailure(CreekBotError):
    """Ledger rejection, RPC failure or registration API failure."""

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail or message


class MalformedKey(CreekBotError):
    pass
