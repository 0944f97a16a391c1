"""Amount policy resolution: turn an AmountConfig into exact base units."""
from __future__ import annotations

import logging
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from ..interfaces.chain import ChainClient
from ..models import AmountConfig, AmountMode, AssetType

logger = logging.getLogger(__name__)


def scale_tokens(tokens: int | float | Decimal, decimals: int) -> int:
    """floor(tokens * 10^decimals), computed exactly."""
    scaled = Decimal(str(tokens)) * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def percent_points(fraction: int | float | Decimal) -> int:
    """floor(fraction * 100): 0.5 -> 50."""
    return int((Decimal(str(fraction)) * 100).to_integral_value(rounding=ROUND_FLOOR))


def percent_of(balance: int, fraction: int | float | Decimal) -> int:
    # Multiply before dividing so large balances keep full precision.
    return balance * percent_points(fraction) // 100


def parse_amount_spec(spec: str, default_amount: int) -> AmountConfig:
    """Parse a CLI amount spec.

    Accepted forms: ``default``, ``custom:<tokens>``, ``percent:<1-100>``
    and ``random`` (a percentage between 20 and 100, picked once).
    """
    text = spec.strip().lower()
    if text == "default":
        return AmountConfig.default(default_amount)
    if text == "random":
        return AmountConfig.random_percent()

    mode, sep, value = text.partition(":")
    if not sep or not value:
        raise ValueError(f"Invalid amount spec '{spec}'")
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Invalid number '{value}' in amount spec") from None
    if not number.is_finite():
        raise ValueError(f"Amount in '{spec}' must be a finite number")

    if mode == AmountMode.CUSTOM.value:
        return AmountConfig.custom(number)
    if mode == AmountMode.PERCENT.value:
        return AmountConfig.percent(float(number / 100))
    raise ValueError(f"Unknown amount mode '{mode}'")


class AmountResolver:
    """Resolve amounts against live balances.

    Balances are read from the chain on every call and never cached, since
    an earlier action in the same batch may have changed them.
    """

    def __init__(self, client: ChainClient, native_coin_type: str, gas_reserve: int) -> None:
        self._client = client
        self._native_coin_type = native_coin_type
        self._gas_reserve = gas_reserve

    async def resolve(self, address: str, asset: AssetType, config: AmountConfig) -> int:
        if config.mode is AmountMode.DEFAULT:
            return int(config.value)

        balance = await self._client.get_balance(address, asset.coin_type)
        logger.debug("%s balance of %s: %d", asset.symbol, address, balance)
        if balance == 0:
            return 0

        if config.mode is AmountMode.CUSTOM:
            return min(scale_tokens(config.value, asset.decimals), balance)

        if config.mode is AmountMode.PERCENT:
            amount = percent_of(balance, config.value)
            if asset.coin_type == self._native_coin_type:
                # Leave enough of the gas coin to pay for the transaction.
                amount = min(amount, balance - self._gas_reserve)
            return max(amount, 0)

        raise ValueError(f"Unsupported amount mode: {config.mode!r}")

    async def resolve_paired(
        self,
        address: str,
        asset_a: AssetType,
        asset_b: AssetType,
        config: AmountConfig,
    ) -> int:
        """Resolve against min(balance_a, balance_b); never exceeds that minimum.

        Used when both assets are spent in equal amounts. No gas reserve.
        """
        balance_a = await self._client.get_balance(address, asset_a.coin_type)
        balance_b = await self._client.get_balance(address, asset_b.coin_type)
        available = min(balance_a, balance_b)
        if available == 0:
            return 0

        if config.mode is AmountMode.DEFAULT:
            amount = int(config.value)
        elif config.mode is AmountMode.CUSTOM:
            amount = scale_tokens(config.value, asset_a.decimals)
        elif config.mode is AmountMode.PERCENT:
            amount = percent_of(available, config.value)
        else:
            raise ValueError(f"Unsupported amount mode: {config.mode!r}")

        return min(amount, available)

    @staticmethod
    def resolve_without_balance(
        asset: AssetType, config: AmountConfig, default_amount: int
    ) -> tuple[int, str]:
        """Resolve for actions whose limit lives in the protocol, not the wallet.

        Percent has no balance to apply to, so the default amount is used and
        a warning is returned alongside it.
        """
        if config.mode is AmountMode.DEFAULT:
            return int(config.value), ""
        if config.mode is AmountMode.CUSTOM:
            return scale_tokens(config.value, asset.decimals), ""
        if config.mode is AmountMode.PERCENT:
            return default_amount, "Percentage not supported, using default."
        raise ValueError(f"Unsupported amount mode: {config.mode!r}")
