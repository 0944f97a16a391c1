"""Creek adapter: resolves amounts and composes the transaction for an action."""
from __future__ import annotations

import logging

from ...config import AppConfig
from ...interfaces.chain import ChainClient
from ...models import AmountConfig, AssetType, PreparedAction
from ...services.amount import AmountResolver
from ...wallet import short_address
from .actions import ActionKind, ActionSpec
from .composer import CreekComposer

logger = logging.getLogger(__name__)


def format_amount(amount: int, asset: AssetType) -> str:
    return f"{asset.to_tokens(amount).normalize():f} {asset.symbol}"


class CreekAdapter:
    """Prepare Creek actions for one wallet at a time."""

    def __init__(self, chain_client: ChainClient, config: AppConfig) -> None:
        self._config = config
        self._protocol = config.protocol
        self._resolver = AmountResolver(
            chain_client,
            native_coin_type=config.protocol.native_coin_type,
            gas_reserve=config.protocol.gas_reserve,
        )
        self._composer = CreekComposer(chain_client, config.protocol)

    @property
    def protocol_name(self) -> str:
        return "creek"

    async def prepare(
        self, address: str, spec: ActionSpec, amount_config: AmountConfig | None
    ) -> PreparedAction:
        """Resolve the amount and compose the transaction, or report a skip."""
        if spec.kind is ActionKind.FAUCET:
            return PreparedAction(transaction=self._composer.faucet(address))
        if spec.kind is ActionKind.CONNECT:
            raise ValueError("Connect API is not an on-chain action")

        if amount_config is None:
            amount_config = self._config.amount_config(spec.key)

        assets = [self._protocol.asset(s) for s in spec.assets]
        asset = assets[0]
        warnings: tuple[str, ...] = ()

        if spec.kind is ActionKind.REDEEM:
            amount = await self._resolver.resolve_paired(
                address, assets[0], assets[1], amount_config
            )
            if amount == 0:
                return PreparedAction(skip_reason="no GR/GY pairs or 0 amount.")
        elif spec.kind in (ActionKind.BORROW, ActionKind.WITHDRAW):
            amount, warning = self._resolver.resolve_without_balance(
                asset, amount_config, self._config.default_amount(spec.key)
            )
            if warning:
                warnings = (warning,)
            if amount == 0:
                return PreparedAction(skip_reason="0 amount.", warnings=warnings)
        else:
            amount = await self._resolver.resolve(address, asset, amount_config)
            if amount == 0:
                return PreparedAction(skip_reason="0 balance or amount.")

        logger.info(
            "[%s] %s: %s", short_address(address), spec.name, format_amount(amount, asset)
        )
        transaction = await self._compose(address, spec, asset, amount)
        return PreparedAction(transaction=transaction, amount=amount, warnings=warnings)

    async def _compose(self, address: str, spec: ActionSpec, asset: AssetType, amount: int):
        composer = self._composer
        if spec.kind is ActionKind.SWAP:
            return await composer.swap_usdc_to_gusd(address, amount)
        if spec.kind is ActionKind.STAKE:
            return await composer.stake_xaum(address, amount)
        if spec.kind is ActionKind.REDEEM:
            return await composer.redeem_xaum(address, amount)
        if spec.kind is ActionKind.DEPOSIT:
            return await composer.deposit(address, asset, amount)
        if spec.kind is ActionKind.BORROW:
            return await composer.borrow_gusd(address, amount)
        if spec.kind is ActionKind.REPAY:
            return await composer.repay_gusd(address, amount)
        if spec.kind is ActionKind.WITHDRAW:
            return await composer.withdraw(address, asset, amount)
        raise ValueError(f"No composer for action kind {spec.kind!r}")
