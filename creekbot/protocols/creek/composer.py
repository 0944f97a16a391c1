"""Transaction composers, one per Creek action.

Each composer takes an already resolved amount and returns a
``ComposedTransaction``. Composers read the chain (coins, obligation) but
never submit anything.
"""
from __future__ import annotations

import logging

from ...chains.sui.coins import SpendPlan, aggregate, return_remainders
from ...chains.sui.transaction import (
    Argument,
    ComposedTransaction,
    TransactionBuilder,
)
from ...config import ProtocolConfig
from ...errors import NoPosition, NoWithdrawTarget
from ...interfaces.chain import ChainClient
from ...models import AssetType, ObligationRef
from .obligation import lookup_obligation
from .oracle import inject_refresh_all

logger = logging.getLogger(__name__)


class CreekComposer:
    """Build Creek transactions against an injected protocol configuration."""

    def __init__(self, client: ChainClient, config: ProtocolConfig) -> None:
        self._client = client
        self._config = config

    def _target(self, module: str, function: str) -> str:
        return f"{self._config.protocol_pkg_id}::{module}::{function}"

    async def _aggregate(
        self, builder: TransactionBuilder, asset: AssetType, amount: int
    ) -> SpendPlan:
        return await aggregate(builder, self._client, builder.sender, asset.coin_type, amount)

    async def _obligation(self, owner: str) -> ObligationRef | None:
        return await lookup_obligation(self._client, owner, self._config.protocol_pkg_id)

    # ------------------------------------------------------------------
    # Faucet / swap / stake / redeem
    # ------------------------------------------------------------------

    def faucet(self, owner: str) -> ComposedTransaction:
        """Mint the fixed faucet amounts of XAUM and USDC to the owner."""
        cfg = self._config
        builder = TransactionBuilder(owner)

        xaum = cfg.asset("XAUM")
        builder.move_call(
            f"{_package_of(xaum)}::coin_xaum::mint",
            [
                builder.object(cfg.xaum_mint_cap),
                builder.pure(cfg.faucet_amounts.get("XAUM", 0)),
                builder.address(owner),
            ],
        )

        usdc = cfg.asset("USDC")
        builder.move_call(
            f"{_package_of(usdc)}::usdc::mint",
            [
                builder.object(cfg.usdc_treasury),
                builder.pure(cfg.faucet_amounts.get("USDC", 0)),
                builder.address(owner),
            ],
        )
        return builder.build()

    async def swap_usdc_to_gusd(self, owner: str, amount: int) -> ComposedTransaction:
        cfg = self._config
        builder = TransactionBuilder(owner)
        plan = await self._aggregate(builder, cfg.asset("USDC"), amount)

        builder.move_call(
            self._target("gusd_usdc_vault", "mint_gusd"),
            [
                builder.object(cfg.swap_usdc_vault_id),
                builder.object(cfg.lending_market_id),
                plan.spend_unit,
                builder.object(cfg.clock_id),
            ],
        )
        return_remainders(builder, [plan], owner)
        return builder.build()

    async def stake_xaum(self, owner: str, amount: int) -> ComposedTransaction:
        cfg = self._config
        builder = TransactionBuilder(owner)
        plan = await self._aggregate(builder, cfg.asset("XAUM"), amount)

        builder.move_call(
            self._target("staking_manager", "stake_xaum"),
            [builder.object(cfg.staking_manager_id), plan.spend_unit],
        )
        return_remainders(builder, [plan], owner)
        return builder.build()

    async def redeem_xaum(self, owner: str, amount: int) -> ComposedTransaction:
        """Burn equal amounts of GR and GY to get XAUM back."""
        cfg = self._config
        builder = TransactionBuilder(owner)
        gr_plan = await self._aggregate(builder, cfg.asset("GR"), amount)
        gy_plan = await self._aggregate(builder, cfg.asset("GY"), amount)

        builder.move_call(
            self._target("staking_manager", "unstake"),
            [builder.object(cfg.staking_manager_id), gr_plan.spend_unit, gy_plan.spend_unit],
        )
        return_remainders(builder, [gr_plan, gy_plan], owner)
        return builder.build()

    # ------------------------------------------------------------------
    # Lending
    # ------------------------------------------------------------------

    async def deposit(self, owner: str, asset: AssetType, amount: int) -> ComposedTransaction:
        """Deposit collateral, opening an obligation first if the wallet has none."""
        cfg = self._config
        obligation = await self._obligation(owner)
        builder = TransactionBuilder(owner)

        plans: list[SpendPlan] = []
        if cfg.is_native(asset):
            [coin] = builder.split_coins(builder.gas, [amount])
        else:
            plan = await self._aggregate(builder, asset, amount)
            plans.append(plan)
            coin = plan.spend_unit

        obligation_arg: Argument
        if obligation is None:
            opened = builder.move_call(
                self._target("open_obligation", "open_obligation"),
                [builder.object(cfg.lending_version_id)],
            )
            obligation_arg, key, hot_potato = opened[0], opened[1], opened[2]
            builder.transfer_objects([key], owner)
        else:
            obligation_arg = builder.object(obligation.obligation_id)

        builder.move_call(
            self._target("deposit_collateral", "deposit_collateral"),
            [
                builder.object(cfg.lending_version_id),
                obligation_arg,
                builder.object(cfg.lending_market_id),
                coin,
            ],
            [asset.coin_type],
        )

        if obligation is None:
            builder.move_call(
                self._target("open_obligation", "return_obligation"),
                [builder.object(cfg.lending_version_id), obligation_arg, hot_potato],
            )

        return_remainders(builder, plans, owner)
        return builder.build()

    async def borrow_gusd(self, owner: str, amount: int) -> ComposedTransaction:
        cfg = self._config
        obligation = await self._obligation(owner)
        if obligation is None:
            raise NoPosition("No obligation found. Please deposit collateral first.")

        builder = TransactionBuilder(owner)
        inject_refresh_all(builder, cfg)
        builder.move_call(
            self._target("borrow", "borrow_entry"),
            [
                builder.object(cfg.lending_version_id),
                builder.object(obligation.obligation_id),
                builder.object(obligation.obligation_key_id),
                builder.object(cfg.lending_market_id),
                builder.object(cfg.coin_decimals_registry_id),
                builder.pure(amount),
                builder.object(cfg.x_oracle_id),
                builder.object(cfg.clock_id),
            ],
        )
        return builder.build()

    async def repay_gusd(self, owner: str, amount: int) -> ComposedTransaction:
        cfg = self._config
        obligation = await self._obligation(owner)
        if obligation is None:
            raise NoPosition("No obligation found.")

        gusd = cfg.asset("GUSD")
        builder = TransactionBuilder(owner)
        plan = await self._aggregate(builder, gusd, amount)

        builder.move_call(
            self._target("repay", "repay"),
            [
                builder.object(cfg.lending_version_id),
                builder.object(obligation.obligation_id),
                builder.object(cfg.lending_market_id),
                plan.spend_unit,
                builder.object(cfg.clock_id),
            ],
            [gusd.coin_type],
        )
        return_remainders(builder, [plan], owner)
        return builder.build()

    async def withdraw(self, owner: str, asset: AssetType, amount: int) -> ComposedTransaction:
        cfg = self._config
        obligation = await self._obligation(owner)
        if obligation is None:
            raise NoWithdrawTarget("No obligation found. Cannot withdraw.")

        builder = TransactionBuilder(owner)
        inject_refresh_all(builder, cfg)
        builder.move_call(
            self._target("withdraw_collateral", "withdraw_collateral_entry"),
            [
                builder.object(cfg.lending_version_id),
                builder.object(obligation.obligation_id),
                builder.object(obligation.obligation_key_id),
                builder.object(cfg.lending_market_id),
                builder.object(cfg.coin_decimals_registry_id),
                builder.pure(amount),
                builder.object(cfg.x_oracle_id),
                builder.object(cfg.clock_id),
            ],
            [asset.coin_type],
        )
        return builder.build()


def _package_of(asset: AssetType) -> str:
    """Package id part of a ``package::module::TYPE`` coin type."""
    return asset.coin_type.split("::", 1)[0]
