"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from creekbot.config import (
    AppConfig,
    BatchConfig,
    ChainConfig,
    ProtocolConfig,
)
from creekbot.models import AssetType
from creekbot.wallet import Wallet

PKG = "0xpkg"

COIN_TYPES = {
    "SUI": "0x2::sui::SUI",
    "XAUM": "0xaaa::coin_xaum::COIN_XAUM",
    "USDC": "0xaaa::usdc::USDC",
    "GUSD": "0xbbb::coin_gusd::COIN_GUSD",
    "GR": "0xccc::coin_gr::COIN_GR",
    "GY": "0xddd::coin_gy::COIN_GY",
}

DEFAULTS = {
    "swap_usdc_to_gusd": 1_000_000_000,
    "stake_xaum": 1_000_000_000,
    "redeem_xaum": 100_000_000_000,
    "deposit_sui": 10_000_000,
    "deposit_usdc": 1_000_000_000,
    "deposit_gr": 1_000_000_000,
    "borrow_gusd": 5_000_000_000,
    "repay_gusd": 5_000_000_001,
    "withdraw_sui": 10_000_000,
    "withdraw_usdc": 1_000_000_000,
    "withdraw_gr": 1_000_000_000,
}


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_assets() -> dict[str, AssetType]:
    return {
        symbol: AssetType(symbol=symbol, coin_type=coin_type, decimals=9)
        for symbol, coin_type in COIN_TYPES.items()
    }


@pytest.fixture()
def sample_protocol_config(sample_assets: dict[str, AssetType]) -> ProtocolConfig:
    return ProtocolConfig(
        protocol_pkg_id=PKG,
        x_oracle_pkg_id="0xoraclepkg",
        manual_rule_pkg_id="0xrulepkg",
        lending_market_id="0xmarket",
        lending_version_id="0xversion",
        coin_decimals_registry_id="0xdecimals",
        x_oracle_id="0xxoracle",
        swap_usdc_vault_id="0xvault",
        staking_manager_id="0xstaking",
        xaum_mint_cap="0xmintcap",
        usdc_treasury="0xtreasury",
        assets=sample_assets,
        faucet_amounts={"XAUM": 1_000_000_000, "USDC": 10_000_000_000},
    )


@pytest.fixture()
def sample_app_config(sample_protocol_config: ProtocolConfig) -> AppConfig:
    return AppConfig(
        chain=ChainConfig(rpc_endpoints=("https://rpc.example.com",), rpc_timeout=10),
        protocol=sample_protocol_config,
        defaults=dict(DEFAULTS),
        batch=BatchConfig(action_delay_seconds=1.0),
    )


# ---------------------------------------------------------------------------
# Wallet fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def wallet() -> Wallet:
    return Wallet.from_seed(bytes(range(32)))


@pytest.fixture()
def other_wallet() -> Wallet:
    return Wallet.from_seed(bytes(range(32, 64)))


# ---------------------------------------------------------------------------
# Sample on-chain data
# ---------------------------------------------------------------------------


def coin(object_id: str, balance: int) -> dict[str, Any]:
    return {"coinObjectId": object_id, "balance": str(balance)}


def obligation_key_object(key_id: str, obligation_id: str) -> dict[str, Any]:
    return {
        "data": {
            "objectId": key_id,
            "type": f"{PKG}::obligation::ObligationKey",
            "content": {
                "dataType": "moveObject",
                "fields": {
                    "id": {"id": key_id},
                    "ownership": {
                        "type": f"{PKG}::ownership::Ownership",
                        "fields": {"owner_object_id": obligation_id},
                    },
                },
            },
        }
    }


def make_chain_client(
    coins: dict[str, list[dict[str, Any]]] | None = None,
    balances: dict[str, int] | None = None,
    obligation_keys: list[dict[str, Any]] | None = None,
) -> MagicMock:
    """Mock ChainClient serving fixed state keyed by coin type.

    Balances default to the sum of the listed coins.
    """
    coins = coins or {}
    balances = balances or {}

    async def get_balance(address: str, coin_type: str) -> int:
        if coin_type in balances:
            return balances[coin_type]
        return sum(int(c["balance"]) for c in coins.get(coin_type, []))

    async def get_coins(address: str, coin_type: str) -> list[dict[str, Any]]:
        return list(coins.get(coin_type, []))

    client = MagicMock()
    client.get_balance = AsyncMock(side_effect=get_balance)
    client.get_coins = AsyncMock(side_effect=get_coins)
    client.get_owned_objects = AsyncMock(return_value=list(obligation_keys or []))
    return client


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    chain:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
      gas_budget: 50000000
    api:
      base_url: "https://api.example.com/"
    protocol:
      protocol_pkg_id: "0xpkg"
      x_oracle_pkg_id: "0xoraclepkg"
      manual_rule_pkg_id: "0xrulepkg"
      lending_market_id: "0xmarket"
      lending_version_id: "0xversion"
      coin_decimals_registry_id: "0xdecimals"
      x_oracle_id: "0xxoracle"
      swap_usdc_vault_id: "0xvault"
      staking_manager_id: "0xstaking"
      xaum_mint_cap: "0xmintcap"
      usdc_treasury: "0xtreasury"
      gas_reserve: 10000000
    assets:
      SUI: {coin_type: "0x2::sui::SUI", decimals: 9}
      XAUM: {coin_type: "0xaaa::coin_xaum::COIN_XAUM", decimals: 9}
      USDC: {coin_type: "0xaaa::usdc::USDC", decimals: 9}
      GUSD: {coin_type: "0xbbb::coin_gusd::COIN_GUSD", decimals: 9}
      GR: {coin_type: "0xccc::coin_gr::COIN_GR", decimals: 9}
      GY: {coin_type: "0xddd::coin_gy::COIN_GY", decimals: 9}
    faucet:
      XAUM: 1000000000
      USDC: 10000000000
    defaults:
      swap_usdc_to_gusd: 1000000000
      deposit_sui: 10000000
      borrow_gusd: 5000000000
    batch:
      action_delay_seconds: 2
      actions: [connect_api, faucet, swap_usdc_to_gusd]
      amounts:
        swap_usdc_to_gusd: {mode: percent, value: 0.5}
        deposit_sui: {mode: custom, value: 0.25}
        stake_xaum: {mode: percent, value: random}
        borrow_gusd: {mode: default}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
