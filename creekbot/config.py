"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import AmountConfig, AssetType

logger = logging.getLogger(__name__)

SUI_COIN_TYPE = "0x2::sui::SUI"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30
    gas_budget: int = 100_000_000
    sui_binary: str = "sui"


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = "https://api-test.creek.finance"
    timeout: int = 30


@dataclass(frozen=True)
class ProtocolConfig:
    """Creek package and object ids plus the asset table.

    Injected into every composer; nothing reads these as module globals.
    """

    protocol_pkg_id: str = ""
    x_oracle_pkg_id: str = ""
    manual_rule_pkg_id: str = ""
    lending_market_id: str = ""
    lending_version_id: str = ""
    coin_decimals_registry_id: str = ""
    x_oracle_id: str = ""
    swap_usdc_vault_id: str = ""
    staking_manager_id: str = ""
    xaum_mint_cap: str = ""
    usdc_treasury: str = ""
    clock_id: str = "0x6"
    native_coin_type: str = SUI_COIN_TYPE
    gas_reserve: int = 10_000_000
    oracle_price: int = 1
    oracle_assets: tuple[str, ...] = ("SUI", "USDC", "GR", "GUSD")
    assets: dict[str, AssetType] = field(default_factory=dict)
    faucet_amounts: dict[str, int] = field(default_factory=dict)

    def asset(self, symbol: str) -> AssetType:
        try:
            return self.assets[symbol]
        except KeyError:
            raise KeyError(f"Asset '{symbol}' is not configured") from None

    def is_native(self, asset: AssetType) -> bool:
        return asset.coin_type == self.native_coin_type


@dataclass(frozen=True)
class BatchConfig:
    action_delay_seconds: float = 1.0
    actions: tuple[str, ...] = ()
    amounts: dict[str, AmountConfig] = field(default_factory=dict)


@dataclass(frozen=True)
class AppConfig:
    chain: ChainConfig = field(default_factory=ChainConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    defaults: dict[str, int] = field(default_factory=dict)
    batch: BatchConfig = field(default_factory=BatchConfig)

    def default_amount(self, action_key: str) -> int:
        return self.defaults.get(action_key, 0)

    def amount_config(self, action_key: str) -> AmountConfig:
        """Configured amount policy for an action, falling back to Default."""
        configured = self.batch.amounts.get(action_key)
        if configured is not None:
            return configured
        return AmountConfig.default(self.default_amount(action_key))


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=tuple(raw.get("rpc_endpoints", [])),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
        gas_budget=int(raw.get("gas_budget", 100_000_000)),
        sui_binary=raw.get("sui_binary", "sui"),
    )


def _build_api(raw: dict[str, Any]) -> ApiConfig:
    return ApiConfig(
        base_url=str(raw.get("base_url", ApiConfig.base_url)).rstrip("/"),
        timeout=int(raw.get("timeout", 30)),
    )


def _build_assets(raw: dict[str, Any]) -> dict[str, AssetType]:
    assets: dict[str, AssetType] = {}
    for symbol, cfg in raw.items():
        assets[symbol] = AssetType(
            symbol=symbol,
            coin_type=cfg.get("coin_type", ""),
            decimals=int(cfg.get("decimals", 9)),
        )
    return assets


def _build_protocol(raw: dict[str, Any], assets: dict[str, AssetType],
                    faucet: dict[str, Any]) -> ProtocolConfig:
    return ProtocolConfig(
        protocol_pkg_id=raw.get("protocol_pkg_id", ""),
        x_oracle_pkg_id=raw.get("x_oracle_pkg_id", ""),
        manual_rule_pkg_id=raw.get("manual_rule_pkg_id", ""),
        lending_market_id=raw.get("lending_market_id", ""),
        lending_version_id=raw.get("lending_version_id", ""),
        coin_decimals_registry_id=raw.get("coin_decimals_registry_id", ""),
        x_oracle_id=raw.get("x_oracle_id", ""),
        swap_usdc_vault_id=raw.get("swap_usdc_vault_id", ""),
        staking_manager_id=raw.get("staking_manager_id", ""),
        xaum_mint_cap=raw.get("xaum_mint_cap", ""),
        usdc_treasury=raw.get("usdc_treasury", ""),
        clock_id=raw.get("clock_id", "0x6"),
        native_coin_type=raw.get("native_coin_type", SUI_COIN_TYPE),
        gas_reserve=int(raw.get("gas_reserve", 10_000_000)),
        oracle_price=int(raw.get("oracle_price", 1)),
        oracle_assets=tuple(raw.get("oracle_assets", ProtocolConfig.oracle_assets)),
        assets=assets,
        faucet_amounts={k: int(v) for k, v in faucet.items()},
    )


def _build_batch(raw: dict[str, Any], defaults: dict[str, int]) -> BatchConfig:
    amounts: dict[str, AmountConfig] = {}
    for action_key, amount_raw in (raw.get("amounts") or {}).items():
        amounts[action_key] = AmountConfig.from_raw(
            amount_raw or {}, defaults.get(action_key, 0)
        )
    return BatchConfig(
        action_delay_seconds=float(raw.get("action_delay_seconds", 1.0)),
        actions=tuple(raw.get("actions", [])),
        amounts=amounts,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    defaults = {k: int(v) for k, v in (raw.get("defaults") or {}).items()}
    assets = _build_assets(raw.get("assets", {}))

    cfg = AppConfig(
        chain=_build_chain(raw.get("chain", {})),
        api=_build_api(raw.get("api", {})),
        protocol=_build_protocol(raw.get("protocol", {}), assets, raw.get("faucet", {})),
        defaults=defaults,
        batch=_build_batch(raw.get("batch", {}), defaults),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    # Imported here: the action registry depends on config types.
    from .protocols.creek.actions import ACTIONS

    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one RPC endpoint must be configured")

    protocol = cfg.protocol
    for symbol, asset in protocol.assets.items():
        if not asset.coin_type:
            raise ValueError(f"Asset '{symbol}' has no coin_type")
        if asset.decimals < 0:
            raise ValueError(f"Asset '{symbol}' has negative decimals")

    if not any(a.coin_type == protocol.native_coin_type for a in protocol.assets.values()):
        raise ValueError(
            f"Native coin type '{protocol.native_coin_type}' is not a configured asset"
        )

    for symbol in protocol.oracle_assets:
        if symbol not in protocol.assets:
            raise ValueError(f"Oracle asset '{symbol}' is not a configured asset")

    for symbol in protocol.faucet_amounts:
        if symbol not in protocol.assets:
            raise ValueError(f"Faucet asset '{symbol}' is not a configured asset")

    for spec in ACTIONS.values():
        for symbol in spec.assets:
            if symbol not in protocol.assets:
                raise ValueError(
                    f"Action '{spec.key}' references unknown asset '{symbol}'"
                )

    for action_key in (*cfg.batch.actions, *cfg.batch.amounts, *cfg.defaults):
        if action_key not in ACTIONS:
            raise ValueError(f"Unknown action '{action_key}'")
