"""Unit tests for CLI argument parsing and command dispatch."""
from __future__ import annotations

import argparse
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from creekbot.cli import _amount_for, _run, build_parser
from creekbot.config import load_config
from creekbot.models import ActionResult, ActionStatus, AmountConfig, BatchReport

SEED_HEX = bytes(range(32)).hex()


class TestBuildParser:
    def test_actions_command(self) -> None:
        args = build_parser().parse_args(["actions"])
        assert args.command == "actions"

    def test_run_command_default_amount(self) -> None:
        args = build_parser().parse_args(["run", "deposit_sui"])
        assert args.command == "run"
        assert args.action == "deposit_sui"
        assert args.amount == "default"

    def test_run_command_custom_amount(self) -> None:
        args = build_parser().parse_args(["run", "stake_xaum", "--amount", "percent:25"])
        assert args.amount == "percent:25"

    def test_run_unknown_action(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run", "fly_to_moon"])

    def test_run_all_actions(self) -> None:
        args = build_parser().parse_args(["run-all", "--actions", "faucet", "stake_xaum"])
        assert args.command == "run-all"
        assert args.actions == ["faucet", "stake_xaum"]

    def test_run_all_defaults_to_config(self) -> None:
        args = build_parser().parse_args(["run-all"])
        assert args.actions is None

    def test_config_flag(self) -> None:
        args = build_parser().parse_args(["--config", "/tmp/c.yaml", "status"])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        args = build_parser().parse_args(["--log-level", "DEBUG", "actions"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None


class TestAmountFor:
    def test_faucet_needs_no_amount(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert _amount_for(cfg, "faucet", "percent:50") is None

    def test_default_uses_configured_amount(self, sample_yaml_path: Path) -> None:
        cfg = load_config(sample_yaml_path)
        assert _amount_for(cfg, "deposit_sui", "default") == AmountConfig.default(10_000_000)


def _args(config: Path, command: str, **extra) -> argparse.Namespace:
    return argparse.Namespace(config=str(config), log_level="INFO", command=command, **extra)


class TestRun:
    @pytest.mark.asyncio
    async def test_no_wallets(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEYS", "")
        assert await _run(_args(sample_yaml_path, "status")) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["percent:abc", "custom:nan", "custom:inf", "percent:nan"])
    async def test_invalid_amount(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch, amount: str
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEYS", SEED_HEX)
        args = _args(sample_yaml_path, "run", action="deposit_sui", amount=amount)
        assert await _run(args) == 2

    @pytest.mark.asyncio
    async def test_run_single_exit_code_reflects_failures(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEYS", SEED_HEX)
        runner = MagicMock()
        runner.run_single = AsyncMock(
            return_value=BatchReport(
                (ActionResult("faucet", "0x1", ActionStatus.FAILED, detail="boom"),)
            )
        )

        with patch("creekbot.cli.BatchRunner", return_value=runner):
            code = await _run(_args(sample_yaml_path, "run", action="faucet", amount="default"))

        assert code == 1
        runner.run_single.assert_awaited_once()
        _, action_key, amount_config = runner.run_single.call_args.args
        assert action_key == "faucet"
        assert amount_config is None

    @pytest.mark.asyncio
    async def test_run_all_uses_configured_actions(
        self, sample_yaml_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PRIVATE_KEYS", SEED_HEX)
        runner = MagicMock()
        runner.run_batch = AsyncMock(return_value=BatchReport())

        with patch("creekbot.cli.BatchRunner", return_value=runner):
            code = await _run(_args(sample_yaml_path, "run-all", actions=None))

        assert code == 0
        wallets, action_keys, amount_configs = runner.run_batch.call_args.args
        assert len(wallets) == 1
        assert action_keys == ["connect_api", "faucet", "swap_usdc_to_gusd"]
        assert set(amount_configs) == {"swap_usdc_to_gusd"}
        assert amount_configs["swap_usdc_to_gusd"] == AmountConfig.percent(0.5)
