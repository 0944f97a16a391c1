"""Command-line interface for the Creek testnet bot."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from .chains.sui import SuiClient
from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .models import AmountConfig
from .protocols.creek.actions import ACTIONS, get_action
from .services.amount import parse_amount_spec
from .services.runner import BatchRunner
from .wallet import Wallet, load_wallets

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="creek-bot",
        description="Multi-wallet automation for the Creek protocol on Sui testnet",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("actions", help="List available actions")
    sub.add_parser("status", help="Show the SUI balance of every loaded wallet")

    run_parser = sub.add_parser("run", help="Run one action across all wallets")
    run_parser.add_argument("action", choices=list(ACTIONS), help="Action key")
    run_parser.add_argument(
        "--amount",
        default="default",
        help=(
            "Amount policy: default, custom:<tokens>, percent:<1-100> or random "
            "(default: default)"
        ),
    )

    run_all_parser = sub.add_parser(
        "run-all", help="Run a sequence of actions for every wallet"
    )
    run_all_parser.add_argument(
        "--actions",
        nargs="+",
        choices=list(ACTIONS),
        default=None,
        help="Actions to run in order (default: batch.actions from config)",
    )

    return parser


def _print_actions() -> None:
    for index, spec in enumerate(ACTIONS.values(), start=1):
        print(f"{index:>2}. {spec.key:<20} {spec.name}")


async def _print_status(config: AppConfig, wallets: list[Wallet]) -> None:
    client = SuiClient(config.chain)
    native = config.protocol.native_coin_type
    decimals = next(
        a.decimals for a in config.protocol.assets.values() if a.coin_type == native
    )
    for wallet in wallets:
        balance = await client.get_balance(wallet.address, native)
        print(f"{wallet.address}  SUI: {balance / 10 ** decimals:.4f}")


def _amount_for(config: AppConfig, action_key: str, spec_text: str) -> AmountConfig | None:
    if not get_action(action_key).needs_amount:
        return None
    return parse_amount_spec(spec_text, config.default_amount(action_key))


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    wallets = load_wallets(os.environ.get("PRIVATE_KEYS"))
    if not wallets:
        logger.error("No private keys found. Please add PRIVATE_KEYS to .env")
        return 1

    if args.command == "status":
        await _print_status(config, wallets)
        return 0

    runner = BatchRunner(config)
    if args.command == "run":
        try:
            amount_config = _amount_for(config, args.action, args.amount)
        except ValueError as e:
            logger.error("Invalid --amount: %s", e)
            return 2
        report = await runner.run_single(wallets, args.action, amount_config)
    else:
        action_keys = args.actions or list(config.batch.actions)
        if not action_keys:
            logger.error("No actions selected. Use --actions or set batch.actions")
            return 2
        amount_configs = {
            key: config.amount_config(key)
            for key in action_keys
            if get_action(key).needs_amount
        }
        report = await runner.run_batch(wallets, action_keys, amount_configs)

    return 1 if report.failed else 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "actions":
        _print_actions()
        return

    sys.exit(asyncio.run(_run(args)))
