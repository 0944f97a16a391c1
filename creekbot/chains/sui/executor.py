"""Submit composed transactions through the Sui CLI and the RPC node.

The CLI serializes the programmable transaction (resolving object versions and
gas) without signing it; the bytes are signed locally with the wallet's key
and submitted over JSON-RPC.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any

from ...config import ChainConfig
from ...models import ExecutionResult
from ...wallet import Wallet
from .client import SuiClient
from .transaction import (
    Argument,
    ComposedTransaction,
    GasCoin,
    MergeCoins,
    MoveCall,
    NestedResult,
    ObjectArg,
    PureArg,
    Result,
    SplitCoins,
    TransferObjects,
)

logger = logging.getLogger(__name__)

# TransactionData carries at least the 32-byte sender address.
MIN_TX_BYTES = 32


def _result_name(command_index: int) -> str:
    return f"r{command_index}"


def render_argument(arg: Argument) -> str:
    """Render one argument in ``sui client ptb`` syntax."""
    if isinstance(arg, GasCoin):
        return "gas"
    if isinstance(arg, ObjectArg):
        return f"@{arg.object_id}"
    if isinstance(arg, PureArg):
        if arg.kind == "address":
            return f"@{arg.value}"
        return f"{arg.value}{arg.kind}"
    if isinstance(arg, NestedResult):
        return f"{_result_name(arg.command_index)}.{arg.result_index}"
    if isinstance(arg, Result):
        return _result_name(arg.command_index)
    raise TypeError(f"Unsupported argument: {arg!r}")


def _render_vector(args: tuple[Argument, ...]) -> str:
    return "[" + ",".join(render_argument(a) for a in args) + "]"


def render_ptb_args(transaction: ComposedTransaction, gas_budget: int) -> list[str]:
    """Translate a composed transaction into ``sui client ptb`` arguments."""
    argv: list[str] = []
    for index, command in enumerate(transaction.commands):
        if isinstance(command, MoveCall):
            argv += ["--move-call", command.target]
            if command.type_arguments:
                argv.append("<" + ",".join(command.type_arguments) + ">")
            argv += [render_argument(a) for a in command.arguments]
            argv += ["--assign", _result_name(index)]
        elif isinstance(command, SplitCoins):
            argv += [
                "--split-coins",
                render_argument(command.coin),
                _render_vector(command.amounts),
                "--assign",
                _result_name(index),
            ]
        elif isinstance(command, MergeCoins):
            argv += [
                "--merge-coins",
                render_argument(command.destination),
                _render_vector(command.sources),
            ]
        elif isinstance(command, TransferObjects):
            argv += [
                "--transfer-objects",
                _render_vector(command.objects),
                render_argument(command.recipient),
            ]
        else:
            raise TypeError(f"Unsupported command: {command!r}")

    argv += [
        "--sender",
        f"@{transaction.sender}",
        "--gas-budget",
        str(gas_budget),
        "--serialize-unsigned-transaction",
    ]
    return argv


def _extract_tx_bytes(stdout: str) -> str:
    """The serialized transaction is the last base64 line the CLI prints.

    Lines decoding to fewer than ``MIN_TX_BYTES`` bytes are status words
    such as ``Done``, not transaction data.
    """
    for line in reversed(stdout.strip().splitlines()):
        candidate = line.strip()
        if not candidate:
            continue
        try:
            decoded = base64.b64decode(candidate, validate=True)
        except (binascii.Error, ValueError):
            continue
        if len(decoded) < MIN_TX_BYTES:
            continue
        return candidate
    raise ValueError("No serialized transaction in CLI output")


def classify_response(response: dict[str, Any]) -> ExecutionResult:
    digest = response.get("digest", "")
    status = (response.get("effects") or {}).get("status") or {}
    if status.get("status") == "success":
        return ExecutionResult(success=True, digest=digest)
    return ExecutionResult(
        success=False,
        digest=digest,
        error=f"Transaction failed: {status.get('error') or 'Unknown error'}",
    )


class SuiCliExecutor:
    """TransactionExecutor backed by the ``sui`` binary and JSON-RPC."""

    def __init__(self, client: SuiClient, config: ChainConfig) -> None:
        self._client = client
        self._sui_binary = config.sui_binary
        self._gas_budget = config.gas_budget

    async def _serialize(self, transaction: ComposedTransaction) -> str:
        argv = render_ptb_args(transaction, self._gas_budget)
        logger.debug("sui client ptb %s", " ".join(argv))

        process = await asyncio.create_subprocess_exec(
            self._sui_binary,
            "client",
            "ptb",
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise RuntimeError(
                stderr.decode(errors="replace").strip()
                or f"sui client ptb exited with {process.returncode}"
            )
        return _extract_tx_bytes(stdout.decode(errors="replace"))

    async def execute(
        self, wallet: Wallet, transaction: ComposedTransaction
    ) -> ExecutionResult:
        try:
            tx_bytes = await self._serialize(transaction)
        except (OSError, RuntimeError, ValueError) as e:
            return ExecutionResult(success=False, error=f"Could not build transaction: {e}")

        signature = wallet.sign_transaction(base64.b64decode(tx_bytes))

        try:
            response = await self._client.execute_transaction_block(tx_bytes, [signature])
        except RuntimeError as e:
            return ExecutionResult(success=False, error=str(e))

        return classify_response(response)
