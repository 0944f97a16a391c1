"""Programmable transaction builder.

Commands are appended to a :class:`TransactionBuilder` and reference each
other's outputs through :class:`Result` / :class:`NestedResult` arguments.
``build()`` freezes the sequence into a :class:`ComposedTransaction`, the unit
submitted to the ledger. Every command in it takes effect or none does.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GasCoin:
    """The coin paying for gas, usable as a SUI source."""


@dataclass(frozen=True)
class ObjectArg:
    object_id: str


@dataclass(frozen=True)
class PureArg:
    value: int | str
    kind: str = "u64"


@dataclass(frozen=True)
class NestedResult:
    command_index: int
    result_index: int


@dataclass(frozen=True)
class Result:
    command_index: int

    def __getitem__(self, result_index: int) -> NestedResult:
        return NestedResult(self.command_index, result_index)


Argument = Union[GasCoin, ObjectArg, PureArg, Result, NestedResult]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoveCall:
    target: str
    arguments: tuple[Argument, ...] = ()
    type_arguments: tuple[str, ...] = ()


@dataclass(frozen=True)
class MergeCoins:
    destination: Argument
    sources: tuple[Argument, ...]


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: tuple[Argument, ...]


@dataclass(frozen=True)
class TransferObjects:
    objects: tuple[Argument, ...]
    recipient: Argument


Command = Union[MoveCall, MergeCoins, SplitCoins, TransferObjects]


@dataclass(frozen=True)
class ComposedTransaction:
    sender: str
    commands: tuple[Command, ...]

    def move_call_targets(self) -> list[str]:
        """Fully qualified targets of every MoveCall, in order."""
        return [c.target for c in self.commands if isinstance(c, MoveCall)]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class TransactionBuilder:
    """Accumulates commands for a single sender."""

    def __init__(self, sender: str) -> None:
        self._sender = sender
        self._commands: list[Command] = []

    @property
    def sender(self) -> str:
        return self._sender

    @property
    def gas(self) -> GasCoin:
        return GasCoin()

    def __len__(self) -> int:
        return len(self._commands)

    @staticmethod
    def object(object_id: str) -> ObjectArg:
        return ObjectArg(object_id)

    @staticmethod
    def pure(value: int | str, kind: str = "u64") -> PureArg:
        return PureArg(value, kind)

    @staticmethod
    def address(value: str) -> PureArg:
        return PureArg(value, "address")

    def _push(self, command: Command) -> Result:
        self._commands.append(command)
        return Result(len(self._commands) - 1)

    def move_call(
        self,
        target: str,
        arguments: list[Argument] | tuple[Argument, ...] = (),
        type_arguments: list[str] | tuple[str, ...] = (),
    ) -> Result:
        return self._push(MoveCall(target, tuple(arguments), tuple(type_arguments)))

    def merge_coins(self, destination: Argument, sources: list[Argument]) -> None:
        self._push(MergeCoins(destination, tuple(sources)))

    def split_coins(self, coin: Argument, amounts: list[int]) -> list[NestedResult]:
        """Split ``coin`` into one new coin per amount."""
        result = self._push(SplitCoins(coin, tuple(self.pure(a) for a in amounts)))
        return [result[i] for i in range(len(amounts))]

    def transfer_objects(self, objects: list[Argument], recipient: str) -> None:
        self._push(TransferObjects(tuple(objects), self.address(recipient)))

    def build(self) -> ComposedTransaction:
        return ComposedTransaction(sender=self._sender, commands=tuple(self._commands))
