"""Coin selection: merge a wallet's coins of one type and split an exact amount."""
from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientBalance, NoHoldings
from ...interfaces.chain import ChainClient
from .transaction import Argument, TransactionBuilder


@dataclass(frozen=True)
class SpendPlan:
    """``spend_unit`` holds exactly the requested amount.

    ``remainder_unit`` is the merged leftover coin that must be transferred
    back to the owner in the same transaction, or None when nothing is left.
    """

    spend_unit: Argument
    remainder_unit: Argument | None = None


async def aggregate(
    builder: TransactionBuilder,
    client: ChainClient,
    owner: str,
    coin_type: str,
    required: int,
) -> SpendPlan:
    """Append merge/split commands producing a coin of exactly ``required``."""
    coins = await client.get_coins(owner, coin_type)
    if not coins:
        raise NoHoldings(coin_type)

    total = sum(int(c.get("balance", 0)) for c in coins)
    if total < required:
        raise InsufficientBalance(coin_type, required, total)

    primary, *others = (builder.object(c["coinObjectId"]) for c in coins)

    if not others and int(coins[0].get("balance", 0)) == required:
        return SpendPlan(spend_unit=primary)

    if others:
        builder.merge_coins(primary, others)

    [spend_unit] = builder.split_coins(primary, [required])
    return SpendPlan(spend_unit=spend_unit, remainder_unit=primary)


def return_remainders(
    builder: TransactionBuilder, plans: list[SpendPlan], owner: str
) -> None:
    """Transfer every non-empty remainder back to the owner in one command."""
    remainders = [p.remainder_unit for p in plans if p.remainder_unit is not None]
    if remainders:
        builder.transfer_objects(remainders, owner)
