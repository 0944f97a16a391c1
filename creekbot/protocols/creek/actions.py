"""Registry of the actions the bot can run, keyed by a stable action key."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActionKind(str, Enum):
    CONNECT = "connect"
    FAUCET = "faucet"
    SWAP = "swap"
    STAKE = "stake"
    REDEEM = "redeem"
    DEPOSIT = "deposit"
    BORROW = "borrow"
    REPAY = "repay"
    WITHDRAW = "withdraw"


@dataclass(frozen=True)
class ActionSpec:
    key: str
    name: str
    kind: ActionKind
    # Asset symbols the action spends or targets, primary first.
    assets: tuple[str, ...] = ()

    @property
    def needs_amount(self) -> bool:
        return self.kind not in (ActionKind.CONNECT, ActionKind.FAUCET)


_SPECS = (
    ActionSpec("connect_api", "Connect API", ActionKind.CONNECT),
    ActionSpec("faucet", "Faucet (XAUM & USDC)", ActionKind.FAUCET, ("XAUM", "USDC")),
    ActionSpec("swap_usdc_to_gusd", "Swap USDC->GUSD", ActionKind.SWAP, ("USDC",)),
    ActionSpec("stake_xaum", "Stake XAUM", ActionKind.STAKE, ("XAUM",)),
    ActionSpec("redeem_xaum", "Redeem XAUM", ActionKind.REDEEM, ("GR", "GY")),
    ActionSpec("deposit_sui", "Deposit SUI", ActionKind.DEPOSIT, ("SUI",)),
    ActionSpec("deposit_usdc", "Deposit USDC", ActionKind.DEPOSIT, ("USDC",)),
    ActionSpec("deposit_gr", "Deposit GR", ActionKind.DEPOSIT, ("GR",)),
    ActionSpec("borrow_gusd", "Borrow GUSD", ActionKind.BORROW, ("GUSD",)),
    ActionSpec("repay_gusd", "Repay GUSD", ActionKind.REPAY, ("GUSD",)),
    ActionSpec("withdraw_sui", "Withdraw SUI", ActionKind.WITHDRAW, ("SUI",)),
    ActionSpec("withdraw_usdc", "Withdraw USDC", ActionKind.WITHDRAW, ("USDC",)),
    ActionSpec("withdraw_gr", "Withdraw GR", ActionKind.WITHDRAW, ("GR",)),
)

ACTIONS: dict[str, ActionSpec] = {spec.key: spec for spec in _SPECS}


def get_action(key: str) -> ActionSpec:
    try:
        return ACTIONS[key]
    except KeyError:
        raise ValueError(
            f"Unknown action '{key}'. Known actions: {', '.join(ACTIONS)}"
        ) from None
