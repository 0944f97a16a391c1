"""Data models: all frozen (immutable)."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .chains.sui.transaction import ComposedTransaction

# Bounds of the "random percent" preset.
RANDOM_PERCENT_MIN = 0.2
RANDOM_PERCENT_MAX = 1.0


def _finite(value: Any) -> Decimal:
    """Exact Decimal for an amount value; NaN and infinities are rejected."""
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid amount value '{value}'") from None
    if not number.is_finite():
        raise ValueError(f"Amount value must be finite, got '{value}'")
    return number


class AmountMode(str, Enum):
    DEFAULT = "default"
    CUSTOM = "custom"
    PERCENT = "percent"


@dataclass(frozen=True)
class AmountConfig:
    """How much of an asset an action should use.

    ``value`` depends on ``mode``:
        DEFAULT: integer amount in base units
        CUSTOM:  positive token quantity, not yet scaled by decimals
        PERCENT: fraction of the live balance in (0.0, 1.0]
    """

    mode: AmountMode
    value: int | float | Decimal

    def __post_init__(self) -> None:
        if self.mode is AmountMode.DEFAULT:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise ValueError("Default amount must be an integer in base units")
            if self.value < 0:
                raise ValueError("Default amount must not be negative")
        elif self.mode is AmountMode.CUSTOM:
            if _finite(self.value) <= 0:
                raise ValueError("Custom amount must be a positive number")
        elif self.mode is AmountMode.PERCENT:
            fraction = _finite(self.value)
            if fraction <= 0 or fraction > 1:
                raise ValueError("Percent value must be a fraction in (0.0, 1.0]")
        else:
            raise ValueError(f"Unknown amount mode: {self.mode!r}")

    @classmethod
    def default(cls, base_units: int) -> AmountConfig:
        return cls(AmountMode.DEFAULT, base_units)

    @classmethod
    def custom(cls, tokens: float | Decimal) -> AmountConfig:
        return cls(AmountMode.CUSTOM, tokens)

    @classmethod
    def percent(cls, fraction: float) -> AmountConfig:
        return cls(AmountMode.PERCENT, fraction)

    @classmethod
    def random_percent(cls, rng: random.Random | None = None) -> AmountConfig:
        """Pick a fraction between 20% and 100% once, at configuration time."""
        rng = rng or random.Random()
        return cls.percent(rng.uniform(RANDOM_PERCENT_MIN, RANDOM_PERCENT_MAX))

    @classmethod
    def from_raw(cls, raw: dict[str, Any], default_amount: int) -> AmountConfig:
        """Build from a YAML mapping such as ``{mode: percent, value: 0.5}``.

        ``mode: default`` ignores ``value`` and uses the action's default.
        ``mode: percent`` accepts ``value: random`` for the random preset.
        """
        mode_name = str(raw.get("mode", "default")).strip().lower()
        try:
            mode = AmountMode(mode_name)
        except ValueError:
            raise ValueError(f"Unknown amount mode '{mode_name}'") from None

        if mode is AmountMode.DEFAULT:
            return cls.default(default_amount)

        value = raw.get("value")
        if value is None:
            raise ValueError(f"Amount mode '{mode_name}' requires a value")
        if mode is AmountMode.PERCENT and str(value).strip().lower() == "random":
            return cls.random_percent()
        number = _finite(value)
        return cls(mode, number if mode is AmountMode.CUSTOM else float(number))


@dataclass(frozen=True)
class AssetType:
    """A fungible coin type known to the protocol."""

    symbol: str
    coin_type: str
    decimals: int = 9

    def to_tokens(self, base_units: int) -> Decimal:
        return Decimal(base_units) / (Decimal(10) ** self.decimals)


@dataclass(frozen=True)
class ObligationRef:
    """A wallet's borrowing position and the key object that controls it."""

    obligation_id: str
    obligation_key_id: str


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one submission to the ledger."""

    success: bool
    digest: str = ""
    error: str = ""


@dataclass(frozen=True)
class PreparedAction:
    """A composed transaction ready to submit, or the reason it was skipped."""

    transaction: ComposedTransaction | None = None
    amount: int = 0
    skip_reason: str = ""
    warnings: tuple[str, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.transaction is None


class ActionStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionResult:
    action: str
    address: str
    status: ActionStatus
    digest: str = ""
    detail: str = ""
    amount: int = 0


@dataclass(frozen=True)
class BatchReport:
    results: tuple[ActionResult, ...] = field(default_factory=tuple)

    def count(self, status: ActionStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def succeeded(self) -> int:
        return self.count(ActionStatus.SUCCESS)

    @property
    def skipped(self) -> int:
        return self.count(ActionStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(ActionStatus.FAILED)
