"""Price refresh commands required before borrow and withdraw."""
from __future__ import annotations

from ...chains.sui.transaction import TransactionBuilder
from ...config import ProtocolConfig


def inject_refresh(
    builder: TransactionBuilder, config: ProtocolConfig, coin_type: str
) -> None:
    """Request, set and confirm a price for one coin type."""
    request = builder.move_call(
        f"{config.x_oracle_pkg_id}::x_oracle::price_update_request",
        [builder.object(config.x_oracle_id)],
        [coin_type],
    )
    builder.move_call(
        f"{config.manual_rule_pkg_id}::rule::set_price_as_primary",
        [request, builder.pure(config.oracle_price), builder.object(config.clock_id)],
        [coin_type],
    )
    builder.move_call(
        f"{config.x_oracle_pkg_id}::x_oracle::confirm_price_update_request",
        [builder.object(config.x_oracle_id), request, builder.object(config.clock_id)],
        [coin_type],
    )


def inject_refresh_all(builder: TransactionBuilder, config: ProtocolConfig) -> None:
    """Refresh every oracle asset, in configured order."""
    for symbol in config.oracle_assets:
        inject_refresh(builder, config, config.asset(symbol).coin_type)
