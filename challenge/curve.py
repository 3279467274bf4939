# challenge/curve.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from challenge.models import AccountParameters, BalancePoint, ChartReferences, TradeRecord
from challenge.normalizer import ensure_records


def closing_order_key(trade: TradeRecord) -> Tuple[datetime, str]:
    """
    Sort key for closed trades: close time, then id. Never relies on input
    order, so equal close times always resolve the same way.
    """
    return trade.close_time, trade.id


def closed_in_order(trades: Iterable[TradeRecord]) -> List[TradeRecord]:
    closed = [t for t in ensure_records(list(trades)) if t.is_closed]
    closed.sort(key=closing_order_key)
    return closed


def build_balance_curve(
    initial_balance: float,
    trades: Iterable[TradeRecord],
    *,
    as_of: Optional[datetime] = None,
) -> Tuple[BalancePoint, ...]:
    """
    Fold closed trades into a balance curve.

    The curve starts with one point at the initial balance (stamped with the
    first close time) followed by one point per closed trade, so
    len(curve) == n_closed + 1. Open trades are ignored. With nothing closed
    the single point is stamped with `as_of`.
    """
    closed = closed_in_order(trades)

    if not closed:
        if as_of is None:
            raise ValueError("as_of is required to stamp the curve when no trade is closed")
        return (BalancePoint(timestamp=as_of, balance=float(initial_balance)),)

    running = float(initial_balance)
    points = [BalancePoint(timestamp=closed[0].close_time, balance=running)]
    for t in closed:
        running += t.net_profit
        points.append(BalancePoint(timestamp=t.close_time, balance=running))
    return tuple(points)


def chart_references(params: AccountParameters) -> ChartReferences:
    """Profit target and max drawdown levels drawn over the balance chart."""
    initial = params.initial_balance
    return ChartReferences(
        profit_target_level=initial + initial * params.profit_target_percent / 100.0,
        max_drawdown_level=initial - initial * params.max_drawdown_percent / 100.0,
    )
