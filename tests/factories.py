# tests/factories.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from challenge.models import Side, TradeRecord

T0 = datetime(2025, 3, 3, 9, 0)


def make_trade(
    trade_id: str,
    net: float,
    close_time: Optional[datetime] = None,
    *,
    symbol: str = "EURUSD",
    side: Optional[Side] = Side.BUY,
    volume: float = 1.0,
    open_time: Optional[datetime] = None,
    commission: float = 0.0,
    swap: float = 0.0,
    closed: bool = True,
    comment: Optional[str] = None,
) -> TradeRecord:
    """
    Build a TradeRecord whose net P&L equals `net` (profit absorbs the
    commission and swap passed in).
    """
    if close_time is None and closed:
        close_time = T0 + timedelta(hours=1)
    if open_time is None:
        open_time = (close_time or T0) - timedelta(minutes=30)

    return TradeRecord(
        id=trade_id,
        symbol=symbol,
        side=side,
        volume=volume,
        open_time=open_time,
        close_time=close_time if closed else None,
        profit=net - commission - swap,
        commission=commission,
        swap=swap,
        comment=comment,
    )


def at(day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Timestamp on 2025-03-<day>."""
    return datetime(2025, 3, day, hour, minute)
