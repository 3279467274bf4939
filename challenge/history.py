# challenge/history.py
"""
Filtering, sorting and counting for the trading history table.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from challenge.models import Side, TradeRecord
from challenge.normalizer import ensure_records


class TradeFilter(str, Enum):
    ALL = "all"
    PROFIT = "profit"
    LOSS = "loss"
    BUY = "buy"
    SELL = "sell"


class SortField(str, Enum):
    CLOSE_TIME = "close_time"
    SYMBOL = "symbol"
    PROFIT = "profit"
    VOLUME = "volume"


@dataclass(frozen=True)
class HistoryCounts:
    all: int
    profitable: int
    losing: int
    buy: int
    sell: int


_FILTERS = {
    TradeFilter.ALL: lambda t: True,
    TradeFilter.PROFIT: lambda t: t.net_profit > 0,
    TradeFilter.LOSS: lambda t: t.net_profit < 0,
    TradeFilter.BUY: lambda t: t.side == Side.BUY,
    TradeFilter.SELL: lambda t: t.side == Side.SELL,
}

_SORT_VALUES = {
    SortField.CLOSE_TIME: lambda t: t.activity_time,
    SortField.SYMBOL: lambda t: t.symbol,
    SortField.PROFIT: lambda t: t.net_profit,
    SortField.VOLUME: lambda t: t.volume,
}


def filter_trades(
    trades: Iterable[TradeRecord],
    search: Optional[str] = None,
    kind: TradeFilter = TradeFilter.ALL,
) -> List[TradeRecord]:
    """Case-insensitive search over symbol and comment, then a kind filter."""
    out = ensure_records(list(trades))
    query = (search or "").strip().lower()
    if query:
        out = [t for t in out if query in t.symbol.lower() or query in (t.comment or "").lower()]
    predicate = _FILTERS[TradeFilter(kind)]
    return [t for t in out if predicate(t)]


def sort_trades(
    trades: Iterable[TradeRecord],
    field: SortField = SortField.CLOSE_TIME,
    descending: bool = True,
) -> List[TradeRecord]:
    """
    Sort by one column. Ties always fall back to ascending id, whatever the
    direction, so equal rows never swap between renders.
    """
    value_of = _SORT_VALUES[SortField(field)]
    # two stable passes: id first, then the column
    out = sorted(ensure_records(list(trades)), key=lambda t: t.id)
    out.sort(key=value_of, reverse=descending)
    return out


def history_counts(trades: Iterable[TradeRecord]) -> HistoryCounts:
    items = ensure_records(list(trades))
    return HistoryCounts(
        all=len(items),
        profitable=sum(1 for t in items if t.net_profit > 0),
        losing=sum(1 for t in items if t.net_profit < 0),
        buy=sum(1 for t in items if t.side == Side.BUY),
        sell=sum(1 for t in items if t.side == Side.SELL),
    )
