# challenge/statistics.py
"""
Win/loss statistics over closed trades: win rate, profit factor, expectancy,
averages and extremes, plus a per-symbol breakdown.

A trade with net == 0 counts toward total_trades but is neither a win nor a
loss, so win_rate + loss_rate can stay below 100.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from challenge.models import AggregateStats, Side, SymbolStat, TradeRecord
from challenge.normalizer import ensure_records


def _ratio(gains: float, losses: float) -> float:
    """
    gains / losses with the dashboard conventions: +inf when only gains
    exist, 0 when both are zero.
    """
    if losses > 0:
        return gains / losses
    if gains > 0:
        return float("inf")
    return 0.0


def _pct(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole else 0.0


def symbol_breakdown(trades: Iterable[TradeRecord]) -> Tuple[SymbolStat, ...]:
    """
    Per-symbol stats, most traded symbol first (symbol name breaks ties).
    """
    by_symbol: Dict[str, List[float]] = defaultdict(list)
    for t in trades:
        by_symbol[t.symbol].append(t.net_profit)

    rows: List[SymbolStat] = []
    for symbol, nets in by_symbol.items():
        wins = sum(1 for n in nets if n > 0)
        losses = sum(1 for n in nets if n < 0)
        total = sum(nets)
        rows.append(
            SymbolStat(
                symbol=symbol,
                trades=len(nets),
                wins=wins,
                losses=losses,
                win_rate=_pct(wins, len(nets)),
                total_profit=total,
                average_profit=total / len(nets),
            )
        )

    rows.sort(key=lambda s: (-s.trades, s.symbol))
    return tuple(rows)


def aggregate_stats(trades: Iterable[TradeRecord]) -> AggregateStats:
    """Compute AggregateStats over the closed trades in `trades`."""
    closed = [t for t in ensure_records(list(trades)) if t.is_closed]
    if not closed:
        return AggregateStats()

    nets = [t.net_profit for t in closed]
    wins = [n for n in nets if n > 0]
    losses = [n for n in nets if n < 0]

    total = len(closed)
    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))

    average_win = gross_profit / len(wins) if wins else 0.0
    average_loss = gross_loss / len(losses) if losses else 0.0

    holds = [t.hold_seconds for t in closed]

    return AggregateStats(
        total_trades=total,
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=_pct(len(wins), total),
        loss_rate=_pct(len(losses), total),
        profit_factor=_ratio(gross_profit, gross_loss),
        expectancy=(gross_profit - gross_loss) / total,
        average_win=average_win,
        average_loss=average_loss,
        largest_win=max(wins) if wins else 0.0,
        largest_loss=abs(min(losses)) if losses else 0.0,
        total_volume=sum(t.volume for t in closed),
        net_profit=sum(nets),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        profit_loss_ratio=_ratio(average_win, average_loss),
        average_hold_seconds=sum(holds) / len(holds),
        buy_trades=sum(1 for t in closed if t.side == Side.BUY),
        sell_trades=sum(1 for t in closed if t.side == Side.SELL),
        symbols=symbol_breakdown(closed),
    )
