# challenge/drawdown.py
from __future__ import annotations

from itertools import groupby
from typing import Iterable, List, Sequence, Tuple

from challenge.models import BalancePoint, DailySummary, DrawdownSummary, TradeRecord
from challenge.normalizer import ensure_records


def peak_series(curve: Sequence[BalancePoint]) -> List[float]:
    """
    Running peak for every point of the curve. The first point is the
    initial balance, so the peak never drops below it and never decreases.
    """
    peaks: List[float] = []
    peak = curve[0].balance if curve else 0.0
    for point in curve:
        if point.balance > peak:
            peak = point.balance
        peaks.append(peak)
    return peaks


def max_drawdown_values(curve: Sequence[BalancePoint]) -> Tuple[float, float, float]:
    """
    Return (amount, percent, final_peak).

    amount is the largest peak-to-trough decline; percent is that amount
    relative to the peak in force at the trough (first trough wins on ties).
    """
    if not curve:
        return 0.0, 0.0, 0.0

    max_dd = 0.0
    peak_at_trough = 0.0
    peaks = peak_series(curve)

    for point, peak in zip(curve, peaks):
        dd = peak - point.balance
        if dd > max_dd:
            max_dd = dd
            peak_at_trough = peak

    pct = max_dd / peak_at_trough * 100.0 if max_dd > 0 and peak_at_trough > 0 else 0.0
    return max_dd, pct, peaks[-1]


def daily_breakdown(curve: Sequence[BalancePoint]) -> Tuple[DailySummary, ...]:
    """
    Bucket the curve's trade points by calendar date of their timestamp.

    The leading point carries the initial balance, not a trade, so it only
    seeds the first day's starting balance.
    """
    if len(curve) < 2:
        return ()

    days: List[DailySummary] = []
    balance_before = curve[0].balance

    for day, group in groupby(curve[1:], key=lambda p: p.timestamp.date()):
        points = list(group)
        balances = [p.balance for p in points]
        ending = balances[-1]
        days.append(
            DailySummary(
                day=day,
                starting_balance=balance_before,
                ending_balance=ending,
                low_balance=min(balances),
                pnl=ending - balance_before,
                trades=len(points),
            )
        )
        balance_before = ending

    return tuple(days)


def summarize_drawdown(
    curve: Sequence[BalancePoint],
    trades: Iterable[TradeRecord] = (),
) -> DrawdownSummary:
    """
    Peak-tracked max drawdown plus the daily drawdown of the most recent
    trading day.

    The most recent day is the latest close date on the curve or the latest
    open date of a still-open trade. A day holding only open trades starts
    at the current balance and has no drawdown yet.
    """
    if not curve:
        raise ValueError("balance curve must contain at least the initial point")

    amount, pct, peak = max_drawdown_values(curve)
    balances = [p.balance for p in curve]
    daily = daily_breakdown(curve)

    open_days = [t.open_time.date() for t in ensure_records(list(trades)) if not t.is_closed]
    candidates = [d for d in (daily[-1].day if daily else None, max(open_days, default=None)) if d is not None]
    trading_day = max(candidates, default=None)

    if trading_day is None:
        daily_start, daily_dd, today_pnl = curve[0].balance, 0.0, 0.0
    elif daily and daily[-1].day == trading_day:
        last = daily[-1]
        daily_start, daily_dd, today_pnl = last.starting_balance, last.drawdown, last.pnl
    else:
        daily_start, daily_dd, today_pnl = curve[-1].balance, 0.0, 0.0

    return DrawdownSummary(
        max_drawdown_amount=amount,
        max_drawdown_percent=pct,
        peak_balance=peak,
        max_balance=max(balances),
        min_balance=min(balances),
        trading_day=trading_day,
        daily_starting_balance=daily_start,
        daily_drawdown_amount=daily_dd,
        today_pnl=today_pnl,
    )
