# challenge/summary.py
from __future__ import annotations

from typing import Optional, Tuple
import logging

from .models import EvaluationResult

import pandas as pd


def _fmt_ratio(value: float) -> str:
    return "inf" if value == float("inf") else f"{value:.2f}"


def print_evaluation_summary(
    result: EvaluationResult,
    account_id: str = "",
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Print a human-readable summary of one evaluation.
    If logger is given, uses logger.info; otherwise, prints to stdout.
    """
    out = logger.info if logger else print
    dd = result.drawdown
    stats = result.stats

    out("")
    out(f"=== Challenge Evaluation: {account_id or '(unnamed)'} ===")
    out(f"Evaluated: {result.evaluated_at.isoformat()}")
    out(f"Outcome:   {result.outcome.value}")
    out(f"Balance:   {result.initial_balance:.2f} -> {result.final_balance:.2f}")
    out(f"Max DD:    {dd.max_drawdown_amount:.2f} ({dd.max_drawdown_percent:.2f}%)")
    out(f"Daily DD:  {dd.daily_drawdown_amount:.2f} on {dd.trading_day or '-'} "
        f"(start {dd.daily_starting_balance:.2f})")

    out("")
    out("Objectives:")
    for obj in result.objectives:
        out(f"  {obj.kind.value:18s} {obj.status.value:12s} "
            f"current={obj.current: .2f} target={obj.target: .2f} ({obj.progress:.1f}%)")

    out("")
    out(f"Trades:    {stats.total_trades} closed, {len(result.trades) - stats.total_trades} open, "
        f"{len(result.rejected)} rejected")
    out(f"Win rate:  {stats.win_rate:.2f}%  Loss rate: {stats.loss_rate:.2f}%")
    out(f"PF:        {_fmt_ratio(stats.profit_factor)}  Expectancy: {stats.expectancy:.2f}")

    if result.metrics:
        out("")
        out("Metrics:")
        for name, value in sorted(result.metrics.items()):
            if isinstance(value, float):
                out(f"  {name:20s} {value: .4f}")
            else:
                out(f"  {name:20s} {value}")
    out("")


def result_to_dataframes(result: EvaluationResult) -> Tuple[pd.DataFrame, ...]:
    """
    Convert an EvaluationResult into DataFrames for tables and charts:
      - curve_df
      - objectives_df
      - symbols_df
      - daily_df
    """
    curve_rows = [
        {
            "time": p.timestamp,
            "balance": p.balance,
        }
        for p in result.balance_curve
    ]

    objective_rows = [
        {
            "kind": o.kind.value,
            "percent": o.percent,
            "target": o.target,
            "current": o.current,
            "status": o.status.value,
            "progress": o.progress,
        }
        for o in result.objectives
    ]

    symbol_rows = [
        {
            "symbol": s.symbol,
            "trades": s.trades,
            "wins": s.wins,
            "losses": s.losses,
            "win_rate": s.win_rate,
            "total_profit": s.total_profit,
            "average_profit": s.average_profit,
        }
        for s in result.symbol_stats
    ]

    daily_rows = [
        {
            "day": d.day,
            "starting_balance": d.starting_balance,
            "ending_balance": d.ending_balance,
            "low_balance": d.low_balance,
            "pnl": d.pnl,
            "trades": d.trades,
            "drawdown": d.drawdown,
        }
        for d in result.daily
    ]

    curve_df = pd.DataFrame(curve_rows, columns=["time", "balance"])
    objectives_df = pd.DataFrame(
        objective_rows, columns=["kind", "percent", "target", "current", "status", "progress"]
    )
    symbols_df = pd.DataFrame(
        symbol_rows,
        columns=["symbol", "trades", "wins", "losses", "win_rate", "total_profit", "average_profit"],
    )
    daily_df = pd.DataFrame(
        daily_rows,
        columns=["day", "starting_balance", "ending_balance", "low_balance", "pnl", "trades", "drawdown"],
    )
    return curve_df, objectives_df, symbols_df, daily_df
