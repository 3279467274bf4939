# challenge/metrics.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .models import EvaluationResult

MetricFunc = Callable[[EvaluationResult], float]


class MetricRegistry:
    """
    Name -> metric function mapping.

    Each metric function:
      (EvaluationResult) -> float
    """

    def __init__(self) -> None:
        self._metrics: Dict[str, MetricFunc] = {}

    def register(self, name: str, func: MetricFunc) -> None:
        if name in self._metrics:
            raise ValueError(f"Metric '{name}' already registered")
        self._metrics[name] = func

    def compute(self, name: str, result: EvaluationResult) -> float:
        if name not in self._metrics:
            raise KeyError(f"Unknown metric '{name}'. Known: {', '.join(self._metrics)}")
        return self._metrics[name](result)

    def compute_all(
        self,
        result: EvaluationResult,
        names: Optional[List[str]] = None,
    ) -> Dict[str, float]:
        metric_names = names or list(self._metrics.keys())
        return {n: self.compute(n, result) for n in metric_names}

    def list_metrics(self) -> List[str]:
        return list(self._metrics.keys())


# ----------------------------------------------------------------------
# Concrete metric implementations
# ----------------------------------------------------------------------


def m_net_pnl(res: EvaluationResult) -> float:
    return res.final_balance - res.initial_balance


def m_total_return_pct(res: EvaluationResult) -> float:
    return (res.final_balance / res.initial_balance - 1.0) * 100.0


def m_max_drawdown(res: EvaluationResult) -> float:
    return res.drawdown.max_drawdown_amount


def m_max_drawdown_pct(res: EvaluationResult) -> float:
    return res.drawdown.max_drawdown_percent


def m_daily_drawdown(res: EvaluationResult) -> float:
    return res.drawdown.daily_drawdown_amount


def m_n_trades(res: EvaluationResult) -> float:
    return float(res.stats.total_trades)


def m_win_rate_pct(res: EvaluationResult) -> float:
    return res.stats.win_rate


def m_profit_factor(res: EvaluationResult) -> float:
    return res.stats.profit_factor


def m_expectancy(res: EvaluationResult) -> float:
    return res.stats.expectancy


def m_trading_days(res: EvaluationResult) -> float:
    return float(len(res.daily))


def m_today_pnl(res: EvaluationResult) -> float:
    return res.drawdown.today_pnl


def m_max_balance(res: EvaluationResult) -> float:
    return res.drawdown.max_balance


def m_min_balance(res: EvaluationResult) -> float:
    return res.drawdown.min_balance


def m_total_lots(res: EvaluationResult) -> float:
    return res.stats.total_volume


# ----------------------------------------------------------------------
# Helper to build default registry
# ----------------------------------------------------------------------


def create_default_metric_registry() -> MetricRegistry:
    reg = MetricRegistry()
    reg.register("net_pnl", m_net_pnl)
    reg.register("total_return_pct", m_total_return_pct)
    reg.register("max_drawdown", m_max_drawdown)
    reg.register("max_drawdown_pct", m_max_drawdown_pct)
    reg.register("daily_drawdown", m_daily_drawdown)
    reg.register("n_trades", m_n_trades)
    reg.register("win_rate_pct", m_win_rate_pct)
    reg.register("profit_factor", m_profit_factor)
    reg.register("expectancy", m_expectancy)
    reg.register("trading_days", m_trading_days)
    reg.register("today_pnl", m_today_pnl)
    reg.register("max_balance", m_max_balance)
    reg.register("min_balance", m_min_balance)
    reg.register("total_lots", m_total_lots)
    return reg
