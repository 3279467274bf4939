# challenge/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class ObjectiveKind(str, Enum):
    PROFIT_TARGET = "profit_target"
    MAX_DRAWDOWN = "max_drawdown"
    DAILY_DRAWDOWN = "daily_drawdown"
    MIN_TRADING_DAYS = "min_trading_days"


class ObjectiveStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ObjectiveStatus.COMPLETED, ObjectiveStatus.FAILED)


class ChallengeOutcome(str, Enum):
    IN_PROGRESS = "in_progress"
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True)
class TradeRecord:
    """
    One normalized position, closed or still open.

    net P&L is profit + commission + swap (commission and swap are signed,
    usually negative). side is None when the payload did not say.
    """
    id: str
    symbol: str
    side: Optional[Side]
    volume: float
    open_time: datetime
    close_time: Optional[datetime] = None

    profit: float = 0.0
    commission: float = 0.0
    swap: float = 0.0

    open_price: Optional[float] = None
    close_price: Optional[float] = None
    comment: Optional[str] = None

    @property
    def net_profit(self) -> float:
        return self.profit + self.commission + self.swap

    @property
    def is_closed(self) -> bool:
        return self.close_time is not None

    @property
    def activity_time(self) -> datetime:
        """Close time, or open time while the position is still open."""
        return self.close_time if self.close_time is not None else self.open_time

    @property
    def hold_seconds(self) -> Optional[float]:
        if self.close_time is None:
            return None
        return (self.close_time - self.open_time).total_seconds()


@dataclass(frozen=True)
class AccountParameters:
    """
    Evaluation inputs for one challenge account.

    A percentage of 0 is meaningful: for the drawdown rules it means zero
    tolerance, not "no limit".
    """
    initial_balance: float
    profit_target_percent: float = 0.0
    max_drawdown_percent: float = 0.0
    daily_drawdown_percent: float = 0.0
    min_trading_days: int = 0

    def __post_init__(self) -> None:
        if not self.initial_balance > 0:
            raise ValueError(f"initial_balance must be positive, got {self.initial_balance!r}")
        for name in ("profit_target_percent", "max_drawdown_percent", "daily_drawdown_percent"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value!r}")
        if self.min_trading_days < 0:
            raise ValueError(f"min_trading_days must be >= 0, got {self.min_trading_days!r}")


@dataclass(frozen=True)
class BalancePoint:
    """
    Single point on the balance curve.
    """
    timestamp: datetime
    balance: float


@dataclass(frozen=True)
class DailySummary:
    """
    Balance movement of one calendar trading day.
    """
    day: date
    starting_balance: float
    ending_balance: float
    low_balance: float
    pnl: float
    trades: int

    @property
    def drawdown(self) -> float:
        return max(0.0, self.starting_balance - self.low_balance)


@dataclass(frozen=True)
class DrawdownSummary:
    max_drawdown_amount: float = 0.0
    # relative to the peak in force at the trough
    max_drawdown_percent: float = 0.0

    peak_balance: float = 0.0
    max_balance: float = 0.0
    min_balance: float = 0.0

    trading_day: Optional[date] = None
    daily_starting_balance: float = 0.0
    daily_drawdown_amount: float = 0.0
    today_pnl: float = 0.0


@dataclass(frozen=True)
class Objective:
    kind: ObjectiveKind
    percent: float
    target: float
    current: float
    status: ObjectiveStatus
    progress: float = 0.0


@dataclass(frozen=True)
class SymbolStat:
    symbol: str
    trades: int
    wins: int
    losses: int
    win_rate: float
    total_profit: float
    average_profit: float


@dataclass(frozen=True)
class AggregateStats:
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    loss_rate: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    total_volume: float = 0.0

    net_profit: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    profit_loss_ratio: float = 0.0
    average_hold_seconds: float = 0.0
    buy_trades: int = 0
    sell_trades: int = 0

    symbols: Tuple[SymbolStat, ...] = ()


@dataclass(frozen=True)
class ChartReferences:
    """
    Horizontal reference lines drawn over the balance chart.
    """
    profit_target_level: float
    max_drawdown_level: float


@dataclass(frozen=True)
class EvaluationResult:
    """
    Everything derived from one account snapshot. Recomputed in full on
    every evaluation; callers must treat it as read-only.
    """
    parameters: AccountParameters
    evaluated_at: datetime

    balance_curve: Tuple[BalancePoint, ...]
    drawdown: DrawdownSummary
    daily: Tuple[DailySummary, ...]
    objectives: Tuple[Objective, ...]
    stats: AggregateStats
    outcome: ChallengeOutcome
    references: ChartReferences

    trades: Tuple[TradeRecord, ...] = ()
    rejected: Tuple[Exception, ...] = ()

    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def symbol_stats(self) -> Tuple[SymbolStat, ...]:
        return self.stats.symbols

    @property
    def initial_balance(self) -> float:
        return self.parameters.initial_balance

    @property
    def final_balance(self) -> float:
        return self.balance_curve[-1].balance

    @property
    def closed_trades(self) -> Tuple[TradeRecord, ...]:
        return tuple(t for t in self.trades if t.is_closed)

    def objective(self, kind: ObjectiveKind) -> Objective:
        for obj in self.objectives:
            if obj.kind == kind:
                return obj
        raise KeyError(kind)
