# challenge/objectives.py
from __future__ import annotations

from typing import Sequence, Tuple

from challenge.drawdown import daily_breakdown
from challenge.models import (
    AccountParameters,
    BalancePoint,
    ChallengeOutcome,
    DrawdownSummary,
    Objective,
    ObjectiveKind,
    ObjectiveStatus,
)

# Share of a loss limit above which a drawdown rule is flagged in progress.
WARNING_RATIO = 0.8


def _progress(current: float, target: float, status: ObjectiveStatus) -> float:
    if target > 0:
        return min(100.0, max(0.0, current / target * 100.0))
    return 100.0 if status.is_terminal else 0.0


def _limit_status(current: float, target: float) -> ObjectiveStatus:
    """
    Shared state machine for loss limits. A zero limit is zero tolerance:
    any drawdown at all breaches it.
    """
    breached = current >= target if target > 0 else current > 0
    if breached:
        return ObjectiveStatus.FAILED
    if current > WARNING_RATIO * target:
        return ObjectiveStatus.IN_PROGRESS
    return ObjectiveStatus.PENDING


def profit_target_objective(params: AccountParameters, last_balance: float) -> Objective:
    pct = params.profit_target_percent
    target = params.initial_balance * pct / 100.0
    current = last_balance - params.initial_balance

    if current >= target:
        status = ObjectiveStatus.COMPLETED
    elif current > 0:
        status = ObjectiveStatus.IN_PROGRESS
    else:
        status = ObjectiveStatus.PENDING

    return Objective(
        kind=ObjectiveKind.PROFIT_TARGET,
        percent=pct,
        target=target,
        current=current,
        status=status,
        progress=_progress(current, target, status),
    )


def max_drawdown_objective(params: AccountParameters, drawdown: DrawdownSummary) -> Objective:
    pct = params.max_drawdown_percent
    target = params.initial_balance * pct / 100.0
    current = drawdown.max_drawdown_amount
    status = _limit_status(current, target)
    return Objective(
        kind=ObjectiveKind.MAX_DRAWDOWN,
        percent=pct,
        target=target,
        current=current,
        status=status,
        progress=_progress(current, target, status),
    )


def daily_drawdown_objective(params: AccountParameters, drawdown: DrawdownSummary) -> Objective:
    pct = params.daily_drawdown_percent
    target = drawdown.daily_starting_balance * pct / 100.0
    current = drawdown.daily_drawdown_amount
    status = _limit_status(current, target)
    return Objective(
        kind=ObjectiveKind.DAILY_DRAWDOWN,
        percent=pct,
        target=target,
        current=current,
        status=status,
        progress=_progress(current, target, status),
    )


def min_trading_days_objective(params: AccountParameters, trading_days: int) -> Objective:
    required = params.min_trading_days

    if required == 0 or trading_days >= required:
        status = ObjectiveStatus.COMPLETED
    elif trading_days > 0:
        status = ObjectiveStatus.IN_PROGRESS
    else:
        status = ObjectiveStatus.PENDING

    return Objective(
        kind=ObjectiveKind.MIN_TRADING_DAYS,
        percent=float(required),
        target=float(required),
        current=float(trading_days),
        status=status,
        progress=_progress(trading_days, required, status),
    )


def evaluate_objectives(
    params: AccountParameters,
    curve: Sequence[BalancePoint],
    drawdown: DrawdownSummary,
) -> Tuple[Objective, ...]:
    """
    Evaluate every rule against one snapshot. Order: profit target, max
    drawdown, daily drawdown, min trading days.
    """
    if not curve:
        raise ValueError("balance curve must contain at least the initial point")

    trading_days = len(daily_breakdown(curve))
    return (
        profit_target_objective(params, curve[-1].balance),
        max_drawdown_objective(params, drawdown),
        daily_drawdown_objective(params, drawdown),
        min_trading_days_objective(params, trading_days),
    )


def challenge_outcome(objectives: Sequence[Objective]) -> ChallengeOutcome:
    """
    failed if any rule failed; passed once profit target and trading days
    are both completed; otherwise still in progress.
    """
    if any(o.status == ObjectiveStatus.FAILED for o in objectives):
        return ChallengeOutcome.FAILED

    required = {ObjectiveKind.PROFIT_TARGET, ObjectiveKind.MIN_TRADING_DAYS}
    completed = {o.kind for o in objectives if o.status == ObjectiveStatus.COMPLETED}
    if required <= completed:
        return ChallengeOutcome.PASSED
    return ChallengeOutcome.IN_PROGRESS
