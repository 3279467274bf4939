# challenge/engine.py
from __future__ import annotations

import concurrent.futures as cf
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from challenge.curve import build_balance_curve, chart_references
from challenge.drawdown import daily_breakdown, summarize_drawdown
from challenge.metrics import MetricRegistry, create_default_metric_registry
from challenge.models import AccountParameters, EvaluationResult
from challenge.normalizer import normalize_trades
from challenge.objectives import challenge_outcome, evaluate_objectives
from challenge.statistics import aggregate_stats


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, matching normalized timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def evaluate_account(
    parameters: AccountParameters,
    raw_trades: Sequence[Any],
    *,
    as_of: Optional[datetime] = None,
    metric_names: Optional[List[str]] = None,
    registry: Optional[MetricRegistry] = None,
) -> EvaluationResult:
    """
    Evaluate one account snapshot.

    raw_trades may hold raw payloads or TradeRecords. Rejected payloads are
    reported in result.rejected; the rest is evaluated. Pure apart from
    reading the clock when `as_of` is omitted.
    """
    evaluated_at = as_of if as_of is not None else utc_now()

    batch = normalize_trades(raw_trades)
    trades = batch.trades

    curve = build_balance_curve(parameters.initial_balance, trades, as_of=evaluated_at)
    drawdown = summarize_drawdown(curve, trades)
    objectives = evaluate_objectives(parameters, curve, drawdown)

    result = EvaluationResult(
        parameters=parameters,
        evaluated_at=evaluated_at,
        balance_curve=curve,
        drawdown=drawdown,
        daily=daily_breakdown(curve),
        objectives=objectives,
        stats=aggregate_stats(trades),
        outcome=challenge_outcome(objectives),
        references=chart_references(parameters),
        trades=trades,
        rejected=batch.rejected,
    )

    reg = registry or create_default_metric_registry()
    return replace(result, metrics=reg.compute_all(result, metric_names))


@dataclass(frozen=True)
class AccountJob:
    """One account to evaluate in a batch."""
    account_id: str
    parameters: AccountParameters
    raw_trades: Sequence[Any]


def _evaluate_job(job: AccountJob, as_of: datetime, metric_names: Optional[List[str]]) -> EvaluationResult:
    return evaluate_account(job.parameters, job.raw_trades, as_of=as_of, metric_names=metric_names)


def evaluate_accounts(
    jobs: Sequence[AccountJob],
    *,
    as_of: Optional[datetime] = None,
    metric_names: Optional[List[str]] = None,
    max_workers: Optional[int] = None,
) -> List[EvaluationResult]:
    """
    Evaluate independent accounts. Evaluations share no state, so with
    max_workers > 1 they run in a process pool. Results follow job order.
    """
    evaluated_at = as_of if as_of is not None else utc_now()
    workers = max_workers or 1

    if workers <= 1 or len(jobs) <= 1:
        return [_evaluate_job(job, evaluated_at, metric_names) for job in jobs]

    with cf.ProcessPoolExecutor(max_workers=min(workers, len(jobs))) as ex:
        futs = [ex.submit(_evaluate_job, job, evaluated_at, metric_names) for job in jobs]
        return [fut.result() for fut in futs]
