from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from infra.config import RunConfig
from infra.config_loader import load_run_config
from infra.logging_setup import get_logger, init_logging
from infra.trade_source import LocalTradeSource

from challenge.engine import AccountJob, evaluate_accounts
from challenge.errors import StrictModeViolation
from challenge.models import EvaluationResult
from challenge.summary import print_evaluation_summary


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate challenge accounts: balance curve, drawdown, objectives and trade stats."
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default="config/challenge_run.yml",
        help="Path to the YAML/JSON run config (default: config/challenge_run.yml).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when any trade record is rejected (overrides evaluation.strict).",
    )
    return parser.parse_args(argv)


def _log_rejected(logger, account_id: str, result: EvaluationResult) -> None:
    for err in result.rejected:
        logger.warning("[%s] rejected trade %s", account_id, err)


def run(run_cfg: RunConfig, *, strict: bool = False) -> List[EvaluationResult]:
    """
    Load every account's trades, evaluate them and log a summary per account.
    Raises StrictModeViolation when strict and any record was rejected.
    """
    logger = get_logger(run_cfg.logging.name)
    source = LocalTradeSource()
    eval_cfg = run_cfg.evaluation
    strict = strict or eval_cfg.strict

    jobs = []
    for acc in run_cfg.accounts:
        raw = source.load(acc.trades)
        jobs.append(AccountJob(account_id=acc.account_id, parameters=acc.to_parameters(), raw_trades=raw))
        logger.info(
            "Account %s: initial_balance=%.2f target=%.2f%% max_dd=%.2f%% daily_dd=%.2f%% min_days=%d",
            acc.account_id,
            acc.initial_balance,
            acc.profit_target_percent,
            acc.max_drawdown_percent,
            acc.daily_drawdown_percent,
            acc.min_trading_days,
        )

    results = evaluate_accounts(
        jobs,
        as_of=eval_cfg.as_of,
        metric_names=eval_cfg.metrics or None,
        max_workers=eval_cfg.max_workers,
    )

    violations = []
    for job, result in zip(jobs, results):
        _log_rejected(logger, job.account_id, result)
        if result.rejected:
            violations.append(job.account_id)
        print_evaluation_summary(result, account_id=job.account_id, logger=logger)
        logger.info("Account %s outcome: %s", job.account_id, result.outcome.value)

    if strict and violations:
        raise StrictModeViolation(
            f"Rejected trade records for account(s): {', '.join(violations)}"
        )
    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    # 1) Load config
    run_cfg = load_run_config(args.config)

    # 2) Initialize logging
    logfile = init_logging(
        run_name=run_cfg.logging.name,
        level_name=run_cfg.logging.level,
        log_dir=run_cfg.logging.log_dir,
        to_console=run_cfg.logging.to_console,
        to_file=run_cfg.logging.to_file,
    )
    logger = get_logger(run_cfg.logging.name)
    logger.info("=== Starting challenge evaluation run: %s ===", run_cfg.name)
    logger.info("Description: %s", run_cfg.description or "(none)")
    logger.info("Log file for this run: %s", logfile)

    # 3) Evaluate
    try:
        run(run_cfg, strict=args.strict)
    except StrictModeViolation as exc:
        logger.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
