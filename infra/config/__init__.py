from __future__ import annotations

from .account_config import AccountConfig, TradeFileFormat, TradeSourceConfig
from .evaluation_config import EvaluationConfig
from .logging_config import LoggingConfig
from .run_config import RunConfig

__all__ = [
    # Accounts
    "AccountConfig",
    "TradeSourceConfig",
    "TradeFileFormat",

    # Evaluation
    "EvaluationConfig",

    # Logging
    "LoggingConfig",

    # Top-level run config
    "RunConfig",
]
