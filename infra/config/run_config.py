# infra/config/run_config.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .account_config import AccountConfig
from .evaluation_config import EvaluationConfig
from .logging_config import LoggingConfig


class RunConfig(BaseModel):
    """
    Top-level configuration for one evaluation run.
    One YAML/JSON file → one RunConfig → one or more accounts.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field("default", description="Human-readable run name.")
    description: Optional[str] = Field(None, description="Optional free-text description for this run.")

    accounts: List[AccountConfig] = Field(..., min_length=1)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def _unique_account_ids(self) -> "RunConfig":
        seen = set()
        dupes = []
        for acc in self.accounts:
            if acc.account_id in seen:
                dupes.append(acc.account_id)
            seen.add(acc.account_id)
        if dupes:
            raise ValueError(f"duplicate account_id(s): {sorted(set(dupes))}")
        return self
