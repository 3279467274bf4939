from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from challenge.metrics import create_default_metric_registry


class EvaluationConfig(BaseModel):
    """
    How accounts are evaluated.
    """

    model_config = ConfigDict(extra="forbid")

    metrics: List[str] = Field(
        default_factory=list,
        description="Named metrics to compute; empty means all registered metrics.",
    )
    as_of: Optional[datetime] = Field(
        None,
        description="Evaluation time (naive UTC). Defaults to now.",
    )
    strict: bool = Field(
        False,
        description="Fail the run when any trade record is rejected by the normalizer.",
    )
    max_workers: Optional[int] = Field(
        None,
        ge=1,
        description="Process pool size for multi-account runs; 1/None evaluates sequentially.",
    )

    @field_validator("metrics")
    @classmethod
    def _known_metrics(cls, v: List[str]) -> List[str]:
        known = set(create_default_metric_registry().list_metrics())
        unknown = [m for m in v if m not in known]
        if unknown:
            raise ValueError(f"unknown metrics {unknown}; known: {sorted(known)}")
        return v

    @field_validator("as_of")
    @classmethod
    def _naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v
