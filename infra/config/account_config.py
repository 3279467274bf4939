# infra/config/account_config.py
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from challenge.models import AccountParameters


class TradeFileFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    PARQUET = "parquet"


class TradeSourceConfig(BaseModel):
    """
    Where the raw trade history of one account is read from.

    YAML example:

      trades:
        path: "data/trades/100234.json"
        format: json      # optional, inferred from the suffix
    """

    model_config = ConfigDict(extra="forbid")

    path: Path = Field(..., description="File holding the raw trade payloads.")
    format: Optional[TradeFileFormat] = Field(
        None,
        description="json / csv / parquet; inferred from the file suffix when omitted.",
    )

    @field_validator("format", mode="before")
    @classmethod
    def _norm_format(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def _infer_format(self) -> "TradeSourceConfig":
        if self.format is None:
            suffixes = [s.lower() for s in self.path.suffixes]
            if ".parquet" in suffixes:
                self.format = TradeFileFormat.PARQUET
            elif suffixes and suffixes[-1] == ".csv":
                self.format = TradeFileFormat.CSV
            elif suffixes and suffixes[-1] == ".json":
                self.format = TradeFileFormat.JSON
            else:
                raise ValueError(f"cannot infer trade file format from {self.path}; set 'format'")
        return self


class AccountConfig(BaseModel):
    """
    Challenge rules for one broker account plus where its trades live.

    Percentages are whole percents (10 = 10%). A drawdown limit of 0 means
    zero tolerance.
    """

    model_config = ConfigDict(extra="forbid")

    account_id: str = Field(..., min_length=1, description="Broker login or challenge id.")

    initial_balance: float = Field(..., gt=0.0)
    profit_target_percent: float = Field(0.0, ge=0.0)
    max_drawdown_percent: float = Field(0.0, ge=0.0)
    daily_drawdown_percent: float = Field(0.0, ge=0.0)
    min_trading_days: int = Field(0, ge=0)

    trades: TradeSourceConfig

    @field_validator("account_id", mode="before")
    @classmethod
    def _coerce_account_id(cls, v):
        # logins are often written as bare numbers in YAML
        if isinstance(v, int):
            return str(v)
        return v

    def to_parameters(self) -> AccountParameters:
        return AccountParameters(
            initial_balance=self.initial_balance,
            profit_target_percent=self.profit_target_percent,
            max_drawdown_percent=self.max_drawdown_percent,
            daily_drawdown_percent=self.daily_drawdown_percent,
            min_trading_days=self.min_trading_days,
        )
