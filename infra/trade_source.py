# infra/trade_source.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from infra.config.account_config import TradeFileFormat, TradeSourceConfig
from infra.logging_setup import get_logger


def _positions(block: Any, key: str) -> List[Dict[str, Any]]:
    if isinstance(block, dict):
        block = block.get(key)
    return list(block or [])


def extract_trade_payloads(doc: Any) -> List[Dict[str, Any]]:
    """
    Pull the list of raw trade payloads out of a JSON document.

    Accepted shapes:
      - a bare list of trades
      - {"data": [...]} or {"trades": [...]} envelopes
      - an account snapshot with openPositions.open / closedPositions.closed
    """
    if isinstance(doc, list):
        return doc

    if isinstance(doc, dict):
        for key in ("data", "trades"):
            if isinstance(doc.get(key), list):
                return doc[key]

        if "openPositions" in doc or "closedPositions" in doc:
            return _positions(doc.get("closedPositions"), "closed") + _positions(doc.get("openPositions"), "open")

    raise ValueError(
        "Unsupported trade document: expected a list, a {'data'|'trades': [...]} envelope "
        "or an account snapshot with openPositions/closedPositions."
    )


class LocalTradeSource:
    """
    Loads raw trade payloads for one account from a local file.

    Payloads are returned untouched (apart from empty cells becoming None);
    mapping them onto TradeRecords is the normalizer's job.
    """

    def __init__(self) -> None:
        self.log = get_logger("data.trades")

    def load(self, cfg: TradeSourceConfig) -> List[Dict[str, Any]]:
        path = Path(cfg.path)
        if not path.is_file():
            msg = f"Trade file not found: {path}"
            self.log.error(msg)
            raise FileNotFoundError(msg)

        self.log.info("Loading trades from %s (format=%s)", path, cfg.format.value)

        if cfg.format == TradeFileFormat.JSON:
            with path.open("r", encoding="utf-8") as f:
                payloads = extract_trade_payloads(json.load(f))
        elif cfg.format == TradeFileFormat.CSV:
            payloads = self._records(pd.read_csv(path, dtype=object))
        elif cfg.format == TradeFileFormat.PARQUET:
            payloads = self._records(pd.read_parquet(path))
        else:
            msg = f"Unsupported trade file format {cfg.format!r} for {path}"
            self.log.error(msg)
            raise ValueError(msg)

        self.log.info("Loaded %d raw trade payloads from %s", len(payloads), path)
        return payloads

    @staticmethod
    def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
        df = df.astype(object).where(df.notna(), None)
        return df.to_dict(orient="records")
