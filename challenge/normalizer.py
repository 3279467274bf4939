# challenge/normalizer.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from numbers import Number
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from challenge.errors import InvalidTradeRecord
from challenge.models import Side, TradeRecord

# Canonical field -> accepted payload keys, in lookup order.
# Broker payloads use PascalCase (OrderId, TimeClose), legacy ones camelCase.
FIELD_ALIASES = {
    "id": ("OrderId", "orderId", "order_id", "ticket", "Ticket", "id", "positionId"),
    "symbol": ("Symbol", "symbol"),
    "side": ("Type", "type", "Side", "side"),
    "volume": ("Volume", "volume", "Lots", "lots"),
    "open_time": ("TimeOpen", "openTime", "open_time", "timeOpen"),
    "close_time": ("TimeClose", "closeTime", "close_time", "timeClose"),
    "profit": ("Profit", "profit"),
    "commission": ("Commission", "commission"),
    "swap": ("Swap", "swap"),
    "open_price": ("OpenPrice", "openPrice", "open_price"),
    "close_price": ("ClosePrice", "closePrice", "close_price"),
    "comment": ("Commentary", "comment", "Comment"),
}

_SIDE_NAMES = {
    "buy": Side.BUY,
    "long": Side.BUY,
    "0": Side.BUY,
    "sell": Side.SELL,
    "short": Side.SELL,
    "1": Side.SELL,
}


@dataclass(frozen=True)
class NormalizedBatch:
    trades: Tuple[TradeRecord, ...]
    rejected: Tuple[InvalidTradeRecord, ...]

    @property
    def is_complete(self) -> bool:
        return not self.rejected


# ----------------------------------------------------------------------
# Field helpers
# ----------------------------------------------------------------------


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def _lookup(raw: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        value = raw.get(key)
        if not _is_missing(value):
            return value
    return None


def _to_float(value: Any) -> Optional[float]:
    """Coerce to a finite float, or None when that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return out


def _to_id(value: Any) -> str:
    # CSV readers turn integer tickets into floats when a column has gaps
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _to_side(value: Any) -> Optional[Side]:
    if isinstance(value, Side):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, Number):
        as_float = float(value)
        if as_float.is_integer():
            return _SIDE_NAMES.get(str(int(as_float)))
        return None
    if isinstance(value, str):
        return _SIDE_NAMES.get(value.strip().lower())
    return None


def parse_timestamp(value: Any, field: str) -> datetime:
    """
    Parse a datetime, an ISO-8601 string or epoch seconds into a naive UTC
    datetime.
    """
    try:
        if isinstance(value, datetime):
            ts = pd.Timestamp(value)
        elif isinstance(value, bool):
            raise TypeError("boolean is not a timestamp")
        elif isinstance(value, Number):
            ts = pd.to_datetime(float(value), unit="s")
        elif isinstance(value, str):
            ts = pd.to_datetime(value.strip())
        else:
            raise TypeError(f"unsupported timestamp type {type(value).__name__}")
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidTradeRecord(f"unparseable timestamp {value!r} ({exc})", field=field) from exc

    if pd.isna(ts):
        raise InvalidTradeRecord(f"unparseable timestamp {value!r}", field=field)

    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------


def normalize_trade(raw: Any) -> TradeRecord:
    """
    Map one raw trade payload onto a TradeRecord.

    Raises InvalidTradeRecord when id, symbol, volume or open time is
    missing or malformed. A missing or unrecognized side becomes None; the
    trade still counts toward the curve. Profit, commission and swap
    default to 0.
    """
    if not isinstance(raw, Mapping):
        raise InvalidTradeRecord(f"expected a mapping, got {type(raw).__name__}", payload=raw)

    try:
        trade_id = _lookup(raw, "id")
        if trade_id is None:
            raise InvalidTradeRecord("missing", field="id")

        symbol = _lookup(raw, "symbol")
        if symbol is None:
            raise InvalidTradeRecord("missing", field="symbol")

        raw_volume = _lookup(raw, "volume")
        if raw_volume is None:
            raise InvalidTradeRecord("missing", field="volume")
        volume = _to_float(raw_volume)
        if volume is None or volume < 0:
            raise InvalidTradeRecord(f"not a non-negative number: {raw_volume!r}", field="volume")

        raw_open = _lookup(raw, "open_time")
        if raw_open is None:
            raise InvalidTradeRecord("missing", field="open_time")
        open_time = parse_timestamp(raw_open, "open_time")

        # stricter than "optional": a garbled close time rejects the record
        # instead of turning a closed trade into an open one
        raw_close = _lookup(raw, "close_time")
        close_time = parse_timestamp(raw_close, "close_time") if raw_close is not None else None
    except InvalidTradeRecord as exc:
        raise InvalidTradeRecord(exc.reason, field=exc.field, payload=raw) from None

    raw_side = _lookup(raw, "side")
    side = _to_side(raw_side) if raw_side is not None else None
    comment = _lookup(raw, "comment")

    return TradeRecord(
        id=_to_id(trade_id),
        symbol=str(symbol).strip(),
        side=side,
        volume=volume,
        open_time=open_time,
        close_time=close_time,
        profit=_to_float(_lookup(raw, "profit")) or 0.0,
        commission=_to_float(_lookup(raw, "commission")) or 0.0,
        swap=_to_float(_lookup(raw, "swap")) or 0.0,
        open_price=_to_float(_lookup(raw, "open_price")),
        close_price=_to_float(_lookup(raw, "close_price")),
        comment=str(comment) if comment is not None else None,
    )


def normalize_trades(raw_trades: Iterable[Any]) -> NormalizedBatch:
    """
    Normalize a batch; TradeRecords pass through as-is. Bad records and
    repeated ids are collected in `rejected` (tagged with their batch index);
    good records keep input order.
    """
    trades: List[TradeRecord] = []
    rejected: List[InvalidTradeRecord] = []
    seen_ids = set()

    for idx, raw in enumerate(raw_trades):
        try:
            trade = raw if isinstance(raw, TradeRecord) else normalize_trade(raw)
        except InvalidTradeRecord as exc:
            rejected.append(exc.at(idx))
            continue

        if trade.id in seen_ids:
            rejected.append(
                InvalidTradeRecord(f"duplicate id {trade.id!r}", field="id", index=idx, payload=raw)
            )
            continue

        seen_ids.add(trade.id)
        trades.append(trade)

    return NormalizedBatch(trades=tuple(trades), rejected=tuple(rejected))


def ensure_records(trades: Sequence[Any]) -> Tuple[TradeRecord, ...]:
    """
    Downstream components accept TradeRecords only; fail fast on anything
    that bypassed the normalizer.
    """
    for t in trades:
        if not isinstance(t, TradeRecord):
            raise TypeError(f"expected TradeRecord, got {type(t).__name__}; normalize raw payloads first")
    return tuple(trades)
