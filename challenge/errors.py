# challenge/errors.py
from __future__ import annotations

from typing import Any, Optional


class ChallengeError(Exception):
    """Base class for errors raised around challenge evaluation."""


class InvalidTradeRecord(ChallengeError, ValueError):
    """
    A raw trade payload could not be mapped onto a TradeRecord.

    Batch normalization collects these instead of raising, so the caller can
    decide whether a partial batch is usable.
    """

    def __init__(
        self,
        reason: str,
        *,
        field: Optional[str] = None,
        index: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        self.reason = reason
        self.field = field
        self.index = index
        self.payload = payload
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"record #{self.index}" if self.index is not None else "record"
        if self.field:
            return f"{where}: {self.field}: {self.reason}"
        return f"{where}: {self.reason}"

    def at(self, index: int) -> "InvalidTradeRecord":
        """Return a copy tagged with the record's position in its batch."""
        return InvalidTradeRecord(self.reason, field=self.field, index=index, payload=self.payload)

    def __reduce__(self):
        # keyword-only state must survive pickling into worker processes
        return _rebuild_invalid_record, (self.reason, self.field, self.index, self.payload)


def _rebuild_invalid_record(reason, field, index, payload) -> InvalidTradeRecord:
    return InvalidTradeRecord(reason, field=field, index=index, payload=payload)


class StrictModeViolation(ChallengeError):
    """Raised when strict evaluation is requested and records were rejected."""
