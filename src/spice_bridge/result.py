"""Structured outcomes for calls into CSPICE.

CSPICE reports failures through a single process-wide error slot. Every
wrapped call in this package hands back a :class:`SpiceResult` instead, so
callers branch on a :class:`ResultCode` and never have to look at the
toolkit's global state themselves.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class ResultCode(enum.Enum):
    """Outcome of one wrapped call."""

    SUCCESS = "success"
    FAILURE = "failure"
    # Only produced by found-style routines and window searches.
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ErrorState:
    """Snapshot of the CSPICE error slot at the moment it was read."""

    triggered: bool = False
    short: str = ""
    long: str = ""
    explain: str = ""
    traceback: str = ""

    @property
    def message(self) -> str:
        """Human-readable message, e.g. ``SPICE(NOSUCHFILE): The file ...``."""
        if self.short and self.long:
            return f"{self.short}: {self.long}"
        return self.short or self.long


class SpiceCallError(RuntimeError):
    """Raised by :meth:`SpiceResult.unwrap` for non-successful results."""

    def __init__(self, code: ResultCode, message: str, short: str = ""):
        super().__init__(message)
        self.code = code
        self.message = message
        self.short = short


@dataclass(frozen=True)
class SpiceResult:
    """Result code, message and converted outputs of one wrapped call."""

    code: ResultCode
    message: str = ""
    values: tuple[Any, ...] = ()
    short: str = ""
    label: str = ""

    @classmethod
    def success(cls, values: tuple[Any, ...] = (), label: str = "") -> SpiceResult:
        return cls(ResultCode.SUCCESS, "", tuple(values), label=label)

    @classmethod
    def failure(
        cls, state: ErrorState, label: str = "",
    ) -> SpiceResult:
        message = state.message or f"{label or 'call'}: CSPICE signalled an error"
        return cls(ResultCode.FAILURE, message, short=state.short, label=label)

    @classmethod
    def not_found(cls, label: str, detail: str = "") -> SpiceResult:
        message = f"{label}: not found"
        if detail:
            message = f"{message} ({detail})"
        return cls(ResultCode.NOT_FOUND, message, label=label)

    @property
    def ok(self) -> bool:
        return self.code is ResultCode.SUCCESS

    @property
    def found(self) -> bool:
        return self.code is not ResultCode.NOT_FOUND

    @property
    def value(self) -> Any:
        """The single output value, or the tuple of outputs when several."""
        if not self.values:
            return None
        if len(self.values) == 1:
            return self.values[0]
        return self.values

    def unwrap(self) -> Any:
        """Return :attr:`value` or raise :class:`SpiceCallError`."""
        if not self.ok:
            raise SpiceCallError(self.code, self.message, self.short)
        return self.value

    def __bool__(self) -> bool:
        return self.ok
