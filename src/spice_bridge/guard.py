"""Error-translating call wrapper around SpiceyPy.

Every call into CSPICE goes through :func:`invoke`, which performs the
clear, call, check, clear sequence:

  1. reset any error left pending in CSPICE's global slot;
  2. call the routine (with SpiceyPy's found-check disabled for
     found-style routines so the ``found`` flag can be inspected);
  3. capture the error text, from the raised ``SpiceyError`` or from
     ``failed()``/``getmsg()`` when no exception was raised;
  4. reset the slot again before returning, on every exit path.

No CSPICE error ever escapes this module as an exception; it is always
translated into a :class:`~spice_bridge.result.SpiceResult`. Other
exceptions propagate, but only after the slot has been cleared.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

import numpy as np
import spiceypy as spice
from spiceypy.utils.exceptions import SpiceyError

from spice_bridge.result import ErrorState, SpiceResult

logger = logging.getLogger(__name__)

# Buffer sizes for getmsg/qcktrc, from the CSPICE headers.
SHORT_LEN = 26
EXPLAIN_LEN = 81
LONG_LEN = 1841
TRACE_LEN = 200

# CSPICE keeps its error status in process-wide storage.
spice_lock = threading.RLock()


def error_state() -> ErrorState:
    """Read the CSPICE error slot without clearing it."""
    with spice_lock:
        if not spice.failed():
            return ErrorState()
        return ErrorState(
            triggered=True,
            short=spice.getmsg("SHORT", SHORT_LEN).strip(),
            long=spice.getmsg("LONG", LONG_LEN).strip(),
            explain=spice.getmsg("EXPLAIN", EXPLAIN_LEN).strip(),
            traceback=spice.qcktrc(TRACE_LEN).strip(),
        )


def reset() -> None:
    """Clear the CSPICE error slot."""
    with spice_lock:
        spice.reset()


def implied_result() -> SpiceResult:
    """Result implied by the current error slot, without clearing it."""
    state = error_state()
    if state.triggered:
        return SpiceResult.failure(state, label="implied")
    return SpiceResult.success()


def _state_from_exception(exc: SpiceyError) -> ErrorState:
    short = (getattr(exc, "short", "") or "").strip()
    long = (getattr(exc, "long", "") or "").strip()
    if not short and not long:
        long = str(exc).strip()
    return ErrorState(
        triggered=True,
        short=short,
        long=long,
        explain=(getattr(exc, "explain", "") or "").strip(),
        traceback=(getattr(exc, "traceback", "") or "").strip(),
    )


@contextmanager
def _found_check_disabled() -> Iterator[None]:
    previous = spice.get_found_catch_state()
    spice.found_check_off()
    try:
        yield
    finally:
        if previous:
            spice.found_check_on()


def _split_found(raw: Any) -> tuple[Any, bool]:
    """Separate the trailing ``found`` flag from a routine's outputs."""
    if not isinstance(raw, tuple):
        # Routines such as expool/bodfnd return the flag alone.
        return (), bool(raw)
    *values, found = raw
    if isinstance(found, (list, tuple, np.ndarray)):
        hit = bool(np.all(found))
    else:
        hit = bool(found)
    if len(values) == 1:
        return values[0], hit
    return tuple(values), hit


def invoke(
    routine: Callable[..., Any],
    *args: Any,
    found: bool = False,
    convert: Callable[[Any], tuple[Any, ...]] | None = None,
    label: str | None = None,
    **kwargs: Any,
) -> SpiceResult:
    """Call a SpiceyPy routine and translate its outcome.

    Args:
        routine: The SpiceyPy function to call.
        *args: Native (already converted) positional arguments.
        found: The routine reports a ``found`` flag as its last output;
            a false flag yields ``ResultCode.NOT_FOUND``.
        convert: Turns the raw outputs into the result's ``values`` tuple.
            Without it, raw outputs are passed through unchanged.
        label: Name used in messages (default: the routine's name).
        **kwargs: Native keyword arguments.

    Returns:
        A SpiceResult. SUCCESS always has an empty message, FAILURE and
        NOT_FOUND always carry one.
    """
    label = label or getattr(routine, "__name__", "spice")
    with spice_lock:
        spice.reset()
        try:
            if found:
                with _found_check_disabled():
                    raw = routine(*args, **kwargs)
            else:
                raw = routine(*args, **kwargs)
        except SpiceyError as exc:
            state = _state_from_exception(exc)
            spice.reset()
            logger.debug("%s failed: %s", label, state.message)
            return SpiceResult.failure(state, label=label)
        except Exception:
            # A signalled error takes precedence over the Python one.
            state = error_state()
            spice.reset()
            if state.triggered:
                logger.debug("%s failed: %s", label, state.message)
                return SpiceResult.failure(state, label=label)
            raise

        # Error action other than RETURN-with-raise leaves the slot set.
        state = error_state()
        if state.triggered:
            spice.reset()
            logger.debug("%s left error pending: %s", label, state.message)
            return SpiceResult.failure(state, label=label)

    if found:
        raw, hit = _split_found(raw)
        if not hit:
            logger.debug("%s: not found", label)
            return SpiceResult.not_found(label)
        if isinstance(raw, tuple) and not raw:
            return SpiceResult.success(label=label)

    if convert is not None:
        try:
            values = convert(raw)
        except (ValueError, IndexError, TypeError) as exc:
            logger.debug("%s: could not convert outputs: %s", label, exc)
            state = ErrorState(triggered=True, long=f"{label}: {exc}")
            return SpiceResult.failure(state, label=label)
    elif raw is None:
        values = ()
    else:
        values = (raw,)
    return SpiceResult.success(values, label=label)


def raise_spice_error(
    message: str = "This is a test error.",
    short: str = "SPICE(VALUEOUTOFRANGE)",
) -> SpiceResult:
    """Signal a CSPICE error and return its translation.

    Useful for checking that callers handle FAILURE and that the error slot
    is clear afterwards.
    """

    def _signal() -> None:
        spice.setmsg(message)
        spice.sigerr(short)

    return invoke(_signal, label="raise_spice_error")
