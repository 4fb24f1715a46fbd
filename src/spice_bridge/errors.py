"""Access to the CSPICE error subsystem settings.

SpiceyPy needs the error action to stay ``RETURN`` so that it can turn
signalled errors into exceptions, which :mod:`spice_bridge.guard` then
translates. Changing it is allowed but logged.
"""

from __future__ import annotations

import enum
import logging

import spiceypy as spice

from spice_bridge.guard import reset, spice_lock

__all__ = [
    "ErrorAction",
    "ErrorDevice",
    "ErrorItems",
    "get_erract",
    "get_errdev",
    "get_errprt",
    "reset",
    "set_erract",
    "set_errdev",
    "set_errprt",
]

logger = logging.getLogger(__name__)

_LENOUT = 256


class ErrorAction(enum.Enum):
    ABORT = "ABORT"
    REPORT = "REPORT"
    RETURN = "RETURN"
    IGNORE = "IGNORE"
    DEFAULT = "DEFAULT"


class ErrorDevice(enum.Enum):
    SCREEN = "SCREEN"
    NULL = "NULL"
    FILE = "FILE"


class ErrorItems(enum.IntFlag):
    NONE = 0
    SHORT = 0x01
    EXPLAIN = 0x02
    LONG = 0x04
    TRACEBACK = 0x08
    DEFAULT = 0x10
    ALL = SHORT | EXPLAIN | LONG | TRACEBACK | DEFAULT


_ITEM_NAMES = {
    "SHORT": ErrorItems.SHORT,
    "EXPLAIN": ErrorItems.EXPLAIN,
    "LONG": ErrorItems.LONG,
    "TRACEBACK": ErrorItems.TRACEBACK,
    "DEFAULT": ErrorItems.DEFAULT,
}


def get_erract() -> ErrorAction:
    """Current CSPICE error response action."""
    with spice_lock:
        action = spice.erract("GET", _LENOUT).strip().upper()
    return ErrorAction(action)


def set_erract(action: ErrorAction | str) -> None:
    """Set the CSPICE error response action."""
    action = ErrorAction(action.upper() if isinstance(action, str) else action)
    if action is not ErrorAction.RETURN:
        logger.warning(
            "Error action %s: CSPICE errors will no longer be returned "
            "to the caller as results", action.value,
        )
    with spice_lock:
        spice.erract("SET", _LENOUT, action.value)


def get_errdev() -> tuple[ErrorDevice, str]:
    """Current error output device, and the log file path for FILE."""
    with spice_lock:
        device = spice.errdev("GET", _LENOUT, "").strip()
    if device.upper() in ("SCREEN", "NULL"):
        return ErrorDevice(device.upper()), ""
    return ErrorDevice.FILE, device


def set_errdev(device: ErrorDevice | str, log_file_path: str = "") -> None:
    """Route CSPICE error output to the screen, nowhere, or a log file."""
    if isinstance(device, str):
        device = ErrorDevice(device.upper())
    if device is ErrorDevice.FILE:
        if not log_file_path:
            raise ValueError("log_file_path is required for ErrorDevice.FILE")
        target = log_file_path
    else:
        target = device.value
    with spice_lock:
        spice.errdev("SET", _LENOUT, target)


def get_errprt() -> ErrorItems:
    """Error message items currently selected for output."""
    with spice_lock:
        text = spice.errprt("GET", _LENOUT, "")
    items = ErrorItems.NONE
    for word in text.replace(",", " ").split():
        items |= _ITEM_NAMES.get(word.upper(), ErrorItems.NONE)
    return items


def set_errprt(items: ErrorItems | int = ErrorItems.DEFAULT) -> None:
    """Select exactly *items* for CSPICE error output."""
    items = ErrorItems(items)
    names = ["NONE"] + [
        name for name, flag in _ITEM_NAMES.items() if flag in items
    ]
    with spice_lock:
        spice.errprt("SET", _LENOUT, ", ".join(names))
