"""Kernel loading and bookkeeping relative to a content root.

Kernel paths handed to this module are relative to a configurable content
root directory (``NonAssetData/kernels/naif0012.tls`` and the like), so the
same script works wherever the kernel tree is installed. Paths reported back
(``kdata``/``kinfo``) are made relative to the root again when they lie
beneath it.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import spiceypy as spice

from spice_bridge.config import DEFAULT_CONTENT_ROOT, DEFAULT_KERNEL_DIR
from spice_bridge.guard import invoke, spice_lock
from spice_bridge.result import ResultCode, SpiceResult

logger = logging.getLogger(__name__)

_content_root = Path(DEFAULT_CONTENT_ROOT).expanduser()

# Extension -> SPICE kernel type
KERNEL_TYPES: dict[str, str] = {
    ".bc": "ck",
    ".bsp": "spk",
    ".bpc": "pck",
    ".tpc": "pck",
    ".tf": "fk",
    ".ti": "ik",
    ".tls": "lsk",
    ".tsc": "sclk",
    ".bds": "dsk",
    ".bes": "ek",
    ".tm": "mk",
}

# All extensions we consider kernel files
KERNEL_EXTENSIONS: set[str] = set(KERNEL_TYPES.keys())


def classify_kernel(filename: str) -> str:
    """Return the SPICE kernel type from the file extension."""
    _, ext = os.path.splitext(filename.lower())
    return KERNEL_TYPES.get(ext, "unknown")


class KernelType(enum.IntFlag):
    """Kernel kinds as understood by ktotal/kdata/kinfo."""

    SPK = 0x01
    CK = 0x02
    PCK = 0x04
    DSK = 0x08
    EK = 0x10
    TEXT = 0x20
    META = 0x40
    ALL = 0x7F

    def spice_kind(self) -> str:
        if self == KernelType.ALL:
            return "ALL"
        return " ".join(
            k.name for k in _SINGLE_KINDS if k in self
        )

    @classmethod
    def from_spice(cls, name: str) -> KernelType:
        return cls[name.strip().upper()]


_SINGLE_KINDS = (
    KernelType.SPK, KernelType.CK, KernelType.PCK, KernelType.DSK,
    KernelType.EK, KernelType.TEXT, KernelType.META,
)


@dataclass
class KernelInfo:
    """A loaded kernel as reported by kdata/kinfo."""

    file: str = ""
    kind: KernelType = KernelType.ALL
    source: str = ""
    handle: int = 0


# ---------------------------------------------------------------------------
# Content root and paths
# ---------------------------------------------------------------------------

def content_root() -> Path:
    return _content_root


def set_content_root(root: str | Path) -> Path:
    """Set the directory relative kernel paths are resolved against."""
    global _content_root
    _content_root = Path(root).expanduser().resolve()
    logger.debug("Content root set to %s", _content_root)
    return _content_root


def resolve_path(relative_path: str | Path) -> Path:
    """Absolute path for a path relative to the content root."""
    p = Path(relative_path).expanduser()
    if p.is_absolute():
        return p
    return _content_root / p


def relative_path(path: str | Path) -> str:
    """Path relative to the content root, or unchanged if outside it."""
    p = Path(path)
    try:
        return p.resolve().relative_to(_content_root.resolve()).as_posix()
    except ValueError:
        return str(path)


def combine_paths(base_path: str, relative_paths: list[str]) -> list[str]:
    """Join *base_path* onto each entry of *relative_paths*."""
    return [Path(base_path, p).as_posix() for p in relative_paths]


def enumerate_kernels(
    relative_directory: str = DEFAULT_KERNEL_DIR,
    error_if_no_files_found: bool = True,
) -> SpiceResult:
    """List kernel files below a content-root directory.

    The single result value is a sorted list of paths relative to the
    content root.
    """
    root = resolve_path(relative_directory)
    if not root.is_dir():
        return SpiceResult(
            ResultCode.FAILURE,
            f"enumerate_kernels: directory not found: {root}",
            label="enumerate_kernels",
        )

    found = [
        relative_path(p) for p in sorted(root.rglob("*"))
        if p.is_file() and p.suffix.lower() in KERNEL_EXTENSIONS
    ]
    if not found and error_if_no_files_found:
        return SpiceResult(
            ResultCode.FAILURE,
            f"enumerate_kernels: no kernel files found in {root}",
            label="enumerate_kernels",
        )
    return SpiceResult.success((found,), label="enumerate_kernels")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def furnsh_absolute(path: str | Path) -> SpiceResult:
    """Load a kernel by absolute path."""
    result = invoke(spice.furnsh, str(path), label="furnsh")
    if result.ok:
        logger.info("Loaded kernel %s", path)
    return result


def furnsh(
    relative_path: str | Path = f"{DEFAULT_KERNEL_DIR}/gm_de431.tpc",
) -> SpiceResult:
    """Load a kernel given its path relative to the content root."""
    return furnsh_absolute(resolve_path(relative_path))


def furnsh_list(relative_paths: list[str]) -> SpiceResult:
    """Load several kernels in order, stopping at the first failure."""
    result = SpiceResult.success(label="furnsh")
    for rel in relative_paths:
        result = furnsh(rel)
        if not result.ok:
            logger.warning("Stopped loading kernels at %s", rel)
            break
    return result


def unload(relative_path: str | Path) -> SpiceResult:
    """Unload a kernel previously loaded from *relative_path*."""
    path = resolve_path(relative_path)
    result = invoke(spice.unload, str(path), label="unload")
    if result.ok:
        logger.info("Unloaded kernel %s", path)
    return result


def clear_all() -> None:
    """Unload every kernel, clear the kernel pool and the error slot."""
    with spice_lock:
        spice.reset()
        spice.kclear()
        spice.reset()
    logger.info("Cleared all kernels")


def init_all(print_callstack: bool = False) -> None:
    """Return CSPICE to a known state.

    Unloads all kernels, clears the error slot and restores the error
    settings the rest of the package relies on.
    """
    from spice_bridge.errors import (
        ErrorAction,
        ErrorDevice,
        ErrorItems,
        set_erract,
        set_errdev,
        set_errprt,
    )

    clear_all()
    set_erract(ErrorAction.RETURN)
    set_errdev(ErrorDevice.NULL)
    set_errprt(ErrorItems.ALL if print_callstack else ErrorItems.DEFAULT)


# ---------------------------------------------------------------------------
# Loaded-kernel queries
# ---------------------------------------------------------------------------

def ktotal(kind: KernelType | int = KernelType.ALL) -> SpiceResult:
    """Number of loaded kernels of the given kinds."""
    kind = KernelType(kind)
    return invoke(
        spice.ktotal, kind.spice_kind(),
        convert=lambda raw: (int(raw),), label="ktotal",
    )


def kdata(which: int = 0, kind: KernelType | int = KernelType.ALL) -> SpiceResult:
    """Information on the *which*-th loaded kernel among *kind*."""
    kind = KernelType(kind)

    def _convert(raw):
        file, filtyp, source, handle = raw
        return (KernelInfo(
            file=relative_path(file),
            kind=KernelType.from_spice(filtyp),
            source=source,
            handle=int(handle),
        ),)

    return invoke(
        spice.kdata, which, kind.spice_kind(),
        found=True, convert=_convert, label="kdata",
    )


def kinfo(
    file: str | Path = f"{DEFAULT_KERNEL_DIR}/pck00010.tpc",
) -> SpiceResult:
    """Information on a loaded kernel given its relative path."""
    path = resolve_path(file)

    def _convert(raw):
        filtyp, source, handle = raw
        return (KernelInfo(
            file=relative_path(path),
            kind=KernelType.from_spice(filtyp),
            source=source,
            handle=int(handle),
        ),)

    return invoke(
        spice.kinfo, str(path),
        found=True, convert=_convert, label="kinfo",
    )
