"""Spacecraft clock conversions and C-kernel pointing.

SCLK routines need the spacecraft's SCLK kernel and, for conversions to or
from ephemeris time, a leapseconds kernel. Encoded clock values ("ticks")
are plain floats. ``ckgp`` and ``ckgpav`` report NOT_FOUND when no pointing
is available within the tolerance.
"""

from __future__ import annotations

from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import AngularVelocity, EphemerisTime, RotationMatrix

CATEGORY = "Spacecraft Clock"
POINTING = "Pointing"

_SC = Arg("sc", int, -82, tooltip="NAIF ID of the spacecraft")
_ET = Arg("et", EphemerisTime, EphemerisTime())
_TICKS = Arg("sclkdp", float, 0.0, tooltip="Encoded SCLK, in ticks")


def _bind(name, args, outs, tooltip, category=CATEGORY, keywords=("CONVERSION", "TIME"), **kw):
    return register(Binding(
        name,
        args=tuple(args),
        outs=tuple(outs),
        category=category,
        tooltip=tooltip,
        keywords=keywords,
        **kw,
    ))


def _partitions(raw):
    pstart, pstop = raw
    return [float(v) for v in pstart], [float(v) for v in pstop]


scs2e = _bind(
    "scs2e", (_SC, Arg("sclkch", str, "1/1465644281.165")),
    (Out("et", EphemerisTime),),
    "Convert a spacecraft clock string to ephemeris seconds past J2000",
)
sce2s = _bind(
    "sce2s", (_SC, _ET), (Out("sclkch", str),),
    "Convert an epoch specified as ephemeris seconds past J2000 to a "
    "character string representation of a spacecraft clock value",
)
sce2c = _bind(
    "sce2c", (_SC, _ET), (Out("sclkdp", float),),
    "Convert ephemeris seconds past J2000 to continuous encoded spacecraft "
    "clock ticks",
)
sce2t = _bind(
    "sce2t", (_SC, _ET), (Out("sclkdp", float),),
    "Convert ephemeris seconds past J2000 to integral encoded spacecraft "
    "clock ticks",
)
sct2e = _bind(
    "sct2e", (_SC, _TICKS), (Out("et", EphemerisTime),),
    "Convert encoded spacecraft clock ticks to ephemeris seconds past J2000",
)
scencd = _bind(
    "scencd", (_SC, Arg("sclkch", str, "1/1465644281.165")),
    (Out("sclkdp", float),),
    "Encode a character representation of spacecraft clock time into a "
    "double precision number",
)
scdecd = _bind(
    "scdecd", (_SC, _TICKS), (Out("sclkch", str),),
    "Convert double precision encoding of spacecraft clock time into a "
    "character representation",
)
scfmt = _bind(
    "scfmt", (_SC, Arg("ticks", float, 0.0)), (Out("clkstr", str),),
    "Convert encoded spacecraft clock ticks to character clock format",
)
sctiks = _bind(
    "sctiks", (_SC, Arg("clkstr", str, "1:0:0")), (Out("ticks", float),),
    "Convert a spacecraft clock format string to number of ticks",
)
scpart = _bind(
    "scpart", (_SC,), (Out("pstart"), Out("pstop")),
    "Get spacecraft clock partition information from a spacecraft clock "
    "kernel file",
    finish=_partitions,
)


# ---------------------------------------------------------------------------
# C-kernel pointing
# ---------------------------------------------------------------------------

_CK = {"category": POINTING, "keywords": ("POINTING",), "found": True}
_INST = Arg("inst", int, -82000, tooltip="NAIF ID of the instrument or structure")
_TOL = Arg("tol", float, 0.0, tooltip="Time tolerance, in ticks")
_CKREF = Arg("ref", str, "J2000")

ckgp = _bind(
    "ckgp", (_INST, _TICKS, _TOL, _CKREF),
    (Out("cmat", RotationMatrix), Out("clkout", float)),
    "Get pointing (attitude) for a specified spacecraft clock time",
    **_CK,
)
ckgpav = _bind(
    "ckgpav", (_INST, _TICKS, _TOL, _CKREF),
    (
        Out("cmat", RotationMatrix),
        Out("av", AngularVelocity),
        Out("clkout", float),
    ),
    "Get pointing (attitude) and angular velocity for a specified "
    "spacecraft clock time",
    **_CK,
)
