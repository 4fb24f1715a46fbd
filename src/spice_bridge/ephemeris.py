"""Ephemerides, frame transformations, two-body elements and kernel coverage.

The coverage queries (``spkobj``, ``spkcov``, ``ckobj``, ``ckcov``,
``pckcov``) read directly from a kernel file given relative to the content
root; the file does not need to be loaded. An empty coverage window or ID
set is reported as NOT_FOUND.
"""

from __future__ import annotations

import spiceypy as spice

from spice_bridge.kernels import resolve_path
from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import (
    Angle,
    ConicElements,
    Distance,
    DistanceVector,
    EphemerisPeriod,
    EphemerisTime,
    MassConstant,
    RotationMatrix,
    StateTransform,
    StateVector,
    Window,
)

EPHEMERIS = "Ephemeris"
FRAMES = "Frames"
CONICS = "Conics"
COVERAGE = "Coverage"

# Room for 1000 intervals per coverage window.
WINDOW_SIZE = 2000
ID_CELL_SIZE = 1000

# DE440 value, km^3/s^2.
EARTH_GM = MassConstant(398600.435436)

_TARGET = Arg("targ", str, "MOON")
_ET = Arg("et", EphemerisTime, EphemerisTime())
_REF = Arg("ref", str, "J2000")
_ABCORR = Arg("abcorr", str, "NONE", tooltip="NONE, LT, LT+S, CN, CN+S, XLT ...")
_OBS = Arg("obs", str, "EARTH")

_STATE_OUT = (Out("state", StateVector), Out("lt", EphemerisPeriod))
_POS_OUT = (Out("ptarg", DistanceVector), Out("lt", EphemerisPeriod))


def _bind(name, args, outs, tooltip, category=EPHEMERIS, keywords=("EPHEMERIS",), **kw):
    return register(Binding(
        name,
        args=tuple(args),
        outs=tuple(outs),
        category=category,
        tooltip=tooltip,
        keywords=keywords,
        **kw,
    ))


spkpos = _bind(
    "spkpos", (_TARGET, _ET, _REF, _ABCORR, _OBS), _POS_OUT,
    "Return the position of a target body relative to an observing body, "
    "optionally corrected for light time and stellar aberration",
)
spkezr = _bind(
    "spkezr", (_TARGET, _ET, _REF, _ABCORR, _OBS), _STATE_OUT,
    "Return the state (position and velocity) of a target body relative to "
    "an observing body, optionally corrected for light time and stellar "
    "aberration",
)
spkgeo = _bind(
    "spkgeo",
    (Arg("targ", int, 301), _ET, _REF, Arg("obs", int, 399)),
    _STATE_OUT,
    "Compute the geometric state (position and velocity) of a target body "
    "relative to an observing body",
)
spkgps = _bind(
    "spkgps",
    (Arg("targ", int, 301), _ET, _REF, Arg("obs", int, 399)),
    _POS_OUT,
    "Compute the geometric position of a target body relative to an "
    "observing body",
)
spkcpo = _bind(
    "spkcpo",
    (
        Arg("target", str, "SUN"), _ET,
        Arg("outref", str, "IAU_EARTH"),
        Arg("refloc", str, "OBSERVER"),
        _ABCORR,
        Arg("obspos", DistanceVector, DistanceVector()),
        Arg("obsctr", str, "EARTH"),
        Arg("obsref", str, "IAU_EARTH"),
    ),
    _STATE_OUT,
    "Return the state of a target body relative to a constant-position "
    "observer location",
)
spkcpt = _bind(
    "spkcpt",
    (
        Arg("trgpos", DistanceVector, DistanceVector()),
        Arg("trgctr", str, "EARTH"),
        Arg("trgref", str, "IAU_EARTH"),
        _ET,
        Arg("outref", str, "J2000"),
        Arg("refloc", str, "TARGET"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
    ),
    _STATE_OUT,
    "Return the state, relative to a specified observer, of a target "
    "having constant position in a specified reference frame",
)
spkezp = _bind(
    "spkezp",
    (Arg("targ", int, 301), _ET, _REF, _ABCORR, Arg("obs", int, 399)),
    _POS_OUT,
    "Return the position of a target body relative to an observing body, "
    "both given by NAIF ID, optionally corrected for light time and "
    "stellar aberration",
)
spkcvo = _bind(
    "spkcvo",
    (
        Arg("target", str, "SUN"), _ET,
        Arg("outref", str, "IAU_EARTH"),
        Arg("refloc", str, "OBSERVER"),
        _ABCORR,
        Arg("obssta", StateVector, StateVector()),
        Arg("obsepc", EphemerisTime, EphemerisTime()),
        Arg("obsctr", str, "EARTH"),
        Arg("obsref", str, "IAU_EARTH"),
    ),
    _STATE_OUT,
    "Return the state of a target body relative to a constant-velocity "
    "observer location",
)
spkcvt = _bind(
    "spkcvt",
    (
        Arg("trgsta", StateVector, StateVector()),
        Arg("trgepc", EphemerisTime, EphemerisTime()),
        Arg("trgctr", str, "EARTH"),
        Arg("trgref", str, "IAU_EARTH"),
        _ET,
        Arg("outref", str, "J2000"),
        Arg("refloc", str, "TARGET"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
    ),
    _STATE_OUT,
    "Return the state, relative to a specified observer, of a target "
    "having constant velocity in a specified reference frame",
)


# ---------------------------------------------------------------------------
# Frame transformations
# ---------------------------------------------------------------------------

pxform = _bind(
    "pxform",
    (Arg("fromstr", str, "J2000"), Arg("tostr", str, "IAU_EARTH"), _ET),
    (Out("rotate", RotationMatrix),),
    "Return the matrix that transforms position vectors from one specified "
    "frame to another at a specified epoch",
    category=FRAMES, keywords=("FRAMES",),
)
sxform = _bind(
    "sxform",
    (Arg("fromstr", str, "J2000"), Arg("tostr", str, "IAU_EARTH"), _ET),
    (Out("xform", StateTransform),),
    "Return the state transformation matrix from one frame to another at a "
    "specified epoch",
    category=FRAMES, keywords=("FRAMES",),
)
pxfrm2 = _bind(
    "pxfrm2",
    (
        Arg("fromstr", str, "J2000"), Arg("tostr", str, "IAU_EARTH"),
        Arg("etfrom", EphemerisTime, EphemerisTime()),
        Arg("etto", EphemerisTime, EphemerisTime()),
    ),
    (Out("rotate", RotationMatrix),),
    "Return the 3x3 matrix that transforms position vectors from one "
    "reference frame at a specified epoch to another reference frame at a "
    "different epoch",
    category=FRAMES, keywords=("FRAMES",),
)


# ---------------------------------------------------------------------------
# Two-body
# ---------------------------------------------------------------------------

def _split_oscltx(raw):
    return (raw[:8], raw[8], raw[9], raw[10])


conics = _bind(
    "conics", (Arg("elts", ConicElements), _ET), (Out("state", StateVector),),
    "Determine the state (position, velocity) of an orbiting body from a "
    "set of elliptic, hyperbolic, or parabolic orbital elements",
    category=CONICS, keywords=("CONIC", "EPHEMERIS"),
)
oscelt = _bind(
    "oscelt",
    (Arg("state", StateVector), _ET, Arg("mu", MassConstant, EARTH_GM)),
    (Out("elts", ConicElements),),
    "Determine the set of osculating conic orbital elements that "
    "corresponds to the state (position, velocity) of a body at some epoch",
    category=CONICS, keywords=("CONIC", "EPHEMERIS"),
)
oscltx = _bind(
    "oscltx",
    (Arg("state", StateVector), _ET, Arg("mu", MassConstant, EARTH_GM)),
    (
        Out("elts", ConicElements), Out("nu", Angle),
        Out("a", Distance), Out("tau", EphemerisPeriod),
    ),
    "Determine the set of osculating conic orbital elements, plus true "
    "anomaly, semi-major axis and period",
    finish=_split_oscltx,
    category=CONICS, keywords=("CONIC", "EPHEMERIS"),
)
prop2b = _bind(
    "prop2b",
    (
        Arg("gm", MassConstant),
        Arg("pvinit", StateVector),
        Arg("dt", EphemerisPeriod, EphemerisPeriod()),
    ),
    (Out("pvprop", StateVector),),
    "Given a central mass and the state of massless body at time t_0, "
    "determine its state as predicted by two-body force model at time "
    "t_0 + dt",
    category=CONICS, keywords=("CONIC", "EPHEMERIS", "UTILITY"),
)


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------

def _window_found(cover):
    return cover, spice.wncard(cover) > 0


def _ids_found(ids):
    values = sorted(int(i) for i in ids)
    return values, bool(values)


def _spkobj(spk: str):
    ids = spice.stypes.SPICEINT_CELL(ID_CELL_SIZE)
    spice.spkobj(str(resolve_path(spk)), ids)
    return _ids_found(ids)


def _spkcov(spk: str, idcode: int):
    cover = spice.stypes.SPICEDOUBLE_CELL(WINDOW_SIZE)
    spice.spkcov(str(resolve_path(spk)), idcode, cover)
    return _window_found(cover)


def _ckobj(ck: str):
    ids = spice.stypes.SPICEINT_CELL(ID_CELL_SIZE)
    spice.ckobj(str(resolve_path(ck)), ids)
    return _ids_found(ids)


def _ckcov(ck: str, idcode: int, needav: bool, level: str, tol: float, timsys: str):
    cover = spice.stypes.SPICEDOUBLE_CELL(WINDOW_SIZE)
    spice.ckcov(
        str(resolve_path(ck)), idcode, needav, level, tol, timsys, cover,
    )
    return _window_found(cover)


def _pckcov(pck: str, idcode: int):
    cover = spice.stypes.SPICEDOUBLE_CELL(WINDOW_SIZE)
    spice.pckcov(str(resolve_path(pck)), idcode, cover)
    return _window_found(cover)


_COV = {"category": COVERAGE, "keywords": ("COVERAGE", "KERNEL"), "found": True}

spkobj = _bind(
    "spkobj", (Arg("spk", str),), (Out("ids"),),
    "Find the set of ID codes of all objects in a specified SPK file",
    routine=_spkobj, **_COV,
)
spkcov = _bind(
    "spkcov", (Arg("spk", str), Arg("idcode", int, 399)), (Out("cover", Window),),
    "Find the coverage window for a specified ephemeris object in a "
    "specified SPK file",
    routine=_spkcov, **_COV,
)
ckobj = _bind(
    "ckobj", (Arg("ck", str),), (Out("ids"),),
    "Find the set of ID codes of all objects in a specified CK file",
    routine=_ckobj, **_COV,
)
ckcov = _bind(
    "ckcov",
    (
        Arg("ck", str), Arg("idcode", int),
        Arg("needav", bool, False),
        Arg("level", str, "INTERVAL", tooltip="SEGMENT or INTERVAL"),
        Arg("tol", float, 0.0),
        Arg("timsys", str, "TDB", tooltip="SCLK or TDB"),
    ),
    (Out("cover", Window),),
    "Find the coverage window for a specified object in a specified CK file",
    routine=_ckcov, **_COV,
)
pckcov = _bind(
    "pckcov", (Arg("pck", str), Arg("idcode", int, 31006)), (Out("cover", Window),),
    "Find the coverage window for a specified reference frame in a "
    "specified binary PCK file",
    routine=_pckcov, **_COV,
)
