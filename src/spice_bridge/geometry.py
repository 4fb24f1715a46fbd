"""Surface geometry, illumination, occultation and Geometry Finder searches.

Geometry Finder searches take a confinement :class:`~spice_bridge.units.Window`
and return the window of times satisfying the condition. An empty result
window is reported as NOT_FOUND, distinct from a FAILURE.
"""

from __future__ import annotations

import spiceypy as spice

from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import (
    Angle,
    DimensionlessVector,
    Distance,
    DistanceVector,
    EphemerisPeriod,
    EphemerisTime,
    Speed,
    Window,
)

GEOMETRY = "Geometry"
ILLUMINATION = "Illumination"
SEARCH = "Geometry Finder"

# Maximum number of intervals a search result may hold.
MAX_INTERVALS = 1000

_ET = Arg("et", EphemerisTime, EphemerisTime())
_ABCORR = Arg("abcorr", str, "NONE")
_SURFACE_OUT = (
    Out("spoint", DistanceVector),
    Out("trgepc", EphemerisTime),
    Out("srfvec", DistanceVector),
)


def _bind(name, args, outs, tooltip, category=GEOMETRY, keywords=("GEOMETRY",), **kw):
    return register(Binding(
        name,
        args=tuple(args),
        outs=tuple(outs),
        category=category,
        tooltip=tooltip,
        keywords=keywords,
        **kw,
    ))


subpnt = _bind(
    "subpnt",
    (
        Arg("method", str, "NEAR POINT/ELLIPSOID"),
        Arg("target", str, "EARTH"),
        _ET,
        Arg("fixref", str, "IAU_EARTH"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
    ),
    _SURFACE_OUT,
    "Compute the rectangular coordinates of the sub-observer point on a "
    "target body at a specified epoch, optionally corrected for light time "
    "and stellar aberration",
)
subslr = _bind(
    "subslr",
    (
        Arg("method", str, "NEAR POINT/ELLIPSOID"),
        Arg("target", str, "EARTH"),
        _ET,
        Arg("fixref", str, "IAU_EARTH"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
    ),
    _SURFACE_OUT,
    "Compute the rectangular coordinates of the sub-solar point on a target "
    "body at a specified epoch, optionally corrected for light time and "
    "stellar aberration",
    category=ILLUMINATION,
)
sincpt = _bind(
    "sincpt",
    (
        Arg("method", str, "ELLIPSOID"),
        Arg("target", str, "EARTH"),
        _ET,
        Arg("fixref", str, "IAU_EARTH"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
        Arg("dref", str, "J2000"),
        Arg("dvec", DimensionlessVector, DimensionlessVector(0.0, 0.0, -1.0)),
    ),
    _SURFACE_OUT,
    "Given an observer and a direction vector defining a ray, compute the "
    "surface intercept of the ray on a target body at a specified epoch",
    found=True,
)
ilumin = _bind(
    "ilumin",
    (
        Arg("method", str, "ELLIPSOID"),
        Arg("target", str, "EARTH"),
        _ET,
        Arg("fixref", str, "IAU_EARTH"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
        Arg("spoint", DistanceVector, DistanceVector()),
    ),
    (
        Out("trgepc", EphemerisTime),
        Out("srfvec", DistanceVector),
        Out("phase", Angle),
        Out("incdnc", Angle),
        Out("emissn", Angle),
    ),
    "Find the illumination angles (phase, solar incidence, and emission) "
    "at a specified surface point of a target body",
    category=ILLUMINATION,
)
phaseq = _bind(
    "phaseq",
    (
        _ET,
        Arg("target", str, "MOON"),
        Arg("illmn", str, "SUN"),
        Arg("obsrvr", str, "EARTH"),
        _ABCORR,
    ),
    (Out("phase", Angle),),
    "Compute the apparent phase angle for a target, observer, illuminator "
    "set of ephemeris objects",
    category=ILLUMINATION,
)
occult = _bind(
    "occult",
    (
        Arg("targ1", str, "MOON"), Arg("shape1", str, "ELLIPSOID"),
        Arg("frame1", str, "IAU_MOON"),
        Arg("targ2", str, "SUN"), Arg("shape2", str, "ELLIPSOID"),
        Arg("frame2", str, "IAU_SUN"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _ET,
    ),
    (Out("ocltid", int),),
    "Determine the occultation condition (not occulted, partially, etc.) of "
    "one target relative to another target as seen by an observer at a "
    "given time",
    keywords=("GEOMETRY", "OCCULTATION"),
)

_AXES = (
    Arg("a", Distance, Distance(6378.1366)),
    Arg("b", Distance, Distance(6378.1366)),
    Arg("c", Distance, Distance(6356.7519)),
)

nearpt = _bind(
    "nearpt",
    (Arg("positn", DistanceVector),) + _AXES,
    (Out("npoint", DistanceVector), Out("alt", Distance)),
    "Locate the point on the surface of an ellipsoid nearest to a specified "
    "position, and the altitude of the position above the ellipsoid",
    keywords=("ELLIPSOID", "GEOMETRY"),
)
surfpt = _bind(
    "surfpt",
    (Arg("positn", DistanceVector), Arg("u", DimensionlessVector)) + _AXES,
    (Out("point", DistanceVector),),
    "Determine the intersection of a line-of-sight vector with the surface "
    "of an ellipsoid",
    found=True,
    keywords=("ELLIPSOID", "GEOMETRY"),
)
surfnm = register(Binding(
    "surfnm",
    args=_AXES + (Arg("point", DistanceVector, DistanceVector(6378.1366, 0.0, 0.0)),),
    outs=(Out("normal", DimensionlessVector),),
    category=GEOMETRY,
    tooltip="Compute the outward-pointing, unit normal vector from a point "
            "on the surface of an ellipsoid",
    keywords=("ELLIPSOID", "GEOMETRY"),
))


# ---------------------------------------------------------------------------
# Geometry Finder
# ---------------------------------------------------------------------------

def _result_window():
    return spice.stypes.SPICEDOUBLE_CELL(2 * MAX_INTERVALS)


def _window_found(result):
    return result, spice.wncard(result) > 0


def _gfoclt(cnfine, occtyp, front, fshape, fframe, back, bshape, bframe,
            abcorr, obsrvr, step):
    result = _result_window()
    spice.gfoclt(
        occtyp, front, fshape, fframe, back, bshape, bframe, abcorr,
        obsrvr, step, cnfine, result,
    )
    return _window_found(result)


def _gfsep(cnfine, targ1, shape1, inframe1, targ2, shape2, inframe2, abcorr,
           obsrvr, relate, refval, adjust, step):
    result = _result_window()
    spice.gfsep(
        targ1, shape1, inframe1, targ2, shape2, inframe2, abcorr, obsrvr,
        relate, refval, adjust, step, MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


def _gfdist(cnfine, target, abcorr, obsrvr, relate, refval, adjust, step):
    result = _result_window()
    spice.gfdist(
        target, abcorr, obsrvr, relate, refval, adjust, step,
        MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


_STEP = Arg("step", EphemerisPeriod, EphemerisPeriod(3600.0))
_CNFINE = Arg("cnfine", Window, tooltip="Confinement window")
_RELATE = Arg("relate", str, "LOCMIN", tooltip=">, =, <, ABSMAX, ABSMIN, LOCMAX, LOCMIN")
_SEARCH = {
    "category": SEARCH,
    "keywords": ("EVENT", "GEOMETRY", "SEARCH"),
    "found": True,
}

gfoclt = _bind(
    "gfoclt",
    (
        _CNFINE,
        Arg("occtyp", str, "ANY", tooltip="FULL, ANNULAR, PARTIAL or ANY"),
        Arg("front", str, "MOON"), Arg("fshape", str, "ELLIPSOID"),
        Arg("fframe", str, "IAU_MOON"),
        Arg("back", str, "SUN"), Arg("bshape", str, "ELLIPSOID"),
        Arg("bframe", str, "IAU_SUN"),
        Arg("abcorr", str, "CN"),
        Arg("obsrvr", str, "EARTH"),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals when an observer sees one target occulted "
    "by, or in transit across, another",
    routine=_gfoclt,
    **_SEARCH,
)
gfsep = _bind(
    "gfsep",
    (
        _CNFINE,
        Arg("targ1", str, "MOON"), Arg("shape1", str, "SPHERE"),
        Arg("inframe1", str, "NULL"),
        Arg("targ2", str, "SUN"), Arg("shape2", str, "SPHERE"),
        Arg("inframe2", str, "NULL"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _RELATE,
        Arg("refval", Angle, Angle()),
        Arg("adjust", Angle, Angle()),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals when the angular separation between the "
    "position vectors of two target bodies relative to an observer "
    "satisfies a numerical relationship",
    routine=_gfsep,
    **_SEARCH,
)
gfdist = _bind(
    "gfdist",
    (
        _CNFINE,
        Arg("target", str, "MOON"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _RELATE,
        Arg("refval", Distance, Distance()),
        Arg("adjust", Distance, Distance()),
        _STEP,
    ),
    (Out("result", Window),),
    "Return the time window over which a specified constraint on "
    "observer-target distance is met",
    routine=_gfdist,
    **_SEARCH,
)


def _gfposc(cnfine, target, inframe, abcorr, obsrvr, crdsys, coord, relate,
            refval, adjust, step):
    result = _result_window()
    spice.gfposc(
        target, inframe, abcorr, obsrvr, crdsys, coord, relate, refval,
        adjust, step, MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


def _gfsubc(cnfine, target, fixref, method, abcorr, obsrvr, crdsys, coord,
            relate, refval, adjust, step):
    result = _result_window()
    spice.gfsubc(
        target, fixref, method, abcorr, obsrvr, crdsys, coord, relate,
        refval, adjust, step, MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


def _gfilum(cnfine, method, angtyp, target, illumn, fixref, abcorr, obsrvr,
            spoint, relate, refval, adjust, step):
    result = _result_window()
    spice.gfilum(
        method, angtyp, target, illumn, fixref, abcorr, obsrvr, spoint,
        relate, refval, adjust, step, MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


def _gfpa(cnfine, target, illmin, abcorr, obsrvr, relate, refval, adjust,
          step):
    result = _result_window()
    spice.gfpa(
        target, illmin, abcorr, obsrvr, relate, refval, adjust, step,
        MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


def _gfrr(cnfine, target, abcorr, obsrvr, relate, refval, adjust, step):
    result = _result_window()
    spice.gfrr(
        target, abcorr, obsrvr, relate, refval, adjust, step,
        MAX_INTERVALS, cnfine, result,
    )
    return _window_found(result)


def _gftfov(cnfine, inst, target, tshape, tframe, abcorr, obsrvr, step):
    result = _result_window()
    spice.gftfov(
        inst, target, tshape, tframe, abcorr, obsrvr, step, cnfine, result,
    )
    return _window_found(result)


def _gfrfov(cnfine, inst, raydir, rframe, abcorr, obsrvr, step):
    result = _result_window()
    spice.gfrfov(inst, raydir, rframe, abcorr, obsrvr, step, cnfine, result)
    return _window_found(result)


_CRDSYS = Arg("crdsys", str, "LATITUDINAL",
              tooltip="RECTANGULAR, LATITUDINAL, RA/DEC, SPHERICAL, "
                      "CYLINDRICAL, GEODETIC or PLANETOGRAPHIC")
# Units of refval follow the chosen coordinate: km for distances,
# radians for angles.
_COORD_REFVAL = Arg("refval", float, 0.0)
_COORD_ADJUST = Arg("adjust", float, 0.0)

gfposc = _bind(
    "gfposc",
    (
        _CNFINE,
        Arg("target", str, "MOON"),
        Arg("inframe", str, "J2000"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _CRDSYS,
        Arg("coord", str, "LATITUDE"),
        _RELATE,
        _COORD_REFVAL,
        _COORD_ADJUST,
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals for which a coordinate of an "
    "observer-target position vector satisfies a numerical constraint",
    routine=_gfposc,
    **_SEARCH,
)
gfsubc = _bind(
    "gfsubc",
    (
        _CNFINE,
        Arg("target", str, "EARTH"),
        Arg("fixref", str, "IAU_EARTH"),
        Arg("method", str, "NEAR POINT: ELLIPSOID"),
        _ABCORR,
        Arg("obsrvr", str, "MOON"),
        Arg("crdsys", str, "GEODETIC", tooltip=_CRDSYS.tooltip),
        Arg("coord", str, "LATITUDE"),
        _RELATE,
        _COORD_REFVAL,
        _COORD_ADJUST,
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals for which a coordinate of a subpoint "
    "position vector satisfies a numerical constraint",
    routine=_gfsubc,
    **_SEARCH,
)
gfilum = _bind(
    "gfilum",
    (
        _CNFINE,
        Arg("method", str, "ELLIPSOID"),
        Arg("angtyp", str, "INCIDENCE", tooltip="PHASE, INCIDENCE or EMISSION"),
        Arg("target", str, "MOON"),
        Arg("illumn", str, "SUN"),
        Arg("fixref", str, "IAU_MOON"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        Arg("spoint", DistanceVector, DistanceVector()),
        _RELATE,
        Arg("refval", Angle, Angle()),
        Arg("adjust", Angle, Angle()),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals when an illumination angle at a surface "
    "point satisfies a numerical constraint",
    routine=_gfilum,
    **_SEARCH,
)
gfpa = _bind(
    "gfpa",
    (
        _CNFINE,
        Arg("target", str, "MOON"),
        Arg("illmin", str, "SUN"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _RELATE,
        Arg("refval", Angle, Angle()),
        Arg("adjust", Angle, Angle()),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals for which a phase angle satisfies a "
    "numerical constraint",
    routine=_gfpa,
    **_SEARCH,
)
gfrr = _bind(
    "gfrr",
    (
        _CNFINE,
        Arg("target", str, "MOON"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _RELATE,
        Arg("refval", Speed, Speed()),
        Arg("adjust", Speed, Speed()),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals for which the range rate of a target "
    "relative to an observer satisfies a numerical constraint",
    routine=_gfrr,
    **_SEARCH,
)
gftfov = _bind(
    "gftfov",
    (
        _CNFINE,
        Arg("inst", str),
        Arg("target", str),
        Arg("tshape", str, "ELLIPSOID", tooltip="ELLIPSOID or POINT"),
        Arg("tframe", str, "NULL"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals when a target intersects the field of view "
    "of an instrument",
    routine=_gftfov,
    **_SEARCH,
)
gfrfov = _bind(
    "gfrfov",
    (
        _CNFINE,
        Arg("inst", str),
        Arg("raydir", DimensionlessVector),
        Arg("rframe", str, "J2000"),
        _ABCORR,
        Arg("obsrvr", str, "EARTH"),
        _STEP,
    ),
    (Out("result", Window),),
    "Determine time intervals when a ray intersects the field of view "
    "of an instrument",
    routine=_gfrfov,
    **_SEARCH,
)
