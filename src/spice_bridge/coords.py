"""Coordinate system conversions."""

from __future__ import annotations

from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import (
    AzElVector,
    CylindricalVector,
    Distance,
    DistanceVector,
    GeodeticVector,
    LatitudinalVector,
    PlanetographicVector,
    RADecVector,
    SphericalVector,
)

CATEGORY = "Coordinates"
KEYWORDS = ("CONVERSION", "COORDINATES")

# IAU 2009 Earth ellipsoid, km.
EARTH_RE = Distance(6378.1366)
EARTH_F = (6378.1366 - 6356.7519) / 6378.1366


def _to_rect(name, arg_name, source, tooltip, extra=()):
    return register(Binding(
        name,
        args=(Arg(arg_name, source, source(), spread=True),) + tuple(extra),
        outs=(Out("rectan", DistanceVector),),
        category=CATEGORY,
        tooltip=tooltip,
        keywords=KEYWORDS,
    ))


def _convert(name, source, target, tooltip):
    return register(Binding(
        name,
        args=(Arg("vec", source, source(), spread=True),),
        outs=(Out("out", target, width=3),),
        category=CATEGORY,
        tooltip=tooltip,
        keywords=KEYWORDS,
    ))


def _from_rect(name, target, tooltip, extra=(), lead=()):
    return register(Binding(
        name,
        args=tuple(lead) + (Arg("rectan", DistanceVector, DistanceVector()),)
        + tuple(extra),
        outs=(Out("out", target, width=3),),
        category=CATEGORY,
        tooltip=tooltip,
        keywords=KEYWORDS,
    ))


_ELLIPSOID = (Arg("re", Distance, EARTH_RE), Arg("f", float, EARTH_F))
_AZEL_FLAGS = (
    Arg("azccw", bool, True, tooltip="azimuth is counter-clockwise"),
    Arg("elplsz", bool, True, tooltip="elevation increases with positive Z"),
)

latrec = _to_rect(
    "latrec", "latvec", LatitudinalVector,
    "Convert from latitudinal coordinates to rectangular coordinates",
)
reclat = _from_rect(
    "reclat", LatitudinalVector,
    "Convert from rectangular coordinates to latitudinal coordinates",
)
sphrec = _to_rect(
    "sphrec", "sphvec", SphericalVector,
    "Convert from spherical coordinates to rectangular coordinates",
)
recsph = _from_rect(
    "recsph", SphericalVector,
    "Convert from rectangular coordinates to spherical coordinates",
)
cylrec = _to_rect(
    "cylrec", "cylvec", CylindricalVector,
    "Convert from cylindrical to rectangular coordinates",
)
reccyl = _from_rect(
    "reccyl", CylindricalVector,
    "Convert from rectangular to cylindrical coordinates",
)
radrec = _to_rect(
    "radrec", "radvec", RADecVector,
    "Convert from range, right ascension, and declination to rectangular "
    "coordinates",
)
recrad = _from_rect(
    "recrad", RADecVector,
    "Convert rectangular coordinates to range, right ascension, and "
    "declination",
)
georec = _to_rect(
    "georec", "geovec", GeodeticVector,
    "Convert geodetic coordinates to rectangular coordinates",
    extra=_ELLIPSOID,
)
recgeo = _from_rect(
    "recgeo", GeodeticVector,
    "Convert from rectangular coordinates to geodetic coordinates",
    extra=_ELLIPSOID,
)
azlrec = _to_rect(
    "azlrec", "azlvec", AzElVector,
    "Convert from range, azimuth and elevation of a point to rectangular "
    "coordinates",
    extra=_AZEL_FLAGS,
)
recazl = _from_rect(
    "recazl", AzElVector,
    "Convert rectangular coordinates of a point to range, azimuth and "
    "elevation",
    extra=_AZEL_FLAGS,
)

latcyl = _convert(
    "latcyl", LatitudinalVector, CylindricalVector,
    "Convert from latitudinal coordinates to cylindrical coordinates",
)
cyllat = _convert(
    "cyllat", CylindricalVector, LatitudinalVector,
    "Convert from cylindrical to latitudinal coordinates",
)
latsph = _convert(
    "latsph", LatitudinalVector, SphericalVector,
    "Convert from latitudinal coordinates to spherical coordinates",
)
sphlat = _convert(
    "sphlat", SphericalVector, LatitudinalVector,
    "Convert from spherical coordinates to latitudinal coordinates",
)
cylsph = _convert(
    "cylsph", CylindricalVector, SphericalVector,
    "Convert from cylindrical to spherical coordinates",
)
sphcyl = _convert(
    "sphcyl", SphericalVector, CylindricalVector,
    "Convert from spherical coordinates to cylindrical coordinates",
)

pgrrec = register(Binding(
    "pgrrec",
    args=(
        Arg("body", str, "EARTH"),
        Arg("pgrvec", PlanetographicVector, PlanetographicVector(), spread=True),
    ) + _ELLIPSOID,
    outs=(Out("rectan", DistanceVector),),
    category=CATEGORY,
    tooltip="Convert planetographic coordinates to rectangular coordinates",
    keywords=KEYWORDS + ("GEOMETRY", "MATH"),
))

recpgr = _from_rect(
    "recpgr", PlanetographicVector,
    "Convert rectangular coordinates to planetographic coordinates",
    extra=_ELLIPSOID,
    lead=(Arg("body", str, "EARTH"),),
)

convrt = register(Binding(
    "convrt",
    args=(
        Arg("x", float, 1.0),
        Arg("in_unit", str, "KM"),
        Arg("out_unit", str, "M"),
    ),
    outs=(Out("y", float),),
    category="Conversion",
    tooltip="Take a measurement X, the units associated with X, and units "
            "to which X should be converted; return Y, the value of the "
            "measurement in the output units",
    keywords=("CONVERSION", "UNITS"),
))
