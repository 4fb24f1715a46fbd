"""Time system conversions.

Most of these need a leapseconds kernel (LSK) loaded first; without one
they return FAILURE with ``SPICE(NOLEAPSECONDS)``. ``et_now`` is the
exception: it uses the host clock and a fixed leapsecond count.
"""

from __future__ import annotations

from datetime import datetime, timezone

from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import Angle, EphemerisPeriod, EphemerisTime

CATEGORY = "Time"

# UTC instant of J2000 (2000 JAN 01 12:00:00 TDB).
_J2000_UTC = datetime(2000, 1, 1, 11, 58, 55, 816000, tzinfo=timezone.utc)
# Leap seconds inserted after J2000, as of naif0012.tls.
_LEAPSECONDS_SINCE_J2000 = 5


def _et_now() -> float:
    elapsed = datetime.now(timezone.utc) - _J2000_UTC
    return elapsed.total_seconds() + _LEAPSECONDS_SINCE_J2000


def _checked_parse(raw):
    value, errmsg = raw
    if errmsg:
        raise ValueError(errmsg)
    return value


def _checked_picture(raw):
    pictur, ok, errmsg = raw
    if not ok:
        raise ValueError(errmsg or "could not build a time picture")
    return pictur


str2et = register(Binding(
    "str2et",
    args=(Arg("str", str, "2021 October 1  15:37:60.5 (PST)"),),
    outs=(Out("et", EphemerisTime),),
    category=CATEGORY,
    tooltip="Convert a string representing an epoch to a double precision "
            "value representing the number of TDB seconds past the J2000 "
            "epoch",
    keywords=("TIME",),
))

utc2et = register(Binding(
    "utc2et",
    args=(Arg("utcstr", str, "2021-10-01T22:46:52.18"),),
    outs=(Out("et", EphemerisTime),),
    category=CATEGORY,
    tooltip="Convert an input time from Calendar or Julian Date format, UTC, "
            "to ephemeris seconds past J2000",
    keywords=("TIME",),
))

et2utc = register(Binding(
    "et2utc",
    args=(
        Arg("et", EphemerisTime),
        Arg("format", str, "C", tooltip="C, D, J, ISOC or ISOD"),
        Arg("prec", int, 4),
    ),
    outs=(Out("utcstr", str),),
    category=CATEGORY,
    tooltip="Convert an input time from ephemeris seconds past J2000 to "
            "Calendar, Day-of-Year, or Julian Date format, UTC",
    keywords=("TIME",),
))

timout = register(Binding(
    "timout",
    args=(
        Arg("et", EphemerisTime),
        Arg("pictur", str, "MON DD, YYYY HR:MN:SC.#### (TDB)"),
    ),
    outs=(Out("output", str),),
    category=CATEGORY,
    tooltip="Convert an input epoch represented in TDB seconds past the TDB "
            "epoch of J2000 to a character string formatted to the "
            "specifications of a user's format picture",
    keywords=("TIME",),
))

etcal = register(Binding(
    "etcal",
    args=(Arg("et", EphemerisTime),),
    outs=(Out("calendar", str),),
    category=CATEGORY,
    tooltip="Convert from an ephemeris epoch measured in seconds past the "
            "epoch of J2000 to a calendar string format using a formal "
            "calendar free of leapseconds",
    keywords=("TIME",),
))

deltet = register(Binding(
    "deltet",
    args=(
        Arg("epoch", float, 0.0),
        Arg("eptype", str, "UTC", tooltip="UTC or ET"),
    ),
    outs=(Out("delta", EphemerisPeriod),),
    category=CATEGORY,
    tooltip="Return the value of Delta ET (ET-UTC) for an input epoch",
    keywords=("TIME",),
))

unitim = register(Binding(
    "unitim",
    args=(
        Arg("epoch", float, 0.0),
        Arg("insys", str, "ET"),
        Arg("outsys", str, "ET"),
    ),
    outs=(Out("out", float),),
    category=CATEGORY,
    tooltip="Transform time from one uniform scale to another (TAI, TDT, "
            "TT, ET, TDB, JDTDT, JDTDB, JED)",
    keywords=("TIME",),
))

et2lst = register(Binding(
    "et2lst",
    args=(
        Arg("et", EphemerisTime),
        Arg("body", int, 399),
        Arg("lon", Angle, Angle()),
        Arg("type", str, "PLANETOCENTRIC"),
    ),
    outs=(
        Out("hr", int), Out("mn", int), Out("sc", int),
        Out("time", str), Out("ampm", str),
    ),
    category=CATEGORY,
    tooltip="Given an ephemeris epoch, compute the local solar time for an "
            "object on the surface of a body at a specified longitude",
    keywords=("TIME",),
))

tparse = register(Binding(
    "tparse",
    args=(Arg("string", str, "2021-10-01T22:46:52.18"),),
    outs=(Out("sp2000", EphemerisTime),),
    finish=_checked_parse,
    category=CATEGORY,
    tooltip="Parse a time string and return seconds past the J2000 epoch on "
            "a formal calendar",
    keywords=("TIME",),
))

tpictr = register(Binding(
    "tpictr",
    args=(Arg("sample", str, "Oct 1, 2021 15:37:60.5 (PST)"),),
    outs=(Out("pictur", str),),
    finish=_checked_picture,
    category=CATEGORY,
    tooltip="Create a time format picture suitable for use by timout from a "
            "given sample time string",
    keywords=("TIME",),
))

et_now = register(Binding(
    "et_now",
    outs=(Out("now", EphemerisTime),),
    routine=_et_now,
    category=CATEGORY,
    tooltip="Approximate current ephemeris time from the local clock "
            "(suitable for visualizations)",
    keywords=("TIME",),
))
