"""Mathematical and physical constants provided by CSPICE."""

from __future__ import annotations

from spice_bridge.registry import Binding, Out, register
from spice_bridge.units import Angle, EphemerisPeriod, Speed

CATEGORY = "Constants"


def _constant(name: str, tooltip: str, kind=float, routine: str | None = None):
    return register(Binding(
        name,
        outs=(Out("value", kind),),
        routine=routine,
        category=CATEGORY,
        tooltip=tooltip,
        keywords=("CONSTANTS",),
    ))


pi = _constant("pi", "Value of pi")
halfpi = _constant("halfpi", "Half the value of pi")
twopi = _constant("twopi", "Twice the value of pi")
pi_angle = _constant("pi_angle", "Pi radians as an angle", Angle, "pi")
halfpi_angle = _constant("halfpi_angle", "Pi/2 radians as an angle", Angle, "halfpi")
twopi_angle = _constant("twopi_angle", "2*pi radians as an angle", Angle, "twopi")
dpr = _constant("dpr", "Number of degrees per radian")
rpd = _constant("rpd", "Number of radians per degree")
spd = _constant("spd", "Number of seconds in a day", EphemerisPeriod)
clight = _constant("clight", "Speed of light in a vacuum", Speed)

j2000 = _constant("j2000", "Julian Date of 2000 JAN 01 12:00:00")
j1900 = _constant("j1900", "Julian Date of 1899 DEC 31 12:00:00")
j1950 = _constant("j1950", "Julian Date of 1950 JAN 01 00:00:00")
j2100 = _constant("j2100", "Julian Date of 2100 JAN 01 12:00:00")
b1900 = _constant("b1900", "Julian Date of the Besselian date 1900.0")
b1950 = _constant("b1950", "Julian Date of the Besselian date 1950.0")
jyear = _constant("jyear", "Seconds in a julian year")
tyear = _constant("tyear", "Seconds in a tropical year")
jyear_period = _constant(
    "jyear_period", "A julian year as a period", EphemerisPeriod, "jyear",
)
tyear_period = _constant(
    "tyear_period", "A tropical year as a period", EphemerisPeriod, "tyear",
)

dpmax = _constant("dpmax", "Largest double precision number")
dpmin = _constant("dpmin", "Smallest (most negative) double precision number")
intmax = _constant("intmax", "Largest integer number", int)
intmin = _constant("intmin", "Smallest (most negative) integer number", int)
