"""Unit-tagged value types passed to and returned from wrapped calls.

Each type knows how to turn itself into the primitive form SpiceyPy expects
(``native()``) and how to build itself back from raw outputs
(``from_native()``). Internally everything is kept in CSPICE base units:
kilometers, seconds, radians.

Default construction always gives the zero value: zero components, zero
matrices (not identity) and empty windows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Sequence, get_type_hints

import numpy as np
import spiceypy as spice


def to_native(value: Any) -> Any:
    """Native form of *value*; plain Python values pass through."""
    if hasattr(value, "native"):
        return value.native()
    return value


def from_native(kind: Any, raw: Any) -> Any:
    """Build a *kind* from a raw SpiceyPy output."""
    if kind is None:
        return raw
    if kind is float:
        return float(raw)
    if kind is int:
        return int(raw)
    if kind is bool:
        return bool(raw)
    if kind is str:
        return str(raw)
    return kind.from_native(raw)


def is_scalar(kind: Any) -> bool:
    return isinstance(kind, type) and issubclass(kind, _Scalar)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

class _Scalar:
    """A single float in base units."""

    def native(self) -> float:
        return float(getattr(self, fields(self)[0].name))

    @classmethod
    def from_native(cls, raw: Any):
        return cls(float(raw))


@dataclass
class Angle(_Scalar):
    radians: float = 0.0

    @classmethod
    def from_degrees(cls, degrees: float) -> Angle:
        return cls(math.radians(degrees))

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)


@dataclass
class Distance(_Scalar):
    km: float = 0.0

    @property
    def meters(self) -> float:
        return self.km * 1000.0


@dataclass
class Speed(_Scalar):
    kmps: float = 0.0


@dataclass
class AngularRate(_Scalar):
    radians_per_second: float = 0.0


@dataclass
class EphemerisTime(_Scalar):
    """Seconds past J2000 TDB."""

    seconds: float = 0.0


@dataclass
class EphemerisPeriod(_Scalar):
    seconds: float = 0.0


@dataclass
class MassConstant(_Scalar):
    """Gravitational parameter GM in km^3/s^2."""

    gm: float = 0.0


# ---------------------------------------------------------------------------
# 3-vectors
# ---------------------------------------------------------------------------

class _Vector:
    """Fixed-length vector of floats; native form is a list."""

    def native(self) -> list[float]:
        return [float(getattr(self, f.name)) for f in fields(self)]

    @classmethod
    def from_native(cls, raw: Sequence[float]):
        return cls(*(float(v) for v in raw))

    def __iter__(self):
        return iter(self.native())


@dataclass
class DimensionlessVector(_Vector):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class DistanceVector(_Vector):
    """Position in km."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class VelocityVector(_Vector):
    """Velocity in km/s."""

    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0


@dataclass
class AngularVelocity(_Vector):
    """Angular velocity in rad/s."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Quaternion(_Vector):
    """SPICE-style quaternion, scalar component first."""

    w: float = 0.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class StateVector:
    """Position (km) and velocity (km/s)."""

    r: DistanceVector = field(default_factory=DistanceVector)
    v: VelocityVector = field(default_factory=VelocityVector)

    def native(self) -> list[float]:
        return self.r.native() + self.v.native()

    @classmethod
    def from_native(cls, raw: Sequence[float]) -> StateVector:
        return cls(
            DistanceVector.from_native(raw[:3]),
            VelocityVector.from_native(raw[3:6]),
        )


# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------

class _Matrix:
    size = 3

    def native(self) -> list[list[float]]:
        return [list(row) for row in self.m]

    @classmethod
    def from_native(cls, raw: Any):
        rows = np.asarray(raw, dtype=float).reshape(cls.size, cls.size)
        return cls(tuple(tuple(float(v) for v in row) for row in rows))

    @classmethod
    def identity(cls):
        return cls.from_native(np.identity(cls.size))


def _zeros(n: int) -> tuple[tuple[float, ...], ...]:
    return tuple((0.0,) * n for _ in range(n))


@dataclass
class RotationMatrix(_Matrix):
    m: tuple[tuple[float, ...], ...] = field(default_factory=lambda: _zeros(3))


@dataclass
class StateTransform(_Matrix):
    size = 6

    m: tuple[tuple[float, ...], ...] = field(default_factory=lambda: _zeros(6))


# ---------------------------------------------------------------------------
# Coordinate tuples
# ---------------------------------------------------------------------------

class _Record:
    """Named tuple of unit-tagged members, native form is a flat tuple."""

    def native(self) -> tuple[Any, ...]:
        return tuple(to_native(getattr(self, f.name)) for f in fields(self))

    @classmethod
    def from_native(cls, raw: Sequence[Any]):
        hints = get_type_hints(cls)
        return cls(*(
            from_native(hints[f.name], value)
            for f, value in zip(fields(cls), raw)
        ))

    def __iter__(self):
        return iter(self.native())


@dataclass
class LatitudinalVector(_Record):
    r: Distance = field(default_factory=Distance)
    lon: Angle = field(default_factory=Angle)
    lat: Angle = field(default_factory=Angle)


@dataclass
class SphericalVector(_Record):
    r: Distance = field(default_factory=Distance)
    colat: Angle = field(default_factory=Angle)
    lon: Angle = field(default_factory=Angle)


@dataclass
class CylindricalVector(_Record):
    r: Distance = field(default_factory=Distance)
    lon: Angle = field(default_factory=Angle)
    z: Distance = field(default_factory=Distance)


@dataclass
class GeodeticVector(_Record):
    lon: Angle = field(default_factory=Angle)
    lat: Angle = field(default_factory=Angle)
    alt: Distance = field(default_factory=Distance)


@dataclass
class PlanetographicVector(_Record):
    lon: Angle = field(default_factory=Angle)
    lat: Angle = field(default_factory=Angle)
    alt: Distance = field(default_factory=Distance)


@dataclass
class RADecVector(_Record):
    range: Distance = field(default_factory=Distance)
    ra: Angle = field(default_factory=Angle)
    dec: Angle = field(default_factory=Angle)


@dataclass
class AzElVector(_Record):
    range: Distance = field(default_factory=Distance)
    az: Angle = field(default_factory=Angle)
    el: Angle = field(default_factory=Angle)


@dataclass
class GeodeticVectorRates(_Record):
    dlon: AngularRate = field(default_factory=AngularRate)
    dlat: AngularRate = field(default_factory=AngularRate)
    dalt: Speed = field(default_factory=Speed)


@dataclass
class EulerAngles(_Record):
    angle3: Angle = field(default_factory=Angle)
    angle2: Angle = field(default_factory=Angle)
    angle1: Angle = field(default_factory=Angle)


@dataclass
class EulerAngleRates(_Record):
    """Time derivatives of the matching EulerAngles."""

    rate3: AngularRate = field(default_factory=AngularRate)
    rate2: AngularRate = field(default_factory=AngularRate)
    rate1: AngularRate = field(default_factory=AngularRate)


@dataclass
class ConicElements(_Record):
    """Osculating elements in the order used by conics/oscelt."""

    rp: Distance = field(default_factory=Distance)
    ecc: float = 0.0
    inc: Angle = field(default_factory=Angle)
    lnode: Angle = field(default_factory=Angle)
    argp: Angle = field(default_factory=Angle)
    m0: Angle = field(default_factory=Angle)
    epoch: EphemerisTime = field(default_factory=EphemerisTime)
    mu: MassConstant = field(default_factory=MassConstant)

    def native(self) -> list[float]:
        return list(super().native())

    @classmethod
    def from_native(cls, raw: Sequence[Any]) -> ConicElements:
        return super().from_native(list(raw)[:8])


# ---------------------------------------------------------------------------
# Time windows
# ---------------------------------------------------------------------------

@dataclass
class WindowSegment:
    start: EphemerisTime = field(default_factory=EphemerisTime)
    stop: EphemerisTime = field(default_factory=EphemerisTime)

    @property
    def duration(self) -> float:
        return self.stop.seconds - self.start.seconds


@dataclass
class Window:
    """Ordered list of disjoint time intervals (a SPICE window)."""

    segments: list[WindowSegment] = field(default_factory=list)

    @classmethod
    def of(cls, *intervals: tuple[float, float]) -> Window:
        return cls([
            WindowSegment(EphemerisTime(a), EphemerisTime(b))
            for a, b in intervals
        ])

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def native(self, size: int | None = None):
        """Build a SpiceyPy double-precision window cell."""
        size = size or max(2, 2 * len(self.segments))
        cell = spice.stypes.SPICEDOUBLE_CELL(size)
        for seg in self.segments:
            spice.wninsd(seg.start.seconds, seg.stop.seconds, cell)
        return cell

    @classmethod
    def from_native(cls, cell: Any) -> Window:
        segments = []
        for i in range(spice.wncard(cell)):
            et_start, et_end = spice.wnfetd(cell, i)
            segments.append(
                WindowSegment(EphemerisTime(et_start), EphemerisTime(et_end))
            )
        return cls(segments)
