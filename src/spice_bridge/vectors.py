"""Vector, matrix and rotation algebra.

Several routines come in unit-tagged variants (``vadd_distance``,
``vnorm_velocity`` ...) that call the same CSPICE routine but carry the
units of their inputs through to the outputs.
"""

from __future__ import annotations

import spiceypy as spice

from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import (
    Angle,
    AngularRate,
    AngularVelocity,
    DimensionlessVector,
    Distance,
    DistanceVector,
    EulerAngleRates,
    EulerAngles,
    Quaternion,
    RotationMatrix,
    Speed,
    StateTransform,
    StateVector,
    VelocityVector,
)

MATH = "Math"
ROTATION = "Rotation"

_X = DimensionlessVector(1.0, 0.0, 0.0)
_Y = DimensionlessVector(0.0, 1.0, 0.0)
_Z = DimensionlessVector(0.0, 0.0, 1.0)


def _bind(name, args, outs, tooltip, routine=None, category=MATH, keywords=("VECTOR",)):
    return register(Binding(
        name,
        args=tuple(args),
        outs=tuple(outs),
        routine=routine,
        category=category,
        tooltip=tooltip,
        keywords=keywords,
    ))


# name suffix -> (vector kind, magnitude kind)
_VARIANTS = {
    "": (DimensionlessVector, float),
    "_distance": (DistanceVector, Distance),
    "_velocity": (VelocityVector, Speed),
    "_angular_velocity": (AngularVelocity, AngularRate),
}


def _family(name, make):
    """Register *name* for each unit variant, returning the dimensionless one."""
    for suffix, (vec, mag) in _VARIANTS.items():
        binding = make(name + suffix, name, vec, mag)
        if not suffix:
            plain = binding
    return plain


# ---------------------------------------------------------------------------
# Vectors
# ---------------------------------------------------------------------------

vadd = _family("vadd", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()), Arg("v2", vec, vec())), (Out("vout", vec),),
    "Add two 3 dimensional vectors", routine=r,
))
vsub = _family("vsub", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()), Arg("v2", vec, vec())), (Out("vout", vec),),
    "Compute the difference between two 3-dimensional vectors", routine=r,
))
vminus = _family("vminus", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()),), (Out("vout", vec),),
    "Negate a double precision 3-dimensional vector", routine=r,
))
vscl = _family("vscl", lambda n, r, vec, mag: _bind(
    n, (Arg("s", float, 1.0), Arg("v1", vec, vec())), (Out("vout", vec),),
    "Multiply a scalar and a 3-dimensional double precision vector",
    routine=r,
))
vequ = _family("vequ", lambda n, r, vec, mag: _bind(
    n, (Arg("vin", vec, vec()),), (Out("vout", vec),),
    "Make one double precision 3-dimensional vector equal to another",
    routine=r,
))
vnorm = _family("vnorm", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()),), (Out("vmag", mag),),
    "Compute the magnitude of a double precision, 3-dimensional vector",
    routine=r,
))
vdist = _family("vdist", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()), Arg("v2", vec, vec())), (Out("dist", mag),),
    "Return the distance between two three-dimensional vectors", routine=r,
))
vdot = _family("vdot", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()), Arg("v2", vec, vec())), (Out("value", float),),
    "Compute the dot product of two double precision, 3-dimensional vectors",
    routine=r,
))
vhat = _family("vhat", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()),), (Out("vout", DimensionlessVector),),
    "Find the unit vector along a double precision 3-dimensional vector",
    routine=r,
))
unorm = _family("unorm", lambda n, r, vec, mag: _bind(
    n, (Arg("v1", vec, vec()),),
    (Out("vout", DimensionlessVector), Out("vmag", mag)),
    "Normalize a double precision 3-vector and return its magnitude",
    routine=r,
))

vcrss = _bind(
    "vcrss", (Arg("v1", DimensionlessVector, _X), Arg("v2", DimensionlessVector, _Y)),
    (Out("vout", DimensionlessVector),),
    "Compute the cross product of two 3-dimensional vectors",
)
ucrss = _bind(
    "ucrss", (Arg("v1", DimensionlessVector, _X), Arg("v2", DimensionlessVector, _Y)),
    (Out("vout", DimensionlessVector),),
    "Compute the normalized cross product of two 3-vectors",
)
vsep = _bind(
    "vsep", (Arg("v1", DimensionlessVector, _X), Arg("v2", DimensionlessVector, _Y)),
    (Out("angle", Angle),),
    "Find the separation angle in radians between two double precision, "
    "3-dimensional vectors",
)
vrotv = _bind(
    "vrotv",
    (
        Arg("v", DimensionlessVector, _X),
        Arg("axis", DimensionlessVector, _Z),
        Arg("theta", Angle, Angle()),
    ),
    (Out("r", DimensionlessVector),),
    "Rotate a vector about a specified axis vector by a specified angle",
)
vproj = _bind(
    "vproj", (Arg("a", DimensionlessVector), Arg("b", DimensionlessVector)),
    (Out("p", DimensionlessVector),),
    "Find the projection of one vector onto another vector",
)
vperp = _bind(
    "vperp", (Arg("a", DimensionlessVector), Arg("b", DimensionlessVector)),
    (Out("p", DimensionlessVector),),
    "Find the component of a vector that is perpendicular to a second vector",
)
vlcom = _bind(
    "vlcom",
    (
        Arg("a", float, 1.0), Arg("v1", DimensionlessVector, _X),
        Arg("b", float, 1.0), Arg("v2", DimensionlessVector, _Y),
    ),
    (Out("sum", DimensionlessVector),),
    "Compute a vector linear combination of two double precision, "
    "3-dimensional vectors",
)
vlcom3 = _bind(
    "vlcom3",
    (
        Arg("a", float, 1.0), Arg("v1", DimensionlessVector, _X),
        Arg("b", float, 1.0), Arg("v2", DimensionlessVector, _Y),
        Arg("c", float, 1.0), Arg("v3", DimensionlessVector, _Z),
    ),
    (Out("sum", DimensionlessVector),),
    "Compute the vector linear combination a*v1 + b*v2 + c*v3 of "
    "double precision, 3-dimensional vectors",
)
vzero = _bind(
    "vzero", (Arg("v", DimensionlessVector, DimensionlessVector()),),
    (Out("is_zero", bool),),
    "Indicate whether a 3-vector is the zero vector",
)


# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------

_M = Arg("m1", RotationMatrix)

mxv = _family("mxv", lambda n, r, vec, mag: _bind(
    n, (_M, Arg("vin", vec, vec())), (Out("vout", vec),),
    "Multiply a 3x3 double precision matrix with a 3-dimensional double "
    "precision vector", routine=r, keywords=("MATRIX", "VECTOR"),
))
mtxv = _family("mtxv", lambda n, r, vec, mag: _bind(
    n, (_M, Arg("vin", vec, vec())), (Out("vout", vec),),
    "Multiply the transpose of a 3x3 matrix on the left with a vector on "
    "the right", routine=r, keywords=("MATRIX", "VECTOR"),
))
mxv_state = _bind(
    "mxv_state",
    (Arg("m", StateTransform), Arg("state", StateVector, StateVector())),
    (Out("vout", StateVector),),
    "Multiply a 6x6 state transformation matrix with a state vector",
    routine="mxvg", keywords=("MATRIX", "VECTOR"),
)
mtxv_state = _bind(
    "mtxv_state",
    (Arg("m", StateTransform), Arg("state", StateVector, StateVector())),
    (Out("vout", StateVector),),
    "Multiply the transpose of a 6x6 state transformation matrix with a "
    "state vector",
    routine="mtxvg", keywords=("MATRIX", "VECTOR"),
)
mxm = _bind(
    "mxm", (_M, Arg("m2", RotationMatrix)), (Out("mout", RotationMatrix),),
    "Multiply two 3x3 double precision matrices", keywords=("MATRIX",),
)
mxmt = _bind(
    "mxmt", (_M, Arg("m2", RotationMatrix)), (Out("mout", RotationMatrix),),
    "Multiply a 3x3 matrix and the transpose of another 3x3 matrix",
    keywords=("MATRIX",),
)
mtxm = _bind(
    "mtxm", (_M, Arg("m2", RotationMatrix)), (Out("mout", RotationMatrix),),
    "Multiply the transpose of a 3x3 matrix and a 3x3 matrix",
    keywords=("MATRIX",),
)
xpose = _bind(
    "xpose", (Arg("m", RotationMatrix),), (Out("mout", RotationMatrix),),
    "Transpose a 3x3 matrix", keywords=("MATRIX",),
)
invert = _bind(
    "invert", (Arg("m", RotationMatrix),), (Out("mout", RotationMatrix),),
    "Generate the inverse of a 3x3 matrix", keywords=("MATRIX",),
)
det = _bind(
    "det", (Arg("m1", RotationMatrix),), (Out("value", float),),
    "Compute the determinant of a double precision 3x3 matrix",
    keywords=("MATRIX",),
)
trace = _bind(
    "trace", (Arg("matrix", RotationMatrix),), (Out("value", float),),
    "Return the trace of a 3x3 matrix", keywords=("MATRIX",),
)
ident = _bind(
    "ident", (), (Out("matrix", RotationMatrix),),
    "Return the 3x3 identity matrix", keywords=("MATRIX",),
)


# ---------------------------------------------------------------------------
# Rotations
# ---------------------------------------------------------------------------

_ROT = {"category": ROTATION, "keywords": ("MATRIX", "ROTATION")}

axisar = _bind(
    "axisar",
    (Arg("axis", DimensionlessVector, _Z), Arg("angle", Angle, Angle())),
    (Out("r", RotationMatrix),),
    "Construct a rotation matrix that rotates vectors by a specified angle "
    "about a specified axis", **_ROT,
)
raxisa = _bind(
    "raxisa", (Arg("matrix", RotationMatrix),),
    (Out("axis", DimensionlessVector), Out("angle", Angle)),
    "Compute the axis of the rotation given by an input matrix and the "
    "angle of the rotation about that axis", **_ROT,
)
rotate = _bind(
    "rotate", (Arg("angle", Angle, Angle()), Arg("iaxis", int, 3)),
    (Out("mout", RotationMatrix),),
    "Calculate the 3x3 rotation matrix generated by a rotation of a "
    "specified angle about a specified axis", **_ROT,
)
rotmat = _bind(
    "rotmat",
    (Arg("m1", RotationMatrix), Arg("angle", Angle, Angle()), Arg("iaxis", int, 3)),
    (Out("mout", RotationMatrix),),
    "Apply a rotation of angle radians about axis iaxis to a matrix", **_ROT,
)
rotvec = _bind(
    "rotvec",
    (
        Arg("v1", DimensionlessVector, _X),
        Arg("angle", Angle, Angle()),
        Arg("iaxis", int, 3),
    ),
    (Out("vout", DimensionlessVector),),
    "Transform a vector to a new coordinate system rotated by angle "
    "radians about axis iaxis", **_ROT,
)
twovec = _bind(
    "twovec",
    (
        Arg("axdef", DimensionlessVector, _X), Arg("indexa", int, 1),
        Arg("plndef", DimensionlessVector, _Y), Arg("indexp", int, 2),
    ),
    (Out("mout", RotationMatrix),),
    "Find the transformation to the right-handed frame having a given "
    "vector as a specified axis and having a second given vector lying in "
    "a specified coordinate plane", **_ROT,
)
m2eul = _bind(
    "m2eul",
    (
        Arg("r", RotationMatrix),
        Arg("axis3", int, 3), Arg("axis2", int, 1), Arg("axis1", int, 3),
    ),
    (Out("angles", EulerAngles, width=3),),
    "Factor a rotation matrix as a product of three rotations about "
    "specified coordinate axes", **_ROT,
)
eul2m = _bind(
    "eul2m",
    (
        Arg("angles", EulerAngles, EulerAngles(), spread=True),
        Arg("axis3", int, 3), Arg("axis2", int, 1), Arg("axis1", int, 3),
    ),
    (Out("r", RotationMatrix),),
    "Construct a rotation matrix from a set of Euler angles", **_ROT,
)
m2q = _bind(
    "m2q", (Arg("r", RotationMatrix),), (Out("q", Quaternion),),
    "Find a unit quaternion corresponding to a specified rotation matrix",
    **_ROT,
)
q2m = _bind(
    "q2m", (Arg("q", Quaternion, Quaternion(1.0, 0.0, 0.0, 0.0)),),
    (Out("r", RotationMatrix),),
    "Find the rotation matrix corresponding to a specified unit quaternion",
    **_ROT,
)
qxq = _bind(
    "qxq", (Arg("q1", Quaternion), Arg("q2", Quaternion)), (Out("qout", Quaternion),),
    "Multiply two quaternions", **_ROT,
)
qdq2av = _bind(
    "qdq2av",
    (
        Arg("q", Quaternion, Quaternion(1.0, 0.0, 0.0, 0.0)),
        Arg("dq", Quaternion, Quaternion()),
    ),
    (Out("av", AngularVelocity),),
    "Derive angular velocity from a unit quaternion and its derivative "
    "with respect to time", **_ROT,
)


# ---------------------------------------------------------------------------
# State transformations
# ---------------------------------------------------------------------------

xf2rav = _bind(
    "xf2rav", (Arg("xform", StateTransform),),
    (Out("rot", RotationMatrix), Out("av", AngularVelocity)),
    "Determine the rotation matrix and angular velocity of the rotation "
    "from a state transformation matrix", **_ROT,
)
rav2xf = _bind(
    "rav2xf",
    (Arg("rot", RotationMatrix), Arg("av", AngularVelocity, AngularVelocity())),
    (Out("xform", StateTransform),),
    "Determine a state transformation matrix from a rotation matrix and "
    "the angular velocity of the rotation", **_ROT,
)


def _xf2eul(xform, axisa, axisb, axisc):
    eulang, unique = spice.xf2eul(xform, axisa, axisb, axisc)
    return (*eulang, unique)


def _eul2xf(angles, rates, axisa, axisb, axisc):
    return spice.eul2xf(list(angles) + list(rates), axisa, axisb, axisc)


xf2eul = _bind(
    "xf2eul",
    (
        Arg("xform", StateTransform),
        Arg("axisa", int, 3), Arg("axisb", int, 1), Arg("axisc", int, 3),
    ),
    (
        Out("angles", EulerAngles, width=3),
        Out("rates", EulerAngleRates, width=3),
        Out("unique", bool),
    ),
    "Convert a state transformation matrix to Euler angles and their "
    "derivatives", routine=_xf2eul, **_ROT,
)
eul2xf = _bind(
    "eul2xf",
    (
        Arg("angles", EulerAngles, EulerAngles()),
        Arg("rates", EulerAngleRates, EulerAngleRates()),
        Arg("axisa", int, 3), Arg("axisb", int, 1), Arg("axisc", int, 3),
    ),
    (Out("xform", StateTransform),),
    "Compute a state transformation from an Euler angle factorization of "
    "a rotation and the derivatives of those Euler angles",
    routine=_eul2xf, **_ROT,
)


def _flattening(radii) -> float:
    re, _, rp = radii
    if re == 0.0:
        spice.setmsg("The equatorial radius is zero.")
        spice.sigerr("SPICE(ZERORADIUS)")
        return 0.0
    return (re - rp) / re


flattening = _bind(
    "flattening", (Arg("radii", DistanceVector),), (Out("f", float),),
    "Flattening coefficient (Re-Rp)/Re of a spheroid with the given radii",
    routine=_flattening, keywords=("MATH",),
)
