"""NAIF body/frame ID translation and body constants from the kernel pool."""

from __future__ import annotations

from spice_bridge.registry import Arg, Binding, Out, register
from spice_bridge.units import DimensionlessVector, DistanceVector, MassConstant

NAIF_IDS = "NAIF IDs"
KERNEL = "Kernel"
FRAMES = "Frames"

bodc2n = register(Binding(
    "bodc2n",
    args=(Arg("code", int, 399),),
    outs=(Out("name", str),),
    found=True,
    category=NAIF_IDS,
    tooltip="Translate the SPICE integer code of a body into a common name "
            "for that body",
    keywords=("BODY", "CONVERSION"),
))

bodn2c = register(Binding(
    "bodn2c",
    args=(Arg("name", str, "EARTH"),),
    outs=(Out("code", int),),
    found=True,
    category=NAIF_IDS,
    tooltip="Translate the name of a body or object to the corresponding "
            "SPICE integer ID code",
    keywords=("BODY", "CONVERSION", "ID", "NAME"),
))

bods2c = register(Binding(
    "bods2c",
    args=(Arg("name", str, "EARTH"),),
    outs=(Out("code", int),),
    found=True,
    category=NAIF_IDS,
    tooltip="Translate a string containing a body name or ID code to an "
            "integer code",
    keywords=("BODY", "CONVERSION", "ID", "NAME", "UTILITY"),
))

boddef = register(Binding(
    "boddef",
    args=(Arg("name", str, "OUMUAMUA"), Arg("code", int, 3788040)),
    category=NAIF_IDS,
    tooltip="Define a body name/ID code pair for later translation via "
            "bodn2c or bodc2n",
    keywords=("BODY", "CONVERSION"),
))

bodfnd = register(Binding(
    "bodfnd",
    args=(Arg("body", int, 399), Arg("item", str, "RADII")),
    found=True,
    category=KERNEL,
    tooltip="Determine whether values exist for some item for any body in "
            "the kernel pool",
    keywords=("CONSTANTS",),
))


# ---------------------------------------------------------------------------
# Body constants: bodvrd (by name) and bodvcd (by ID), one binding per
# output shape.
# ---------------------------------------------------------------------------

_MAXN = 64

_SHAPES = {
    "": (None, None, "values"),
    "_scalar": (float, 1, "d.p. value"),
    "_vector": (DimensionlessVector, 3, "vector"),
    "_distance_vector": (DistanceVector, 3, "distance vector"),
    "_mass": (MassConstant, 1, "GM value"),
}


def _body_values(count: int | None):
    def finish(raw):
        dim, values = raw
        values = [float(v) for v in values[:dim]]
        if count is None:
            return values
        if len(values) < count:
            raise ValueError(
                f"expected {count} values from the kernel pool, got {len(values)}"
            )
        return values[0] if count == 1 else values[:count]

    return finish


def _bodv(routine: str, body_arg: Arg, item: str, suffix: str) -> Binding:
    kind, count, what = _SHAPES[suffix]
    subject = "name" if routine == "bodvrd" else "ID code"
    return register(Binding(
        routine + suffix,
        args=(body_arg, Arg("item", str, item)),
        outs=(Out("values", kind),),
        routine=routine,
        fixed={"maxn": _MAXN},
        finish=_body_values(count),
        category=KERNEL,
        tooltip=f"Fetch from the kernel pool the {what} of an item associated "
                f"with a body, where the body is specified by {subject}",
        keywords=("CONSTANTS",),
    ))


_BODY_NAME = Arg("bodynm", str, "EARTH")
_BODY_ID = Arg("bodyid", int, 399)

bodvrd = _bodv("bodvrd", _BODY_NAME, "RADII", "")
bodvrd_scalar = _bodv("bodvrd", _BODY_NAME, "RADII", "_scalar")
bodvrd_vector = _bodv("bodvrd", _BODY_NAME, "RADII", "_vector")
bodvrd_distance_vector = _bodv("bodvrd", _BODY_NAME, "RADII", "_distance_vector")
bodvrd_mass = _bodv("bodvrd", _BODY_NAME, "GM", "_mass")
bodvcd = _bodv("bodvcd", _BODY_ID, "RADII", "")
bodvcd_scalar = _bodv("bodvcd", _BODY_ID, "RADII", "_scalar")
bodvcd_vector = _bodv("bodvcd", _BODY_ID, "RADII", "_vector")
bodvcd_distance_vector = _bodv("bodvcd", _BODY_ID, "RADII", "_distance_vector")
bodvcd_mass = _bodv("bodvcd", _BODY_ID, "GM", "_mass")


# ---------------------------------------------------------------------------
# Reference frames
# ---------------------------------------------------------------------------

frmnam = register(Binding(
    "frmnam",
    args=(Arg("frcode", int, 10013),),
    outs=(Out("frname", str),),
    category=FRAMES,
    tooltip="Retrieve the name of a reference frame associated with a SPICE "
            "ID code (empty if unknown)",
    keywords=("FRAMES",),
))

namfrm = register(Binding(
    "namfrm",
    args=(Arg("frname", str, "IAU_EARTH"),),
    outs=(Out("frcode", int),),
    category=FRAMES,
    tooltip="Look up the frame ID code associated with a string (0 if "
            "unknown)",
    keywords=("FRAMES",),
))

frinfo = register(Binding(
    "frinfo",
    args=(Arg("frcode", int, 10013),),
    outs=(Out("cent", int), Out("frclss", int), Out("clssid", int)),
    found=True,
    category=FRAMES,
    tooltip="Retrieve the minimal attributes associated with a frame needed "
            "for converting transformations to and from it",
    keywords=("FRAMES",),
))

cidfrm = register(Binding(
    "cidfrm",
    args=(Arg("cent", int, 399),),
    outs=(Out("frcode", int), Out("frname", str)),
    found=True,
    category=FRAMES,
    tooltip="Retrieve frame ID code and name to associate with a frame "
            "center",
    keywords=("FRAMES",),
))
