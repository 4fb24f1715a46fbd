"""Kernel pool variable access."""

from __future__ import annotations

from spice_bridge.registry import Arg, Binding, Out, register

CATEGORY = "Kernel Pool"
KEYWORDS = ("CONSTANTS", "FILES")


def _floats(raw):
    return [float(v) for v in raw]


def _ints(raw):
    return [int(v) for v in raw]


def _strings(raw):
    return [str(v) for v in raw]


gdpool = register(Binding(
    "gdpool",
    args=(
        Arg("name", str, "BODY514_NUT_PREC_RA"),
        Arg("start", int, 0),
        Arg("room", int, 7),
    ),
    outs=(Out("values"),),
    finish=_floats,
    found=True,
    category=CATEGORY,
    tooltip="Return the d.p. value of a kernel variable from the kernel pool",
    keywords=KEYWORDS,
))

gipool = register(Binding(
    "gipool",
    args=(Arg("name", str), Arg("start", int, 0), Arg("room", int, 1)),
    outs=(Out("ivals"),),
    finish=_ints,
    found=True,
    category=CATEGORY,
    tooltip="Return the integer value of a kernel variable from the kernel "
            "pool",
    keywords=KEYWORDS,
))

gcpool = register(Binding(
    "gcpool",
    args=(
        Arg("name", str, "PATH_VALUES"),
        Arg("start", int, 0),
        Arg("room", int, 1),
    ),
    outs=(Out("cvals"),),
    finish=_strings,
    found=True,
    category=CATEGORY,
    tooltip="Return the character value of a kernel variable from the "
            "kernel pool",
    keywords=KEYWORDS,
))

gnpool = register(Binding(
    "gnpool",
    args=(
        Arg("name", str, "BODY%%%_*", tooltip="Template that names should match"),
        Arg("start", int, 0),
        Arg("room", int, 100),
    ),
    outs=(Out("kvars"),),
    finish=_strings,
    found=True,
    category=CATEGORY,
    tooltip="Return names of kernel variables matching a specified template",
    keywords=KEYWORDS,
))

dtpool = register(Binding(
    "dtpool",
    args=(Arg("name", str, "BODY399_RADII"),),
    outs=(Out("n", int), Out("type", str)),
    found=True,
    category=CATEGORY,
    tooltip="Return the number of elements and the type ('C' or 'N') of a "
            "kernel pool variable",
    keywords=KEYWORDS,
))

expool = register(Binding(
    "expool",
    args=(Arg("name", str, "BODY399_RADII"),),
    found=True,
    category=CATEGORY,
    tooltip="Confirm the existence of a numeric kernel variable in the "
            "kernel pool",
    keywords=KEYWORDS,
))

pdpool = register(Binding(
    "pdpool",
    args=(Arg("name", str), Arg("dvals", list, item=float)),
    category=CATEGORY,
    tooltip="Insert double precision data into the kernel pool",
    keywords=("POOL",),
))

pipool = register(Binding(
    "pipool",
    args=(Arg("name", str), Arg("ivals", list, item=int)),
    category=CATEGORY,
    tooltip="Insert integer data into the kernel pool",
    keywords=("POOL",),
))

pcpool = register(Binding(
    "pcpool",
    args=(Arg("name", str), Arg("cvals", list, item=str)),
    category=CATEGORY,
    tooltip="Insert character data into the kernel pool",
    keywords=("POOL",),
))
