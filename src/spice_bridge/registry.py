"""Declarative table of wrapped CSPICE routines.

Instead of hand-writing hundreds of near-identical wrappers, each routine
is described once by a :class:`Binding`: its parameters (with unit types and
defaults), its outputs, the SpiceyPy routine it calls and some metadata
(category, tooltip, keywords) used by the CLI. Calling the binding does the
marshaling and runs the routine through :func:`spice_bridge.guard.invoke`.

Example::

    spkpos = register(Binding(
        "spkpos",
        args=(
            Arg("targ", default="MOON"),
            Arg("et", EphemerisTime),
            ...
        ),
        outs=(Out("ptarg", DistanceVector), Out("lt", EphemerisPeriod)),
        category="Ephemeris",
        tooltip="S/P Kernel, position",
    ))
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable

import spiceypy as spice

from spice_bridge.guard import invoke
from spice_bridge.result import SpiceResult
from spice_bridge.units import from_native, to_native

REQUIRED = inspect.Parameter.empty


@dataclass(frozen=True)
class Arg:
    """One caller-facing parameter.

    ``spread`` expands the native tuple of the value into several positional
    arguments (e.g. a LatitudinalVector becomes radius, lon, lat). ``item``
    is the element type of a ``list`` parameter.
    """

    name: str
    kind: Any = None
    default: Any = REQUIRED
    spread: bool = False
    tooltip: str = ""
    item: Any = None

    @property
    def required(self) -> bool:
        return self.default is REQUIRED


@dataclass(frozen=True)
class Out:
    """One output. ``width`` raw outputs are combined into one *kind*."""

    name: str
    kind: Any = None
    width: int = 1


@dataclass(eq=False)
class Binding:
    name: str
    args: tuple[Arg, ...] = ()
    outs: tuple[Out, ...] = ()
    routine: str | Callable[..., Any] | None = None
    category: str = ""
    tooltip: str = ""
    keywords: tuple[str, ...] = ()
    found: bool = False
    fixed: dict[str, Any] = field(default_factory=dict)
    finish: Callable[[Any], Any] | None = None

    def __post_init__(self):
        params = []
        for arg in self.args:
            default = arg.default
            params.append(inspect.Parameter(
                arg.name,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
                default=default,
            ))
        # Raises ValueError for a required arg after a defaulted one.
        self.signature = inspect.Signature(params)
        self.__name__ = self.name
        self.__doc__ = self.tooltip

    @property
    def spice_routine(self) -> Callable[..., Any]:
        if callable(self.routine):
            return self.routine
        # Looked up at call time so tests can patch spiceypy.
        return getattr(spice, self.routine or self.name)

    def bind(self, *args: Any, **kwargs: Any) -> inspect.BoundArguments:
        """Match caller arguments to parameters. Raises TypeError."""
        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        return bound

    def native_args(self, bound: inspect.BoundArguments) -> list[Any]:
        """Convert bound arguments to native form.

        This may call into CSPICE (a Window builds its cell with wninsd), so
        it runs inside the guard.
        """
        native: list[Any] = []
        for arg in self.args:
            value = bound.arguments[arg.name]
            value = to_native(value)
            if arg.spread:
                native.extend(value)
            else:
                native.append(value)
        return native

    def convert(self, raw: Any) -> tuple[Any, ...]:
        """Turn raw SpiceyPy outputs into unit-tagged values."""
        if self.finish is not None:
            raw = self.finish(raw)
        if not self.outs:
            return () if raw is None else (raw,)
        total = sum(out.width for out in self.outs)
        if total == 1:
            raw = (raw,)
        raw = tuple(raw)
        values = []
        pos = 0
        for out in self.outs:
            chunk = raw[pos] if out.width == 1 else raw[pos:pos + out.width]
            values.append(from_native(out.kind, chunk))
            pos += out.width
        return tuple(values)

    def __call__(self, *args: Any, **kwargs: Any) -> SpiceResult:
        bound = self.bind(*args, **kwargs)
        routine = self.spice_routine

        def call() -> Any:
            return routine(*self.native_args(bound), **self.fixed)

        return invoke(
            call,
            found=self.found,
            convert=self.convert,
            label=self.name,
        )

    def describe(self) -> dict[str, Any]:
        """Caller-facing metadata for listings and help output."""
        return {
            "name": self.name,
            "category": self.category,
            "tooltip": self.tooltip,
            "keywords": list(self.keywords),
            "found": self.found,
            "args": [
                {
                    "name": a.name,
                    "kind": getattr(a.kind, "__name__", None),
                    "default": None if a.required else a.default,
                    "required": a.required,
                    "tooltip": a.tooltip,
                }
                for a in self.args
            ],
            "outs": [
                {"name": o.name, "kind": getattr(o.kind, "__name__", None)}
                for o in self.outs
            ],
        }


_REGISTRY: dict[str, Binding] = {}


def register(binding: Binding) -> Binding:
    """Add *binding* to the table and return it."""
    if binding.name in _REGISTRY:
        raise ValueError(f"Binding already registered: {binding.name}")
    _REGISTRY[binding.name] = binding
    return binding


def lookup(name: str) -> Binding:
    """Return the binding called *name*. Raises KeyError if unknown."""
    _load_families()
    return _REGISTRY[name]


def bindings(category: str | None = None) -> list[Binding]:
    """All bindings, sorted by name, optionally filtered by category."""
    _load_families()
    result = sorted(_REGISTRY.values(), key=lambda b: b.name)
    if category is not None:
        result = [
            b for b in result if b.category.lower() == category.lower()
        ]
    return result


def categories() -> list[str]:
    _load_families()
    return sorted({b.category for b in _REGISTRY.values()})


def _load_families() -> None:
    # Importing a family module registers its bindings.
    from spice_bridge import (  # noqa: F401
        constants,
        coords,
        ephemeris,
        geometry,
        naif_ids,
        pool,
        sclk,
        timesys,
        vectors,
    )
