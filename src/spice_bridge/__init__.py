"""Uniform, error-translating call layer over the CSPICE toolkit."""

from spice_bridge.config import Config, apply_config, ensure_config
from spice_bridge.guard import invoke, raise_spice_error
from spice_bridge.kernels import (
    KernelType,
    clear_all,
    enumerate_kernels,
    furnsh,
    furnsh_list,
    init_all,
    unload,
)
from spice_bridge.registry import bindings, categories, lookup
from spice_bridge.result import ResultCode, SpiceCallError, SpiceResult

__all__ = [
    "Config",
    "KernelType",
    "ResultCode",
    "SpiceCallError",
    "SpiceResult",
    "apply_config",
    "bindings",
    "categories",
    "clear_all",
    "ensure_config",
    "enumerate_kernels",
    "furnsh",
    "furnsh_list",
    "init_all",
    "invoke",
    "lookup",
    "raise_spice_error",
    "unload",
]
__version__ = "0.1.0"
