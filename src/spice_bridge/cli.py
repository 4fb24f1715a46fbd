"""Command-line interface for spice-bridge."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text

from spice_bridge.config import (
    apply_config,
    ensure_config,
    setup_interactive,
    show_config,
)
from spice_bridge.kernels import enumerate_kernels, furnsh_list, init_all
from spice_bridge.registry import Arg, Binding, bindings, categories, lookup
from spice_bridge.result import ResultCode, SpiceResult
from spice_bridge.units import Window, is_scalar

console = Console()

EXIT_STATUS = {
    ResultCode.SUCCESS: 0,
    ResultCode.FAILURE: 1,
    ResultCode.NOT_FOUND: 2,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="spice-bridge",
        description="List, describe and call wrapped CSPICE routines",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log at DEBUG level",
    )
    sub = parser.add_subparsers(dest="command")

    # --- functions ---
    p_funcs = sub.add_parser("functions", help="List wrapped routines")
    p_funcs.add_argument(
        "--category", help=f"Only this category ({', '.join(categories())})",
    )

    # --- describe ---
    p_desc = sub.add_parser("describe", help="Show parameters of a routine")
    p_desc.add_argument("name", help="Routine name, e.g. spkpos")

    # --- call ---
    p_call = sub.add_parser("call", help="Call a routine and print the result")
    p_call.add_argument("name", help="Routine name, e.g. bodn2c")
    p_call.add_argument(
        "params", nargs="*", metavar="KEY=VALUE",
        help="Arguments; vectors as comma-separated numbers, windows as "
             "start:stop,start:stop",
    )
    p_call.add_argument(
        "-k", "--kernel", action="append", default=[],
        help="Kernel to load first, relative to the content root (repeatable)",
    )

    # --- kernels ---
    p_kernels = sub.add_parser(
        "kernels", help="List kernel files below the content root",
    )
    p_kernels.add_argument(
        "directory", nargs="?",
        help="Directory relative to the content root (default: the "
             "configured kernel_dir)",
    )

    # --- config ---
    p_config = sub.add_parser("config", help="Show or update configuration")
    p_config.add_argument(
        "--setup", action="store_true",
        help="Re-run interactive setup",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    config = ensure_config()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command == "config":
        if args.setup:
            setup_interactive()
        else:
            show_config(config)
        return 0

    init_all()
    apply_config(config)
    if args.verbose:
        logging.getLogger("spice_bridge").setLevel(logging.DEBUG)

    if args.command == "functions":
        return _list_functions(args.category)

    if args.command == "describe":
        binding = _find(args.name)
        if binding is None:
            return 1
        _describe(binding)
        return 0

    if args.command == "call":
        binding = _find(args.name)
        if binding is None:
            return 1
        if args.kernel:
            loaded = furnsh_list(args.kernel)
            if not loaded.ok:
                _print_result(binding, loaded)
                return EXIT_STATUS[loaded.code]
        try:
            kwargs = parse_params(binding, args.params)
            result = binding(**kwargs)
        except (TypeError, ValueError) as e:
            print(f"{binding.name}: {e}", file=sys.stderr)
            return 1
        _print_result(binding, result)
        return EXIT_STATUS[result.code]

    if args.command == "kernels":
        result = enumerate_kernels(args.directory or config.kernel_dir)
        if not result.ok:
            print(result.message, file=sys.stderr)
            return EXIT_STATUS[result.code]
        for path in result.value:
            print(path)
        return 0

    return 0


def parse_value(arg: Arg, text: str):
    """Convert command-line *text* into a value for *arg*."""
    kind = arg.kind
    if kind is None or kind is str:
        return text
    if kind is bool:
        return text.strip().lower() in ("1", "true", "yes", "y")
    if kind in (int, float):
        return kind(text)
    if kind is list:
        item = arg.item or str
        return [item(v.strip()) for v in text.split(",")]
    if kind is Window:
        intervals = []
        for pair in text.split(","):
            start, _, stop = pair.partition(":")
            intervals.append((float(start), float(stop)))
        return Window.of(*intervals)
    numbers = [float(v) for v in text.split(",")]
    if is_scalar(kind):
        if len(numbers) != 1:
            raise ValueError(f"{arg.name} takes a single number")
        return kind.from_native(numbers[0])
    return kind.from_native(numbers)


def parse_params(binding: Binding, params: list[str]) -> dict:
    """Turn ``key=value`` strings into keyword arguments for *binding*."""
    by_name = {a.name: a for a in binding.args}
    kwargs = {}
    for item in params:
        key, sep, text = item.partition("=")
        if not sep:
            raise ValueError(f"expected KEY=VALUE, got {item!r}")
        if key not in by_name:
            raise TypeError(f"unknown parameter {key!r}")
        kwargs[key] = parse_value(by_name[key], text)
    return kwargs


def _find(name: str) -> Binding | None:
    try:
        return lookup(name)
    except KeyError:
        print(f"Unknown routine: {name}", file=sys.stderr)
        print("Use 'spice-bridge functions' to list them.", file=sys.stderr)
        return None


def _list_functions(category: str | None) -> int:
    found = bindings(category)
    if not found:
        print(f"No routines in category {category!r}.", file=sys.stderr)
        return 1
    table = Table(title="Wrapped routines")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Description")
    for b in found:
        table.add_row(b.name, b.category, b.tooltip)
    console.print(table)
    return 0


def _describe(binding: Binding) -> None:
    info = binding.describe()
    console.print(f"[bold]{info['name']}[/bold] ({info['category']})")
    console.print(info["tooltip"])
    if info["found"]:
        console.print("Reports NOT_FOUND when CSPICE finds nothing.")

    table = Table(title="Parameters")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Notes")
    for a in info["args"]:
        default = "(required)" if a["required"] else repr(a["default"])
        table.add_row(a["name"], a["kind"] or "", Text(default), a["tooltip"])
    console.print(table)

    if info["outs"]:
        outs = Table(title="Outputs")
        outs.add_column("Name")
        outs.add_column("Type")
        for o in info["outs"]:
            outs.add_row(o["name"], o["kind"] or "")
        console.print(outs)


def _print_result(binding: Binding, result: SpiceResult) -> None:
    style = {
        ResultCode.SUCCESS: "green",
        ResultCode.FAILURE: "red",
        ResultCode.NOT_FOUND: "yellow",
    }[result.code]
    console.print(f"[{style}]{result.code.name}[/{style}]")
    if result.message:
        console.print(result.message, markup=False)
    if not result.values:
        return
    names = [o.name for o in binding.outs] or ["value"]
    table = Table(show_header=True)
    table.add_column("Output")
    table.add_column("Value")
    for name, value in zip(names, result.values):
        table.add_row(name, Text(repr(value)))
    console.print(table)


if __name__ == "__main__":
    sys.exit(main())
