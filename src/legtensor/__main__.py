from __future__ import annotations

import argparse
import itertools
import logging
import sys
from typing import List, Optional

from .core.exceptions import LegTensorError
from .core.legs import LegRegistry
from .core.names import register_predefined
from .core.tensor import Tensor, format_tensor


def _run_demo(extents: List[int], legs: List[str]) -> None:
    registry = LegRegistry()
    register_predefined(registry)
    try:
        tensor = Tensor(extents, legs, registry=registry)
    except LegTensorError as exc:
        raise SystemExit(f"Cannot build tensor: {exc}") from exc
    counter = itertools.count()
    tensor.generate(lambda: next(counter))
    print(f"# {tensor!r}")
    print(format_tensor(tensor))


def _list_legs(limit: Optional[int]) -> None:
    registry = LegRegistry()
    legs = register_predefined(registry)
    names = list(legs)
    if limit is not None:
        names = names[:limit]
    for name in names:
        print(f"{legs[name].id:4d} {name}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="legtensor command line utilities")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="cmd")

    demo_parser = subparsers.add_parser("demo", help="Fill a tensor with a counter and print it")
    demo_parser.add_argument(
        "--extents",
        type=int,
        nargs="*",
        default=[2, 3, 4],
        help="Extent of every axis (default: 2 3 4)",
    )
    demo_parser.add_argument(
        "--legs",
        nargs="*",
        default=["Up", "Down", "Left"],
        help="Leg name of every axis (default: Up Down Left)",
    )

    legs_parser = subparsers.add_parser("legs", help="List the predefined leg names")
    legs_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Only print the first N legs",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.cmd == "demo":
        _run_demo(args.extents, args.legs)
        return
    if args.cmd == "legs":
        _list_legs(args.limit)
        return

    parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
