"""Command line interface for pdfunify."""

from __future__ import annotations

import argparse
from typing import Sequence

from ..core.utils import get_logger
from ..exceptions import UnifyError
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ConversionContext
from ..tools.common.pipeline import registry
from .commands import merge, normalize, unify

COMMAND_MODULES = [unify, merge, normalize]

LOGGER = get_logger("pdfunify.cli")


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdfunify",
        description="Combine PDF and SVG files into one PDF with uniform page width",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    context: ConversionContext = args.build_context(args)
    tool = registry.create(args.tool_name, context)
    try:
        result = tool.run()
    except UnifyError as exc:
        LOGGER.error("%s failed: %s", args.tool_name, exc)
        return 1
    print(result)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
