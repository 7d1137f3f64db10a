"""CLI helpers for normalizing page widths."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...normalize.normalizer import A4_WIDTH
from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("normalize", help="Scale every page of a PDF to one width")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument("--width", type=float, default=A4_WIDTH, help="Target page width in points")
    parser.set_defaults(tool_name="normalize", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"target_width": args.width},
    )
