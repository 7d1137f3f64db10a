"""CLI helpers for unifying PDF and SVG files."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...normalize.normalizer import A4_WIDTH
from ...tools.common.interfaces import ConversionContext

DEFAULT_OUTPUT = "output.pdf"


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser(
        "unify", help="Merge PDF and SVG files and normalize their page width"
    )
    parser.add_argument("inputs", nargs="+", help="Input PDF or SVG files, in output order")
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Output PDF path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=A4_WIDTH,
        help=f"Target page width in points (default: {A4_WIDTH})",
    )
    parser.add_argument("--title", default=None, help="Document title for the output")
    parser.add_argument("--author", default=None, help="Document author for the output")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of inputs to import concurrently",
    )
    parser.set_defaults(tool_name="unify", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    document_info = {"title": args.title, "author": args.author}
    return ConversionContext(
        output_path=args.output,
        config={
            "inputs": args.inputs,
            "target_width": args.width,
            "document_info": {k: v for k, v in document_info.items() if v} or None,
            "max_workers": args.workers,
        },
    )
