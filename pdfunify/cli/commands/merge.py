"""CLI helpers for merging PDFs."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("merge", help="Merge multiple PDFs into one")
    parser.add_argument("inputs", nargs="+", help="Input PDF files")
    parser.add_argument("-o", "--output", required=True, help="Output PDF path")
    parser.add_argument("--title", default=None, help="Document title for the output")
    parser.set_defaults(tool_name="merge", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    return ConversionContext(
        output_path=args.output,
        config={
            "inputs": args.inputs,
            "document_info": {"title": args.title} if args.title else None,
        },
    )
