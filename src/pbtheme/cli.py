"""Command line entry points for the theme tools."""
from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path
from typing import Callable

from .bitmap import encode_file
from .container import decode, open_theme
from .errors import EncodeError, FormatError, ResourceNotFoundError
from .extract import UnpackOptions, unpack_resource
from .listing import format_listing, scan


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pbtheme",
        description="List PocketBook themes and extract theme resources",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List theme resources")
    list_parser.add_argument("theme_file", type=Path, help="Theme file (.pbt)")
    list_parser.set_defaults(handler=run_list)

    unpack_parser = subparsers.add_parser("unpack", help="Unpack a theme resource")
    unpack_parser.add_argument("theme_file", type=Path, help="Theme file (.pbt)")
    unpack_parser.add_argument(
        "resource_name",
        help='Resource to extract ("" selects the configuration, written as theme.cfg)',
    )
    unpack_parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Destination directory for the extracted resource",
    )
    unpack_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files",
    )
    unpack_parser.add_argument(
        "--verify-size",
        action="store_true",
        help="Warn when the inflated size differs from the size in the table",
    )
    unpack_parser.set_defaults(handler=run_unpack)
    return parser


def run_list(args: argparse.Namespace) -> int:
    with open_theme(args.theme_file) as reader:
        descriptors = decode(reader)
        entries = scan(reader, descriptors)
    for line in format_listing(entries):
        print(line)
    return 0


def run_unpack(args: argparse.Namespace) -> int:
    options = UnpackOptions(
        output_dir=args.output_dir,
        force=args.force,
        verify_size=args.verify_size,
    )
    with open_theme(args.theme_file) as reader:
        descriptors = decode(reader)
        target = unpack_resource(reader, descriptors, args.resource_name, options)
    print(f"wrote {target}")
    return 0


def _run_reporting_warnings(action: Callable[[], int]) -> int:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", RuntimeWarning)
        try:
            status = action()
        finally:
            for warning in caught:
                print(f"Warning: {warning.message}")
    return status


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return _run_reporting_warnings(lambda: args.handler(args))
    except (FormatError, ResourceNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def build_image2res_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image2res",
        description="Convert images into PocketBook theme image resources",
    )
    parser.add_argument("resource_file", type=Path, help="Image to convert (PNG, JPEG, BMP, ...)")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output path (default: the input path without its extension)",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite the output file if it exists",
    )
    return parser


def image2res_main(argv: list[str] | None = None) -> int:
    args = build_image2res_parser().parse_args(argv)

    def convert() -> int:
        target = encode_file(args.resource_file, args.output, force=args.force)
        print(f"wrote {target}")
        return 0

    try:
        return _run_reporting_warnings(convert)
    except EncodeError as exc:
        print(f"Failed {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
