"""``rdjson-viewer-url``: print a viewer URL that opens a report in the browser."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rdjson_viewer.parser.loader import InputFormat
from rdjson_viewer.service.query_params import build_viewer_url
from rdjson_viewer.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rdjson-viewer-url",
        description="Compress an rdjson / rdjsonl report into a shareable viewer URL",
    )
    parser.add_argument("--file", default="",
                        help="Path to the input file (if not specified, reads from stdin)")
    parser.add_argument("--format", default=InputFormat.RDJSON.value,
                        help="Format of the input (rdjson or rdjsonl)")
    parser.add_argument("--base-url", default="",
                        help="Base HTML URL for file links")
    parser.add_argument("--viewer-url", default=None,
                        help="Viewer to link to (default: VIEWER_BASE_URL setting)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        fmt = InputFormat(args.format)
    except ValueError:
        print("Error: format must be either 'rdjson' or 'rdjsonl'", file=sys.stderr)
        return 1

    try:
        data = Path(args.file).read_bytes() if args.file else sys.stdin.buffer.read()
    except OSError as exc:
        print(f"Error reading input: {exc}", file=sys.stderr)
        return 1

    viewer_url = args.viewer_url or Settings().viewer_base_url
    print(build_viewer_url(data, fmt, viewer_url, base_path=args.base_url))
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
