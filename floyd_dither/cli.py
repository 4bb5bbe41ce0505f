"""Command-line interface for floyd_dither.

Human-readable status goes to stderr; ``--json`` prints a structured result
on stdout for scripting.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from floyd_dither.core.headers import BitmapError, RowPadding
from floyd_dither.core.palette import COLOR_TABLE, DEFAULT_COLORS, PaletteError
from floyd_dither.core.processor import DEFAULT_BITS, Settings, process_file
from floyd_dither.core.quantize import MAX_BITS, MIN_BITS

SUPPORTED_EXTENSIONS = (".bmp",)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="floyd-dither",
        description="Reduce the colors of a 24-bit BMP with Floyd-Steinberg dithering.",
    )
    parser.add_argument("input", help="Input BMP file path.")
    parser.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to <input>_dithered.bmp.",
    )
    parser.add_argument(
        "-b", "--bits",
        type=int,
        default=DEFAULT_BITS,
        choices=range(MIN_BITS, MAX_BITS + 1),
        metavar=f"{{{MIN_BITS}..{MAX_BITS}}}",
        help=f"Bits per color channel in the output (default: {DEFAULT_BITS}).",
    )
    parser.add_argument(
        "-c", "--colors",
        nargs="+",
        default=list(DEFAULT_COLORS),
        metavar="COLOR",
        help=(
            f"Palette color names, in priority order (default: {' '.join(DEFAULT_COLORS)}). "
            f"Known: {', '.join(COLOR_TABLE)}."
        ),
    )
    parser.add_argument(
        "--row-padding",
        action="store_true",
        help="Pad every scan line to 4 bytes instead of the pixel stream as a whole.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )
    return parser


def _auto_output_path(input_path: Path) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_dithered{input_path.suffix}"


def _fail(message: str, code: str, is_json: bool, debug: bool = False) -> None:
    """Report an error on stderr and exit with code 1."""
    if is_json:
        if debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        err = {"status": "error", "error": message, "code": code}
        print(json.dumps(err), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _run(args: argparse.Namespace) -> None:
    is_json = args.json
    input_path = Path(args.input).resolve()

    if input_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        _fail(f"Unknown file extension: {input_path.suffix or '(none)'}", "INVALID_INPUT", is_json)
    if not input_path.exists():
        _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)

    output_path = Path(args.output).resolve() if args.output else _auto_output_path(input_path)

    settings = Settings(
        colors=tuple(args.colors),
        bits=args.bits,
        padding=RowPadding.ROW if args.row_padding else RowPadding.STREAM,
    )

    try:
        if not is_json:
            print(f"Dithering {input_path}...", file=sys.stderr)
        result = process_file(input_path, output_path, settings)
    except PaletteError as e:
        _fail(str(e), "INVALID_PALETTE", is_json, args.debug)
    except BitmapError as e:
        _fail(f"Error while processing bitmap file: {e}", "INVALID_INPUT", is_json, args.debug)
    except OSError as e:
        _fail(str(e), "IO_ERROR", is_json, args.debug)

    dropped = result.palette.dropped
    if not is_json:
        if dropped:
            print(f"Ignoring unknown colors: {', '.join(dropped)}", file=sys.stderr)
        print(f"Wrote {result.bytes_written} bytes to {result.output}", file=sys.stderr)
    else:
        summary = {
            "status": "success",
            "input": str(input_path),
            "output": str(result.output),
            "bytes_written": result.bytes_written,
            "settings": {
                "colors": list(result.palette.names),
                "ignored_colors": list(dropped),
                "bits": settings.bits,
                "padding": settings.padding.value,
            },
            "metadata": {
                "width": result.width,
                "height": result.height,
            },
        }
        print(json.dumps(summary, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _run(args)


if __name__ == "__main__":
    main()
