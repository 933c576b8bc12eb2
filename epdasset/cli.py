#!/usr/bin/env python3
"""
epdasset: compile fonts and images into Rust tables for a 1-bpp display.

Fonts are rasterized with FreeType at 72 dpi (one point per pixel), each
glyph row is run-length encoded, and the requested characters are mapped to
glyph positions through a chain of range checks. Images are decoded with
Pillow and thresholded into an uncompressed 1-bpp bitmap.

Usage:
  epdasset font FONT_REGULAR_14 DejaVuSans.ttf --size 14 --chars "0123456789:"
  epdasset font TITLE MyFont.ttf --size 24 --range 0x20,0x7E --output src/title_font.rs
  epdasset image LOGO logo.png --output src/logo.rs --preview logo-preview.png

Nothing is written unless the whole asset compiled; errors exit with status 1.

Dependencies:
  pip install freetype-py Pillow
"""

from __future__ import annotations

import argparse
import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, Iterable, Optional

from PIL import Image

from epdasset import emit, preview
from epdasset.bitmap import build_bitmap
from epdasset.config import CompilerConfig
from epdasset.decoder import decode_image
from epdasset.errors import AssetError, AssetIOError
from epdasset.glyphs import build_font
from epdasset.rasterizer import FreeTypeEngine


def parse_range(raw: str) -> tuple[int, int]:
    """Parse an inclusive ``min,max`` code point range; ``0x`` literals allowed."""
    try:
        first, last = (int(n.strip(), base=0) for n in raw.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected MIN,MAX code points, got {raw!r}")
    if first < 0 or last < first or last > sys.maxunicode:
        raise argparse.ArgumentTypeError(f"invalid code point range {raw!r}")
    return first, last


def symbol_name(raw: str) -> str:
    if not raw.isidentifier():
        raise argparse.ArgumentTypeError(f"{raw!r} is not a valid identifier")
    return raw


def collect_characters(
    chars: Optional[str], chars_file: Optional[Path], ranges: Iterable[tuple[int, int]]
) -> set[int]:
    code_points = set()
    if chars:
        code_points.update(ord(c) for c in chars)
    if chars_file is not None:
        try:
            text = chars_file.read_text(encoding="utf-8")
        except OSError as err:
            raise AssetIOError(f"cannot read character file {chars_file}: {err}") from err
        # Line breaks only separate lines of the list.
        code_points.update(ord(c) for c in text if c not in "\r\n")
    for first, last in ranges:
        code_points.update(range(first, last + 1))
    return code_points


def write_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        sys.stdout.write(text)
        return
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=output.parent, prefix=f".{output.name}.", suffix=".tmp")
    except OSError as err:
        raise AssetIOError(f"cannot write {output}: {err}") from err
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, output)
    except BaseException as err:
        os.unlink(tmp_name)
        if isinstance(err, OSError):
            raise AssetIOError(f"cannot write {output}: {err}") from err
        raise


def compile_font(args: argparse.Namespace, config: CompilerConfig) -> tuple[str, Callable[[], Image.Image]]:
    code_points = collect_characters(args.chars, args.chars_file, args.ranges or [])
    with FreeTypeEngine() as engine:
        font = engine.open(args.source)
        bundle = build_font(font, code_points, args.size, config)

    text = emit.render_font(args.name, bundle, args.crate)
    print(
        f"Compiled {args.name}: {len(bundle.glyphs)} glyphs, {len(bundle.index)} index ranges, "
        f"{bundle.word_count} RLE words ({bundle.word_count * 2} bytes)",
        file=sys.stderr,
    )
    return text, lambda: preview.glyph_sheet(bundle)


def compile_image(args: argparse.Namespace, config: CompilerConfig) -> tuple[str, Callable[[], Image.Image]]:
    decoded = decode_image(args.source)
    image = build_bitmap(decoded.pixels, decoded.width, decoded.height, config)

    text = emit.render_bitmap(args.name, image, args.crate)
    print(
        f"Compiled {args.name}: {image.width}x{image.height} bitmap, "
        f"stride {image.stride}, {len(image.data)} bytes",
        file=sys.stderr,
    )
    return text, lambda: preview.bitmap_preview(image)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epdasset",
        description="Compile fonts and images into embeddable tables for a 1-bpp display.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("name", type=symbol_name, help="Name of the emitted constant.")
    common.add_argument("source", type=Path, help="Path to the source asset.")
    common.add_argument("--output", type=Path, help="Output .rs file path (default: stdout).")
    common.add_argument("--crate", default="epd", help="Path of the display crate in emitted code (default: epd).")
    common.add_argument("--preview", type=Path, help="Also write a PNG preview of the compiled asset.")

    sub = parser.add_subparsers(dest="command", required=True)

    font = sub.add_parser("font", parents=[common], help="Compile a TTF/OTF font subset.")
    font.add_argument("--size", type=int, required=True, help="Font size in points (pixels at 72 dpi).")
    font.add_argument("--dpi", type=int, default=72, help="Rasterization resolution (default: 72).")
    font.add_argument("--chars", help="Characters to include.")
    font.add_argument("--chars-file", type=Path, help="UTF-8 file listing the characters to include.")
    font.add_argument(
        "--range",
        dest="ranges",
        type=parse_range,
        action="append",
        help="Inclusive code point range MIN,MAX to include. This argument can be repeated.",
    )
    font.set_defaults(handler=compile_font, threshold=128)

    image = sub.add_parser("image", parents=[common], help="Compile a PNG (or any Pillow image) to a bitmap.")
    image.add_argument("--threshold", type=int, default=128, help="Darkness cutoff; lighter pixels set the bit (default: 128).")
    image.set_defaults(handler=compile_image, dpi=72)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "font" and args.size <= 0:
        parser.error("--size must be positive")
    try:
        config = CompilerConfig(dpi=args.dpi, threshold=args.threshold)
    except ValueError as err:
        parser.error(str(err))

    try:
        text, render_preview = args.handler(args, config)
        write_output(text, args.output)
        # Only once the artifact is in place.
        if args.preview:
            preview.save_png(render_preview(), args.preview)
    except AssetError as err:
        print(f"ERROR: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
