"""
Serialize compiled assets as Rust source for the display crate.

Only formatting lives here; everything emitted comes from the structures
built by ``epdasset.glyphs`` and ``epdasset.bitmap``.
"""

from __future__ import annotations

from typing import Iterable

from epdasset.bitmap import BitmapImage
from epdasset.glyphs import FontBundle, Glyph
from epdasset.index import CharToIndex, IndexRange
from epdasset.rle import EncodedImage

VALUES_PER_LINE = 16


def format_array(values: Iterable[int], indent: str, hex_bytes: bool = False) -> str:
    items = [f"0x{v:02x}" if hex_bytes else str(v) for v in values]
    lines = [
        indent + ", ".join(items[i : i + VALUES_PER_LINE]) + ","
        for i in range(0, len(items), VALUES_PER_LINE)
    ]
    if not lines:
        return "[]"
    return "[\n" + "\n".join(lines) + "\n" + indent[:-4] + "]"


def render_rle_image(image: EncodedImage, crate: str, indent: str) -> str:
    inner = indent + "    "
    return (
        f"{crate}::gui::image::RLEImage {{\n"
        f"{inner}data: &{format_array(image.data, inner + '    ')},\n"
        f"{inner}width: {image.width},\n"
        f"{inner}height: {image.height},\n"
        f"{indent}}}"
    )


def render_glyph(glyph: Glyph, crate: str, indent: str = "        ") -> str:
    inner = indent + "    "
    return (
        f"{crate}::gui::font::Glyph {{\n"
        f"{inner}image: {render_rle_image(glyph.image, crate, inner)},\n"
        f"{inner}image_left: {glyph.left},\n"
        f"{inner}image_top: {glyph.top},\n"
        f"{inner}advance: {glyph.advance},\n"
        f"{indent}}}"
    )


def render_index_range(r: IndexRange, indent: str) -> str:
    if r.length == 1:
        return f"{indent}if c == {r.start} {{\n{indent}    return Some({r.base_index});\n{indent}}}\n"
    return (
        f"{indent}if c >= {r.start} && c < {r.end} {{\n"
        f"{indent}    return Some({r.base_index} + c - {r.start});\n"
        f"{indent}}}\n"
    )


def render_index(index: CharToIndex, indent: str = "    ") -> str:
    inner = indent + "    "
    body = "".join(render_index_range(r, inner) for r in index.ranges)
    return (
        "|c: char| -> Option<usize> {\n"
        f"{inner}let c = c as usize;\n"
        f"{body}"
        f"{inner}None\n"
        f"{indent}}}"
    )


def render_font(name: str, bundle: FontBundle, crate: str = "epd") -> str:
    glyphs = ",\n        ".join(render_glyph(g, crate) for g in bundle.glyphs)
    return (
        f"pub const {name}: {crate}::gui::font::Font = {crate}::gui::font::Font {{\n"
        f"    ascender: {bundle.ascender},\n"
        f"    descender: {bundle.descender},\n"
        f"    glyphs: &[\n"
        f"        {glyphs}\n"
        f"    ],\n"
        f"    get_glyph_index: {render_index(bundle.index)},\n"
        f"}};\n"
    )


def render_bitmap(name: str, image: BitmapImage, crate: str = "epd") -> str:
    return (
        f"pub const {name}: {crate}::gui::image::BitmapImage = {crate}::gui::image::BitmapImage {{\n"
        f"    data: &{format_array(image.data, '        ', hex_bytes=True)},\n"
        f"    width: {image.width},\n"
        f"    height: {image.height},\n"
        f"    stride: {image.stride},\n"
        f"}};\n"
    )
