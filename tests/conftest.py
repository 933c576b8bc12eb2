from __future__ import annotations

import pytest

from epdasset.errors import RasterizationError
from epdasset.rasterizer import RasterizedGlyph
from epdasset.rle import Bitmap


def bitmap_from_rows(rows: list[str]) -> Bitmap:
    """Build a packed bitmap from strings of '#' (set) and '.' (clear)."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    stride = (width + 7) // 8
    buffer = bytearray(stride * height)
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == "#":
                buffer[y * stride + x // 8] |= 0x80 >> (x % 8)
    return Bitmap(width=width, height=height, stride=stride, buffer=bytes(buffer))


class FakeFont:
    """In-memory stand-in for a FreeType font."""

    def __init__(self, glyphs=None, ascender=640, descender=-192):
        self.glyphs = dict(glyphs or {})
        self.ascender = ascender
        self.descender = descender
        self.size = None
        self.rasterized = []

    def set_size(self, points, dpi):
        self.size = (points, dpi)

    def rasterize(self, code_point):
        self.rasterized.append(code_point)
        if code_point not in self.glyphs:
            raise RasterizationError(code_point, "no glyph in fake font")
        return self.glyphs[code_point]

    def size_metrics(self):
        return self.ascender, self.descender


def fake_glyph(rows, left=0, top=None, advance=None) -> RasterizedGlyph:
    bitmap = bitmap_from_rows(rows)
    return RasterizedGlyph(
        bitmap=bitmap,
        left=left,
        top=bitmap.height if top is None else top,
        advance=(bitmap.width + 1) * 64 if advance is None else advance,
    )


@pytest.fixture
def abd_font() -> FakeFont:
    return FakeFont(
        {
            ord("a"): fake_glyph(["##.", "#.#", "###"]),
            ord("b"): fake_glyph(["#..", "##.", "##."], top=5),
            ord("d"): fake_glyph(["..#", ".##", "###"], left=-1),
        }
    )
