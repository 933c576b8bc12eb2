"""FreeType-backed glyph rasterization.

Glyphs are rendered monochrome (``FT_LOAD_TARGET_MONO``) so the bitmaps are
already 1-bpp and need no further thresholding. The engine is an explicit
handle owned by the caller: every face it opens is released when the engine
is closed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import freetype

from epdasset.errors import AssetIOError, DecodeError, RasterizationError
from epdasset.rle import Bitmap, row_bytes


@dataclass(frozen=True)
class RasterizedGlyph:
    bitmap: Bitmap
    left: int
    top: int
    # 26.6 fixed point
    advance: int


class Font(Protocol):
    def set_size(self, points: int, dpi: int) -> None: ...

    def rasterize(self, code_point: int) -> RasterizedGlyph: ...

    def size_metrics(self) -> tuple[int, int]: ...


class FreeTypeFont:
    def __init__(self, face: "freetype.Face", path: Path):
        self._face: Optional[freetype.Face] = face
        self.path = path

    @property
    def face(self) -> "freetype.Face":
        if self._face is None:
            raise RuntimeError(f"font {self.path} has been released")
        return self._face

    def set_size(self, points: int, dpi: int) -> None:
        if points <= 0:
            raise ValueError(f"font size must be positive, got {points}")
        try:
            self.face.set_char_size(0, points << 6, dpi, dpi)
        except freetype.FT_Exception as err:
            raise DecodeError(f"{self.path}: cannot set size {points}pt at {dpi} dpi: {err}") from err

    def rasterize(self, code_point: int) -> RasterizedGlyph:
        face = self.face
        glyph_index = face.get_char_index(code_point)
        if glyph_index == 0:
            raise RasterizationError(code_point, f"no glyph in {self.path.name}")
        try:
            face.load_glyph(glyph_index, freetype.FT_LOAD_RENDER | freetype.FT_LOAD_TARGET_MONO)
        except freetype.FT_Exception as err:
            raise RasterizationError(code_point, str(err)) from err

        glyph = face.glyph
        bitmap = glyph.bitmap
        if bitmap.rows > 0 and bitmap.pixel_mode != freetype.FT_PIXEL_MODE_MONO:
            raise RasterizationError(code_point, f"expected a 1-bpp bitmap, got pixel mode {bitmap.pixel_mode}")
        if bitmap.pitch < 0:
            raise RasterizationError(code_point, "bottom-up bitmaps are not supported")

        if bitmap.rows == 0 or bitmap.width == 0:
            # Blank glyphs such as the space carry no pixels.
            packed = Bitmap(width=bitmap.width, height=0, stride=row_bytes(bitmap.width), buffer=b"")
        else:
            stride = bitmap.pitch
            buffer = bytes(bitmap.buffer[: stride * bitmap.rows])
            packed = Bitmap(width=bitmap.width, height=bitmap.rows, stride=stride, buffer=buffer)

        return RasterizedGlyph(
            bitmap=packed,
            left=glyph.bitmap_left,
            top=glyph.bitmap_top,
            advance=glyph.advance.x,
        )

    def size_metrics(self) -> tuple[int, int]:
        size = self.face.size
        return size.ascender, size.descender

    def release(self) -> None:
        self._face = None


class FreeTypeEngine:
    """Caller-owned FreeType handle; use as a context manager."""

    def __init__(self) -> None:
        self._fonts: list[FreeTypeFont] = []
        self._closed = False

    def __enter__(self) -> "FreeTypeEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self, path: str | Path) -> FreeTypeFont:
        if self._closed:
            raise RuntimeError("FreeType engine is closed")
        path = Path(path)
        if not path.is_file():
            raise AssetIOError(f"font file not found: {path}")
        try:
            face = freetype.Face(str(path))
        except freetype.FT_Exception as err:
            raise DecodeError(f"{path}: not a usable font: {err}") from err
        except OSError as err:
            raise AssetIOError(f"cannot read font {path}: {err}") from err
        font = FreeTypeFont(face, path)
        self._fonts.append(font)
        return font

    def close(self) -> None:
        for font in self._fonts:
            font.release()
        self._fonts.clear()
        self._closed = True
