"""PNG previews of compiled assets.

The glyph sheet is drawn from the run-length data rather than from the
rasterizer, so it shows exactly what the firmware will render.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from epdasset.bitmap import BitmapImage
from epdasset.errors import AssetIOError
from epdasset.glyphs import FontBundle
from epdasset.rle import Bitmap, decode_image

MARGIN = 2


def _draw(canvas: Image.Image, bitmap: Bitmap, left: int, top: int, ink: int = 0) -> None:
    for y in range(bitmap.height):
        for x in range(bitmap.width):
            if bitmap.pixel(x, y):
                px, py = left + x, top + y
                if 0 <= px < canvas.width and 0 <= py < canvas.height:
                    canvas.putpixel((px, py), ink)


def glyph_sheet(bundle: FontBundle) -> Image.Image:
    """Lay every glyph out on a single baseline."""
    width = MARGIN
    for glyph in bundle.glyphs:
        width += max(glyph.advance, glyph.left + glyph.image.width, 1)
    width += MARGIN
    height = bundle.ascender + bundle.descender + 2 * MARGIN

    canvas = Image.new("L", (max(width, 1), max(height, 1)), 255)
    baseline = MARGIN + bundle.ascender
    pen_x = MARGIN
    for glyph in bundle.glyphs:
        _draw(canvas, decode_image(glyph.image), pen_x + glyph.left, baseline - glyph.top)
        pen_x += max(glyph.advance, glyph.left + glyph.image.width, 1)
    return canvas


def bitmap_preview(image: BitmapImage) -> Image.Image:
    # Set bits mark light pixels, so they are drawn white on black.
    bitmap = Bitmap(width=image.width, height=image.height, stride=image.stride, buffer=image.data)
    canvas = Image.new("L", (max(image.width, 1), max(image.height, 1)), 0)
    _draw(canvas, bitmap, 0, 0, ink=255)
    return canvas


def save_png(canvas: Image.Image, output_path: str | Path) -> None:
    try:
        canvas.save(output_path, format="PNG", optimize=True)
    except OSError as err:
        raise AssetIOError(f"cannot write preview {output_path}: {err}") from err
