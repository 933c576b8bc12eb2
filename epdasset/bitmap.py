"""Threshold RGBA images into uncompressed 1-bpp bitmaps.

Static images (logos, icons) are indexed directly by the renderer, so they
are packed row by row without run-length encoding.
"""

from __future__ import annotations

from dataclasses import dataclass

from epdasset.config import DEFAULT_CONFIG, CompilerConfig
from epdasset.rle import row_bytes


@dataclass(frozen=True)
class BitmapImage:
    width: int
    height: int
    stride: int
    data: bytes


def pixel_level(r: int, g: int, b: int, a: int) -> int:
    """Darkness of a pixel, with transparency fading it out."""
    avg = (r + g + b) // 3
    return (255 - avg) * a // 255


def build_bitmap(pixels: bytes, width: int, height: int, config: CompilerConfig = DEFAULT_CONFIG) -> BitmapImage:
    if len(pixels) != width * height * 4:
        raise ValueError(f"expected {width * height * 4} RGBA bytes for {width}x{height}, got {len(pixels)}")

    stride = row_bytes(width)
    data = bytearray(stride * height)
    for y in range(height):
        base = y * width * 4
        for x in range(width):
            r, g, b, a = pixels[base + x * 4 : base + x * 4 + 4]
            if pixel_level(r, g, b, a) < config.threshold:
                data[y * stride + x // 8] |= 0x80 >> (x % 8)
    return BitmapImage(width=width, height=height, stride=stride, data=bytes(data))
