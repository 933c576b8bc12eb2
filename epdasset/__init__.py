"""Offline compiler for 1-bpp display assets: RLE glyph tables and bitmaps."""

__version__ = "0.1.0"
