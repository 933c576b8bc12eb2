"""Decode image files into RGBA pixel grids with Pillow."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from epdasset.errors import AssetIOError, DecodeError


@dataclass(frozen=True)
class RgbaImage:
    width: int
    height: int
    # 4 bytes per pixel, row-major
    pixels: bytes


def decode_image(path: str | Path) -> RgbaImage:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as err:
        raise AssetIOError(f"cannot read image {path}: {err}") from err

    try:
        with Image.open(io.BytesIO(raw)) as im:
            rgba = im.convert("RGBA")
    except UnidentifiedImageError as err:
        raise DecodeError(f"{path} is not a recognized image") from err
    except (OSError, SyntaxError, ValueError) as err:
        # Pillow reports truncated or corrupt data through any of these.
        raise DecodeError(f"{path}: corrupt image data: {err}") from err
    return RgbaImage(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())
