"""Run-length encoding of 1-bpp bitmaps.

Each row is stored as alternating runs of equal pixels. A run is one 16-bit
word: bit 15 holds the color, bits 14..0 the length. An encoded image is a
header of ``height + 1`` words followed by the runs of every row:

  data[0]      height + 1, i.e. where the runs of row 0 start
  data[y + 1]  where the runs of row y end (and those of row y + 1 start)
  data[h:]     runs, row after row

so the runs of row ``y`` are ``data[data[y]:data[y + 1]]`` and
``data[height] == len(data)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

COLOR_BIT = 1 << 15
MAX_RUN_LENGTH = COLOR_BIT - 1
MAX_WORDS = 0xFFFF


def row_bytes(width: int) -> int:
    return (width + 7) // 8


@dataclass(frozen=True)
class Bitmap:
    """Row-major, MSB-first 1-bpp bitmap; a set bit is foreground."""

    width: int
    height: int
    stride: int
    buffer: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"invalid bitmap size {self.width}x{self.height}")
        if self.stride < row_bytes(self.width):
            raise ValueError(f"stride {self.stride} too small for width {self.width}")
        if len(self.buffer) != self.stride * self.height:
            raise ValueError(
                f"bitmap buffer holds {len(self.buffer)} bytes, expected {self.stride * self.height}"
            )

    def row(self, y: int) -> bytes:
        return self.buffer[y * self.stride : (y + 1) * self.stride]

    def pixel(self, x: int, y: int) -> int:
        return (self.buffer[y * self.stride + x // 8] >> (7 - x % 8)) & 1


@dataclass(frozen=True)
class EncodedImage:
    width: int
    height: int
    data: tuple[int, ...]

    def row_runs(self, y: int) -> tuple[int, ...]:
        return self.data[self.data[y] : self.data[y + 1]]


def pack_run(color: int, length: int) -> int:
    if color not in (0, 1):
        raise ValueError(f"run color must be 0 or 1, got {color}")
    if not 1 <= length <= MAX_RUN_LENGTH:
        raise ValueError(f"run length {length} out of range 1..{MAX_RUN_LENGTH}")
    return (color << 15) | length


def unpack_run(word: int) -> tuple[int, int]:
    return (word >> 15) & 1, word & MAX_RUN_LENGTH


def _bits(row: bytes, width: int) -> Iterator[int]:
    for x in range(width):
        yield (row[x // 8] >> (7 - x % 8)) & 1


def encode_row(row: bytes, width: int) -> list[int]:
    """Encode the first ``width`` pixels of a packed row as run words."""
    if width <= 0:
        raise ValueError(f"cannot encode a row of width {width}")
    if len(row) < row_bytes(width):
        raise ValueError(f"row holds {len(row)} bytes, {row_bytes(width)} needed for width {width}")

    runs = []
    run_color = (row[0] & 0x80) >> 7
    run_length = 0
    for bit in _bits(row, width):
        if bit == run_color:
            run_length += 1
        else:
            runs.append(pack_run(run_color, run_length))
            run_color = bit
            run_length = 1
    runs.append(pack_run(run_color, run_length))
    return runs


def decode_row(words: Sequence[int], width: int) -> bytes:
    """Expand run words back into a packed row of ``row_bytes(width)`` bytes."""
    out = bytearray(row_bytes(width))
    x = 0
    for word in words:
        color, length = unpack_run(word)
        if x + length > width:
            raise ValueError(f"runs overflow row width {width}")
        if color:
            for i in range(x, x + length):
                out[i // 8] |= 0x80 >> (i % 8)
        x += length
    if x != width:
        raise ValueError(f"runs cover {x} pixels, expected {width}")
    return bytes(out)


def encode_image(bitmap: Bitmap) -> EncodedImage:
    data = [0] * (bitmap.height + 1)
    data[0] = len(data)
    for y in range(bitmap.height):
        data.extend(encode_row(bitmap.row(y), bitmap.width))
        data[y + 1] = len(data)
    if len(data) > MAX_WORDS:
        # Header offsets are 16-bit words too.
        raise ValueError(
            f"encoded image needs {len(data)} words, more than the {MAX_WORDS} a 16-bit offset can address"
        )
    return EncodedImage(width=bitmap.width, height=bitmap.height, data=tuple(data))


def decode_image(image: EncodedImage) -> Bitmap:
    if image.data[0] != image.height + 1 or image.data[image.height] != len(image.data):
        raise ValueError("encoded image header is inconsistent with its data")
    rows = [decode_row(image.row_runs(y), image.width) for y in range(image.height)]
    return Bitmap(
        width=image.width,
        height=image.height,
        stride=row_bytes(image.width),
        buffer=b"".join(rows),
    )
