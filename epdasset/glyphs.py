"""Build the glyph table of a font subset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from epdasset.config import DEFAULT_CONFIG, CompilerConfig
from epdasset.errors import EmptyAlphabetError, NegativeBearingError, RasterizationError
from epdasset.index import CharToIndex, compile_index
from epdasset.rasterizer import Font
from epdasset.rle import EncodedImage, encode_image


@dataclass(frozen=True)
class Glyph:
    image: EncodedImage
    left: int
    top: int
    advance: int


@dataclass(frozen=True)
class FontBundle:
    ascender: int
    descender: int
    characters: tuple[int, ...]
    glyphs: tuple[Glyph, ...]
    index: CharToIndex

    def glyph_for(self, char: Union[str, int]) -> Optional[Glyph]:
        code_point = ord(char) if isinstance(char, str) else char
        position = self.index.lookup(code_point)
        return None if position is None else self.glyphs[position]

    @property
    def word_count(self) -> int:
        return sum(len(g.image.data) for g in self.glyphs)


def normalize_characters(characters: Iterable[Union[str, int]]) -> list[int]:
    """Sorted, deduplicated code points from characters or code points."""
    code_points = set()
    for c in characters:
        if isinstance(c, str):
            code_points.update(ord(ch) for ch in c)
        else:
            code_points.add(int(c))
    return sorted(code_points)


def build_font(
    font: Font,
    characters: Iterable[Union[str, int]],
    point_size: int,
    config: CompilerConfig = DEFAULT_CONFIG,
) -> FontBundle:
    """
    Rasterize every requested character and assemble the font bundle.

    Glyphs are ordered by ascending code point, the same order the index is
    compiled from, so ``bundle.glyphs[bundle.index.lookup(c)]`` is the glyph
    of ``c``. Any rasterization failure or negative vertical bearing aborts
    the whole build.
    """
    code_points = normalize_characters(characters)
    if not code_points:
        raise EmptyAlphabetError()

    font.set_size(point_size, config.dpi)

    glyphs = []
    for code_point in code_points:
        raster = font.rasterize(code_point)
        if raster.top < 0:
            raise NegativeBearingError(code_point, raster.top)
        try:
            image = encode_image(raster.bitmap)
        except ValueError as err:
            raise RasterizationError(code_point, str(err)) from err
        glyphs.append(
            Glyph(
                image=image,
                left=raster.left,
                top=raster.top,
                advance=config.norm_ceil(raster.advance),
            )
        )

    ascender, descender = font.size_metrics()
    return FontBundle(
        ascender=config.norm_ceil(ascender),
        descender=config.norm_ceil(-descender),
        characters=tuple(code_points),
        glyphs=tuple(glyphs),
        index=compile_index(code_points),
    )
