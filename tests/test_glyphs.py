import pytest

from epdasset.config import CompilerConfig
from epdasset.errors import EmptyAlphabetError, NegativeBearingError, RasterizationError
from epdasset.glyphs import build_font, normalize_characters
from epdasset.index import IndexRange
from epdasset.rasterizer import RasterizedGlyph
from epdasset.rle import Bitmap, decode_image

from conftest import FakeFont, fake_glyph


def test_glyphs_follow_code_point_order(abd_font):
    bundle = build_font(abd_font, "bda", 12)

    assert bundle.characters == (ord("a"), ord("b"), ord("d"))
    assert abd_font.rasterized == [ord("a"), ord("b"), ord("d")]
    assert [bundle.index.lookup(ord(c)) for c in "abd"] == [0, 1, 2]
    assert bundle.index.ranges == (IndexRange(ord("a"), 2, 0), IndexRange(ord("d"), 1, 2))
    assert bundle.glyph_for("b").top == 5
    assert bundle.glyph_for("d").left == -1
    assert bundle.glyph_for("c") is None


def test_glyph_images_decode_to_rasterized_bitmaps(abd_font):
    bundle = build_font(abd_font, "abd", 12)
    for code_point, glyph in zip(bundle.characters, bundle.glyphs):
        assert decode_image(glyph.image) == abd_font.glyphs[code_point].bitmap


def test_duplicates_are_removed(abd_font):
    bundle = build_font(abd_font, ["a", "a", "dd", ord("b")], 12)
    assert len(bundle.glyphs) == 3


def test_size_is_set_at_72_dpi(abd_font):
    build_font(abd_font, "a", 14)
    assert abd_font.size == (14, 72)

    build_font(abd_font, "a", 14, CompilerConfig(dpi=150))
    assert abd_font.size == (14, 150)


def test_metrics_round_away_from_zero():
    font = FakeFont({65: fake_glyph(["#"], advance=65)}, ascender=1, descender=-1)
    bundle = build_font(font, "A", 8)
    assert bundle.ascender == 1
    assert bundle.descender == 1
    assert bundle.glyphs[0].advance == 2


def test_whole_pixel_metrics_are_kept():
    font = FakeFont({65: fake_glyph(["#"], advance=7 * 64)}, ascender=11 * 64, descender=-3 * 64)
    bundle = build_font(font, "A", 8)
    assert (bundle.ascender, bundle.descender, bundle.glyphs[0].advance) == (11, 3, 7)


def test_negative_bearing_aborts():
    font = FakeFont({65: fake_glyph(["#"]), 66: fake_glyph(["#"], top=-1), 67: fake_glyph(["#"])})
    with pytest.raises(NegativeBearingError) as excinfo:
        build_font(font, "ABC", 8)
    assert excinfo.value.code_point == 66
    assert excinfo.value.top == -1
    assert font.rasterized == [65, 66]


def test_missing_glyph_propagates(abd_font):
    with pytest.raises(RasterizationError) as excinfo:
        build_font(abd_font, "abz", 12)
    assert excinfo.value.code_point == ord("z")


def test_empty_alphabet(abd_font):
    with pytest.raises(EmptyAlphabetError):
        build_font(abd_font, "", 12)
    assert abd_font.size is None


def test_blank_glyph_has_header_only():
    font = FakeFont({32: fake_glyph([], top=0, advance=4 * 64)})
    bundle = build_font(font, " ", 8)
    assert bundle.glyphs[0].image.data == (1,)
    assert bundle.glyphs[0].advance == 4


def test_normalize_characters():
    assert normalize_characters(["cab", 0x20, "a"]) == [0x20, ord("a"), ord("b"), ord("c")]


def test_glyph_too_large_to_encode_aborts():
    width = 32767
    stride = (width + 7) // 8
    bitmap = Bitmap(width=width, height=3, stride=stride, buffer=bytes([0xAA]) * (stride * 3))
    font = FakeFont({65: RasterizedGlyph(bitmap=bitmap, left=0, top=3, advance=64)})
    with pytest.raises(RasterizationError) as excinfo:
        build_font(font, "A", 8)
    assert excinfo.value.code_point == 65
