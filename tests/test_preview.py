from PIL import Image

from epdasset import preview
from epdasset.bitmap import BitmapImage
from epdasset.glyphs import build_font

from conftest import FakeFont, fake_glyph


def test_glyph_sheet_draws_glyphs_on_baseline(tmp_path):
    font = FakeFont({65: fake_glyph(["##", "##"], advance=3 * 64)}, ascender=4 * 64, descender=-64)
    bundle = build_font(font, "A", 4)

    sheet = preview.glyph_sheet(bundle)
    assert sheet.size == (2 + 3 + 2, 2 + 4 + 1 + 2)
    baseline = 2 + 4
    assert sheet.getpixel((2, baseline - 2)) == 0
    assert sheet.getpixel((3, baseline - 1)) == 0
    assert sheet.getpixel((4, baseline - 1)) == 255
    assert sheet.getpixel((2, baseline)) == 255

    path = tmp_path / "sheet.png"
    preview.save_png(sheet, path)
    with Image.open(path) as im:
        assert im.size == sheet.size


def test_bitmap_preview_draws_set_bits_white():
    image = BitmapImage(width=2, height=1, stride=1, data=bytes([0b10000000]))
    canvas = preview.bitmap_preview(image)
    assert canvas.getpixel((0, 0)) == 255
    assert canvas.getpixel((1, 0)) == 0
