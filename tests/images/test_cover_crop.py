"""
Tests for photostrip.images.cropper

Test Coverage:
- compute_cover_crop(): Side trimming, top/bottom trimming, centring
- Crop stays inside the source and keeps the slot aspect ratio
- cover_crop(): Output size, mode handling, centred content
"""
import pytest
from PIL import Image

from photostrip.images.cropper import compute_cover_crop, cover_crop

SLOT_W, SLOT_H = 960, 720


def test_wider_source_trims_left_and_right():
    """16:9 source into a 4:3 slot keeps full height, centred horizontally."""
    box = compute_cover_crop(1600, 900, SLOT_W, SLOT_H)

    assert box.top == 0
    assert box.height == 900
    assert box.width == pytest.approx(1200)
    assert box.left == pytest.approx(200)


def test_taller_source_trims_top_and_bottom():
    """Portrait source keeps full width, centred vertically."""
    box = compute_cover_crop(600, 800, SLOT_W, SLOT_H)

    assert box.left == 0
    assert box.width == 600
    assert box.height == pytest.approx(450)
    assert box.top == pytest.approx(175)


def test_same_ratio_uses_whole_source():
    box = compute_cover_crop(800, 600, SLOT_W, SLOT_H)

    assert box.left == 0
    assert box.top == pytest.approx(0)
    assert box.width == 800
    assert box.height == pytest.approx(600)


@pytest.mark.parametrize(
    "src_w, src_h",
    [(1, 1), (4000, 3000), (3000, 4000), (1920, 1080), (1080, 1920), (7, 3), (999, 1001)],
)
def test_crop_keeps_ratio_and_stays_inside_source(src_w, src_h):
    box = compute_cover_crop(src_w, src_h, SLOT_W, SLOT_H)

    assert box.aspect_ratio == pytest.approx(SLOT_W / SLOT_H)
    assert box.left >= 0
    assert box.top >= 0
    assert box.right <= src_w + 1e-9
    assert box.bottom <= src_h + 1e-9


@pytest.mark.parametrize("dims", [(0, 100, 960, 720), (100, 0, 960, 720), (100, 100, 0, 720), (100, 100, 960, -1)])
def test_non_positive_dimensions_raise(dims):
    with pytest.raises(ValueError):
        compute_cover_crop(*dims)


def test_cover_crop_output_size(make_photo):
    result = cover_crop(make_photo((1600, 900)), SLOT_W, SLOT_H)

    assert result.size == (SLOT_W, SLOT_H)
    assert result.mode == "RGB"


def test_cover_crop_keeps_centre_of_wide_source():
    """Only the centre stripe of a wide source survives."""
    source = Image.new("RGB", (300, 100), (255, 0, 0))
    source.paste((0, 255, 0), (100, 0, 200, 100))

    result = cover_crop(source, 100, 100)

    r, g, b = result.getpixel((50, 50))
    assert g > 200
    assert r < 50


def test_cover_crop_converts_palette_images(make_photo):
    source = make_photo((200, 100), "blue").convert("P")

    result = cover_crop(source, 40, 30)

    assert result.mode == "RGB"
    assert result.size == (40, 30)


def test_cover_crop_keeps_alpha(make_photo):
    source = make_photo((200, 150), (10, 20, 30, 0), mode="RGBA")

    result = cover_crop(source, 40, 30)

    assert result.mode == "RGBA"
    assert result.getpixel((20, 15))[3] == 0


def test_cover_crop_does_not_modify_source(make_photo):
    source = make_photo((1600, 900))
    before = source.tobytes()

    cover_crop(source, SLOT_W, SLOT_H)

    assert source.size == (1600, 900)
    assert source.tobytes() == before
