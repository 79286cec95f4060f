"""
Tests for photostrip.output

Test Coverage:
- encode_strip(): JPEG bytes, size, mode conversion, quality bounds
- RenderedStrip: data URL and decoding
"""
import pytest
from PIL import Image

from photostrip.output import RenderedStrip, encode_strip


def test_encodes_jpeg(make_photo):
    strip = encode_strip(make_photo((108, 313), "#ec4899"))

    assert isinstance(strip, RenderedStrip)
    assert strip.data[:2] == b"\xff\xd8"
    assert strip.size == (108, 313)
    assert strip.mime_type == "image/jpeg"
    assert strip.byte_size == len(strip.data)


def test_rgba_canvas_is_converted(make_photo):
    strip = encode_strip(make_photo((20, 20), (0, 0, 255, 128), mode="RGBA"))

    assert strip.open().mode == "RGB"


@pytest.mark.parametrize("quality", [0, 101])
def test_quality_out_of_range(make_photo, quality):
    with pytest.raises(ValueError, match="quality"):
        encode_strip(make_photo((4, 4)), quality=quality)


def test_lower_quality_is_smaller():
    canvas = Image.effect_noise((200, 200), 64).convert("RGB")

    high = encode_strip(canvas, quality=95)
    low = encode_strip(canvas, quality=20)

    assert low.byte_size < high.byte_size


def test_open_decodes_payload(make_photo):
    strip = encode_strip(make_photo((30, 40), "white"))

    image = strip.open()

    assert image.size == (30, 40)
    assert image.getpixel((15, 20)) == pytest.approx((255, 255, 255), abs=2)


def test_data_url(make_photo):
    strip = encode_strip(make_photo((4, 4)))

    url = strip.to_data_url()

    assert url.startswith("data:image/jpeg;base64,/9j/")
