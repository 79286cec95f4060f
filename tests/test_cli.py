"""
Tests for photostrip.cli

Test Coverage:
- render: Output file, style flags, style file, exit codes
- render --suggest without an API key
- orders: list, export, clear
"""
import re

import pytest
from PIL import Image

from photostrip.cli import main
from photostrip.config import StyleConfig, save_style
from photostrip.enrichment import suggester as suggester_module


@pytest.fixture
def no_api_key(monkeypatch):
    for name in suggester_module.API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_render_writes_strip(photo_files, tmp_path, capsys):
    out = tmp_path / "strip.jpg"

    code = main(["render", *map(str, photo_files), "-o", str(out), "--no-date"])

    assert code == 0
    with Image.open(out) as image:
        assert image.size == (1080, 3130)
        assert image.format == "JPEG"
    assert "Wrote" in capsys.readouterr().out


def test_render_with_caption_and_border(photo_files, tmp_path):
    out = tmp_path / "strip.jpg"

    code = main([
        "render", str(photo_files[0]), "-o", str(out),
        "--caption", "一路生花🌸", "--border-color", "#FFFFFF", "--filter", "vintage",
    ])

    assert code == 0
    with Image.open(out) as image:
        assert image.size == (1080, 3270)
        # White border: the left padding stays white
        assert image.getpixel((10, 1500)) == pytest.approx((255, 255, 255), abs=3)


def test_render_into_directory(photo_files, tmp_path):
    code = main(["render", str(photo_files[0]), "-o", str(tmp_path)])

    assert code == 0
    assert len(list(tmp_path.glob("life4cuts-current-*.jpg"))) == 1


def test_render_with_style_file(photo_files, tmp_path):
    style_path = tmp_path / "style.json"
    save_style(StyleConfig(show_date=False, caption="from file"), style_path)
    out = tmp_path / "strip.jpg"

    assert main(["render", str(photo_files[0]), "--style", str(style_path), "-o", str(out)]) == 0

    with Image.open(out) as image:
        assert image.size == (1080, 3230)


def test_too_many_images(photo_files, tmp_path, capsys):
    code = main(["render", *map(str, photo_files), str(photo_files[0]), "-o", str(tmp_path / "x.jpg")])

    assert code == 2
    assert "at most 4" in capsys.readouterr().err


def test_unreadable_image(tmp_path, capsys):
    bad = tmp_path / "bad.jpg"
    bad.write_bytes(b"nope")

    code = main(["render", str(bad), "-o", str(tmp_path / "x.jpg")])

    assert code == 1
    assert "slot 0" in capsys.readouterr().err


def test_caption_too_long_is_a_usage_error(photo_files, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["render", str(photo_files[0]), "--caption", "x" * 31, "-o", str(tmp_path / "x.jpg")])

    assert exc_info.value.code == 2
    assert "at most 30 characters" in capsys.readouterr().err
    assert not (tmp_path / "x.jpg").exists()


def test_style_file_with_wrong_type(photo_files, tmp_path, capsys):
    style_path = tmp_path / "style.json"
    style_path.write_text('{"borderWidth": "20"}', encoding="utf-8")

    code = main(["render", str(photo_files[0]), "--style", str(style_path), "-o", str(tmp_path / "x.jpg")])

    assert code == 1
    assert "border_width must be an integer" in capsys.readouterr().err


def test_invalid_colour(photo_files, tmp_path, capsys):
    code = main(["render", str(photo_files[0]), "--border-color", "nope", "-o", str(tmp_path / "x.jpg")])

    assert code == 1
    assert "border_color" in capsys.readouterr().err


def test_suggest_without_key_keeps_style(no_api_key, photo_files, tmp_path, capsys):
    out = tmp_path / "strip.jpg"

    code = main(["render", str(photo_files[0]), "--suggest", "--no-date", "-o", str(out)])

    assert code == 0
    assert "keeping your style" in capsys.readouterr().err
    with Image.open(out) as image:
        # No caption was merged in
        assert image.size == (1080, 3130)


def test_order_workflow(photo_files, tmp_path, capsys):
    orders = tmp_path / "orders"

    assert main(["render", str(photo_files[0]), "-o", str(tmp_path / "s.jpg"), "--order-dir", str(orders)]) == 0
    order_id = re.search(r"Order #(\d{4}) submitted", capsys.readouterr().out).group(1)

    assert main(["orders", "list", "--order-dir", str(orders)]) == 0
    assert f"#{order_id}" in capsys.readouterr().out

    exported = tmp_path / "exported.jpg"
    assert main(["orders", "export", order_id, "--order-dir", str(orders), "-o", str(exported)]) == 0
    assert exported.read_bytes() == (orders / f"order-{order_id}.jpg").read_bytes()

    assert main(["orders", "clear", "--order-dir", str(orders)]) == 0
    assert "Removed 1 order(s)" in capsys.readouterr().out

    assert main(["orders", "list", "--order-dir", str(orders)]) == 0
    assert "No orders" in capsys.readouterr().out


def test_export_needs_order_id(tmp_path, capsys):
    assert main(["orders", "export", "--order-dir", str(tmp_path)]) == 2


def test_export_unknown_order(tmp_path, capsys):
    code = main(["orders", "export", "9999", "--order-dir", str(tmp_path)])

    assert code == 1
    assert "No order #9999" in capsys.readouterr().err


def test_missing_subcommand():
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 2
