import pytest
import sys
from datetime import date
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import photostrip
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


# Common test fixtures
@pytest.fixture
def fixed_date():
    """Render date used wherever output must be reproducible."""
    return date(2024, 3, 7)


@pytest.fixture
def make_photo():
    """Factory for solid-colour test photos."""
    def _make(size=(800, 600), color="red", mode="RGB"):
        return Image.new(mode, size, color)
    return _make


@pytest.fixture
def photo_files(tmp_path: Path):
    """Four JPEG photos of different shapes on disk."""
    specs = [
        ("p0.jpg", (800, 600), "red"),
        ("p1.jpg", (600, 800), "green"),
        ("p2.jpg", (1600, 900), "blue"),
        ("p3.jpg", (500, 500), "yellow"),
    ]
    paths = []
    for name, size, color in specs:
        path = tmp_path / name
        Image.new("RGB", size, color).save(path, format="JPEG")
        paths.append(path)
    return paths
