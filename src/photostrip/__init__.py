"""Top-level package for photostrip, a four-frame photo strip compositor.

Provides subpackages:
- photostrip.layout – strip geometry (slots, header, footer)
- photostrip.images – decoding, cover-crop and photo filters
- photostrip.text – date stamp and caption rendering
- photostrip.output – JPEG encoding of the finished strip
- photostrip.controller – style state, debounced rendering, admin session
- photostrip.enrichment – optional AI caption/colour suggestion
- photostrip.delivery – saving strips and the local order history
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("photostrip")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

from .config import StyleConfig, PhotoFilter
from .compositor import render_strip
from .errors import (
    PhotoStripError,
    RenderError,
    DecodeFailure,
    SurfaceUnavailable,
    EnrichmentError,
)
from .output import RenderedStrip

__all__: list[str] = [
    "__version__",
    "StyleConfig",
    "PhotoFilter",
    "render_strip",
    "RenderedStrip",
    "PhotoStripError",
    "RenderError",
    "DecodeFailure",
    "SurfaceUnavailable",
    "EnrichmentError",
]
