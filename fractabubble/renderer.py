"""SVG and PNG rendering for packed glyphs.

The SVG is deliberately minimal: a root sized to the glyph canvas and
one filled ``<circle>`` per packed circle, in discovery order, so that
consumers can replay the circles largest-first.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from .circles import Circle, PackResult
from .config import DEFAULT_FILL, validate_hex_color

logger = structlog.get_logger(__name__)


def _unpack(
    packing: PackResult | Iterable[Circle],
    width: int | None,
    height: int | None,
) -> tuple[list[Circle], int, int]:
    if isinstance(packing, PackResult):
        return packing.circles, width or packing.width, height or packing.height
    if width is None or height is None:
        raise ValueError("width and height are required when rendering a circle list")
    return list(packing), width, height


def render_svg(
    packing: PackResult | Iterable[Circle],
    width: int | None = None,
    height: int | None = None,
    fill: str = DEFAULT_FILL,
) -> str:
    """Render packed circles as an SVG document.

    Args:
        packing: A PackResult, or circles in discovery order.
        width: Canvas width. Taken from the PackResult when omitted.
        height: Canvas height. Taken from the PackResult when omitted.
        fill: Circle fill color (#rrggbb).

    Returns:
        Complete SVG document as a string.

    Raises:
        ValueError: If the fill color is malformed or the canvas size is
            missing for a bare circle list.
    """
    fill = validate_hex_color(fill)
    circles, width, height = _unpack(packing, width, height)

    svg_parts: list[str] = [
        '<?xml version="1.0"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">',
    ]
    for c in circles:
        svg_parts.append(f'  <circle cx="{c.x}" cy="{c.y}" r="{c.radius}" fill="{fill}"/>')
    svg_parts.append("</svg>")
    svg_content = "\n".join(svg_parts) + "\n"

    logger.debug("svg_rendered", circle_count=len(circles), width=width, height=height)
    return svg_content


def render_png(
    packing: PackResult | Iterable[Circle],
    width: int | None = None,
    height: int | None = None,
    fill: str = DEFAULT_FILL,
) -> bytes:
    """Render packed circles as a PNG image.

    Generates SVG first, then converts to PNG via CairoSVG.

    Returns:
        PNG image bytes.
    """
    import cairosvg

    circles, width, height = _unpack(packing, width, height)
    svg = render_svg(circles, width, height, fill=fill)
    png_bytes = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=width,
        output_height=height,
    )

    logger.debug("png_rendered", width=width, height=height, bytes=len(png_bytes))
    return png_bytes


def write_svg(
    path: str | Path,
    packing: PackResult | Iterable[Circle],
    width: int | None = None,
    height: int | None = None,
    fill: str = DEFAULT_FILL,
) -> Path:
    """Render and write an SVG file, creating parent directories."""
    path = Path(path)
    svg = render_svg(packing, width, height, fill=fill)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(svg, encoding="utf-8")
    return path
