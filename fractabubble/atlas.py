"""Batch packing of a glyph set into an SVG atlas.

Every glyph of the set is rasterized, packed and written to
``<out_dir>/<name>.svg``. An index file ``<out_dir>/atlas`` maps
codepoints to file names, one record per glyph::

    \\n<codepoint>\\n<file name>\\n

Punctuation gets a symbolic name (``_period``, ``_colon``...), letters
and digits are named by the character itself. Glyphs are independent,
so they can be packed in parallel worker processes.
"""

from __future__ import annotations

import string
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import structlog

from .config import PackingConfig
from .packer import GreedyPacker
from .rasterizer import GlyphRasterizer
from .renderer import write_svg

logger = structlog.get_logger(__name__)

ATLAS_FILE_NAME = "atlas"

SYMBOL_NAMES: dict[str, str] = {
    " ": "_space",
    ".": "_period",
    ":": "_colon",
    ",": "_comma",
    ";": "_semicolon",
    "(": "_openparenthesis",
    ")": "_closeparenthesis",
    "[": "_opensquarebrackets",
    "]": "_closesquarebrackets",
    "*": "_star",
    "!": "_exclamation",
    "?": "_question",
    "'": "_singlequote",
    '"': "_doublequote",
}

DEFAULT_GLYPHS = (
    "".join(SYMBOL_NAMES)
    + string.digits
    + string.ascii_lowercase
    + string.ascii_uppercase
)


@dataclass(frozen=True)
class AtlasEntry:
    """One packed glyph of an atlas."""

    codepoint: int
    file_name: str
    circles: int


def glyph_file_name(glyph: str) -> str:
    """SVG file name for a glyph.

    Raises:
        ValueError: If the glyph has no file-system safe name.
    """
    if len(glyph) != 1:
        raise ValueError(f"Expected a single character, got {glyph!r}")
    if glyph in SYMBOL_NAMES:
        return SYMBOL_NAMES[glyph] + ".svg"
    if glyph.isalnum() and glyph.isascii():
        return glyph + ".svg"
    return f"_u{ord(glyph):04x}.svg"


def _pack_glyph(font_path: str, glyph: str, config: PackingConfig, out_dir: str) -> AtlasEntry:
    rasterizer = GlyphRasterizer.from_config(font_path, config)
    grid = rasterizer.rasterize(glyph, threshold=config.threshold)
    packer = GreedyPacker(
        oracle=config.oracle,
        min_radius=config.min_radius,
        max_radius=config.max_radius,
    )
    result = packer.pack(grid)
    file_name = glyph_file_name(glyph)
    write_svg(Path(out_dir) / file_name, result, fill=config.fill)
    logger.info("glyph_written", glyph=glyph, file=file_name, circles=len(result.circles))
    return AtlasEntry(codepoint=ord(glyph), file_name=file_name, circles=len(result.circles))


def write_atlas(path: str | Path, entries: list[AtlasEntry]) -> Path:
    """Write the codepoint -> file name index."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        for entry in entries:
            f.write(f"\n{entry.codepoint}\n{entry.file_name}\n")
    return path


def read_atlas(path: str | Path) -> dict[int, str]:
    """Parse an atlas index back into {codepoint: file name}.

    Raises:
        ValueError: If the file is not a sequence of codepoint/name pairs.
    """
    lines = [line for line in Path(path).read_text(encoding="utf-8").splitlines() if line]
    if len(lines) % 2 != 0:
        raise ValueError(f"Malformed atlas {path}: odd number of records")
    atlas: dict[int, str] = {}
    for i in range(0, len(lines), 2):
        try:
            codepoint = int(lines[i])
        except ValueError:
            raise ValueError(f"Malformed atlas {path}: bad codepoint {lines[i]!r}") from None
        atlas[codepoint] = lines[i + 1]
    return atlas


def build_atlas(
    font_path: str | Path,
    out_dir: str | Path,
    config: PackingConfig | None = None,
    glyphs: str | None = None,
    jobs: int = 1,
) -> list[AtlasEntry]:
    """Pack every glyph of a set and write the SVGs plus the atlas index.

    Args:
        font_path: Font to rasterize from.
        out_dir: Output directory, created if missing.
        config: Packing options. Defaults to PackingConfig().
        glyphs: Characters to pack. Defaults to DEFAULT_GLYPHS.
        jobs: Worker processes. 1 packs in this process.

    Returns:
        Atlas entries in glyph-set order.

    Raises:
        FileNotFoundError: If the font does not exist.
        ValueError: If the font is unreadable or a glyph is missing from it.
    """
    config = config or PackingConfig()
    glyphs = DEFAULT_GLYPHS if glyphs is None else glyphs
    glyphs = "".join(dict.fromkeys(glyphs))

    # Fail fast on a bad font or missing glyphs before any packing starts.
    rasterizer = GlyphRasterizer.from_config(font_path, config)
    missing = [g for g in glyphs if not g.isspace() and not rasterizer.has_glyph(g)]
    if missing:
        raise ValueError(f"Glyphs not present in font: {''.join(missing)!r}")

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    logger.info("atlas_started", font=str(font_path), glyphs=len(glyphs), jobs=jobs)

    if jobs <= 1:
        entries = [_pack_glyph(str(font_path), g, config, str(out)) for g in glyphs]
    else:
        with ProcessPoolExecutor(max_workers=jobs) as pool:
            futures = [pool.submit(_pack_glyph, str(font_path), g, config, str(out)) for g in glyphs]
            entries = [f.result() for f in futures]

    write_atlas(out / ATLAS_FILE_NAME, entries)
    logger.info("atlas_written", path=str(out / ATLAS_FILE_NAME), glyphs=len(entries))
    return entries
