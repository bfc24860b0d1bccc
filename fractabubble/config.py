"""Packing configuration.

All knobs the packer and its collaborators consume live on one pydantic
model, so malformed values are rejected before any glyph is rasterized.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .oracle import ORACLES

DEFAULT_FILL = "#800080"
DEFAULT_FONT = "LiberationMono-Regular.ttf"


def canvas_size(image_height: int, font_width: float, font_height: float) -> tuple[int, int]:
    """(width, height) of a glyph canvas with the given proportions."""
    width = int(image_height * font_width / font_height)
    return (max(1, width), image_height)


def validate_hex_color(value: str) -> str:
    """Return ``value`` if it is a ``#rrggbb`` color.

    Raises:
        ValueError: If the color is malformed.
    """
    h = value.removeprefix("#")
    if not value.startswith("#") or len(h) != 6:
        raise ValueError(f"Invalid color '{value}', expected #rrggbb")
    try:
        int(h, 16)
    except ValueError:
        raise ValueError(f"Invalid color '{value}', expected #rrggbb") from None
    return value


class PackingConfig(BaseModel):
    """Options for rasterizing, packing and rendering one glyph."""

    min_radius: int = Field(
        default=5,
        ge=1,
        description="Fineness: packing stops when no circle this large fits",
    )
    max_radius: int | None = Field(
        default=None,
        ge=1,
        description="Largest radius ever reported; seeds the running bound",
    )
    image_height: int = Field(
        default=256,
        ge=16,
        le=4096,
        description="Canvas height in pixels",
    )
    font_width: float = Field(
        default=0.6,
        gt=0,
        le=4,
        description="Glyph advance width as a fraction of the font size",
    )
    font_height: float = Field(
        default=0.68,
        gt=0,
        le=4,
        description="Canvas height as a fraction of the font size",
    )
    threshold: int = Field(
        default=0,
        ge=0,
        le=254,
        description="Pixels with intensity above this value are filled",
    )
    fill: str = Field(
        default=DEFAULT_FILL,
        description="Circle fill color for rendering",
    )
    oracle: str = Field(
        default="scan",
        description="Radius strategy: scan or growth",
    )

    @field_validator("fill")
    @classmethod
    def _check_fill(cls, value: str) -> str:
        return validate_hex_color(value)

    @field_validator("oracle")
    @classmethod
    def _check_oracle(cls, value: str) -> str:
        if value not in ORACLES:
            raise ValueError(f"Unknown oracle '{value}'. Valid oracles: {', '.join(ORACLES)}")
        return value

    @property
    def canvas_size(self) -> tuple[int, int]:
        """(width, height) of the rasterized glyph canvas."""
        return canvas_size(self.image_height, self.font_width, self.font_height)


def load_config(path: str | Path, **overrides) -> PackingConfig:
    """Read a JSON config file, applying keyword overrides on top.

    Overrides whose value is None are ignored.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or fails validation.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {path}: expected a JSON object")
    data.update({k: v for k, v in overrides.items() if v is not None})
    return make_config(**data)


def make_config(**values) -> PackingConfig:
    """Build a PackingConfig, surfacing validation errors as ValueError."""
    try:
        return PackingConfig(**values)
    except ValidationError as e:
        raise ValueError(str(e)) from e
