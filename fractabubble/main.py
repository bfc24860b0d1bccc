"""Fractabubble microservice -- FastAPI application.

Endpoints:
    POST /pack          -- Pack a glyph and return the circles as JSON
    POST /pack/svg      -- Pack a glyph and return an SVG document
    POST /pack/png      -- Pack a glyph and return a PNG image
    GET  /oracles       -- List the available radius strategies
    GET  /health        -- Health check

Packing is CPU-bound, so the pack handlers are plain functions that FastAPI
runs in its threadpool; each request packs one glyph on its own grid.

Fonts are looked up by file name inside the directory named by the
``FRACTABUBBLE_FONT_DIR`` environment variable (default ``fonts``).
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from . import __version__
from .circles import PackResult
from .config import DEFAULT_FONT, PackingConfig
from .oracle import ORACLES
from .packer import GreedyPacker
from .rasterizer import GlyphRasterizer
from .renderer import render_png, render_svg

structlog.configure(
    processors=[
        structlog.dev.ConsoleRenderer(),
    ],
)

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="fractabubble",
    description="Greedy inscribed-circle packing of font glyphs",
    version=__version__,
)
app.state.font_dir = Path(os.environ.get("FRACTABUBBLE_FONT_DIR", "fonts"))


# --------------------------------------------------------------------------
# Request / Response models
# --------------------------------------------------------------------------


class PackRequest(PackingConfig):
    """Request body for the /pack endpoints."""

    glyph: str = Field(
        ...,
        min_length=1,
        max_length=1,
        description="Single character to pack",
        examples=["a", "Q", "?"],
    )
    font: str = Field(
        default=DEFAULT_FONT,
        min_length=1,
        description="File name of a TrueType/OpenType font in the server font directory",
        examples=[DEFAULT_FONT],
    )


class CircleModel(BaseModel):
    """One packed circle."""

    x: int
    y: int
    radius: int


class PackResponse(BaseModel):
    """Response body for /pack."""

    width: int
    height: int
    circles: list[CircleModel]
    coverage: float = Field(description="Fraction of glyph pixels covered by circles")


class OraclesResponse(BaseModel):
    """Response body for /oracles."""

    oracles: list[str]
    default: str


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: str
    service: str
    version: str


def _font_file(name: str) -> Path:
    """Resolve a requested font inside the configured font directory.

    Raises:
        ValueError: If the name escapes the font directory.
    """
    font_dir = Path(app.state.font_dir).resolve()
    path = (font_dir / name).resolve()
    if font_dir not in path.parents:
        raise ValueError(f"Font '{name}' is outside the font directory")
    return path


def _pack(request: PackRequest) -> PackResult:
    path = _font_file(request.font)
    try:
        rasterizer = GlyphRasterizer.from_config(path, request)
    except FileNotFoundError:
        raise ValueError(f"Font '{request.font}' not found") from None
    except ValueError:
        raise ValueError(f"Font '{request.font}' could not be loaded") from None
    grid = rasterizer.rasterize(request.glyph, threshold=request.threshold)
    packer = GreedyPacker(
        oracle=request.oracle,
        min_radius=request.min_radius,
        max_radius=request.max_radius,
    )
    return packer.pack(grid)


# --------------------------------------------------------------------------
# Endpoints
# --------------------------------------------------------------------------


@app.post("/pack", response_model=PackResponse)
def pack_json(request: PackRequest) -> PackResponse:
    """Pack a glyph and return its circles in discovery order."""
    try:
        result = _pack(request)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("pack_failed", glyph=request.glyph, error=str(e))
        raise HTTPException(status_code=500, detail="Packing failed")

    return PackResponse(
        width=result.width,
        height=result.height,
        circles=[CircleModel(**c.to_dict()) for c in result.circles],
        coverage=round(result.coverage, 4),
    )


@app.post(
    "/pack/svg",
    response_class=Response,
    responses={
        200: {
            "content": {"image/svg+xml": {}},
            "description": "Packed glyph as SVG",
        },
        422: {"description": "Invalid input"},
    },
)
def pack_svg(request: PackRequest) -> Response:
    """Pack a glyph into an SVG of filled circles."""
    try:
        result = _pack(request)
        svg_content = render_svg(result, fill=request.fill)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("pack_svg_failed", glyph=request.glyph, error=str(e))
        raise HTTPException(status_code=500, detail="Packing failed")

    return Response(content=svg_content, media_type="image/svg+xml")


@app.post(
    "/pack/png",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Packed glyph as PNG"},
        422: {"description": "Invalid input"},
    },
)
def pack_png(request: PackRequest) -> Response:
    """Pack a glyph and rasterize the circles to PNG."""
    try:
        result = _pack(request)
        png_bytes = render_png(result, fill=request.fill)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("pack_png_failed", glyph=request.glyph, error=str(e))
        raise HTTPException(status_code=500, detail="Packing failed")

    return Response(content=png_bytes, media_type="image/png")


@app.get("/oracles", response_model=OraclesResponse)
async def list_oracles() -> OraclesResponse:
    """Radius strategies accepted by the ``oracle`` field."""
    return OraclesResponse(oracles=list(ORACLES), default=PackingConfig().oracle)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for Docker and load balancers."""
    return HealthResponse(
        status="healthy",
        service="fractabubble",
        version=__version__,
    )
