"""
Polygon renderer and frame scheduler.

Frames are produced on their own clock, independent of how often feature
events arrive: every tick paints whatever the registry snapshot holds at
that moment. Pausing stops the clock only; shapes keep evolving as events
come in.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Union

import numpy as np
import pygame
from PIL import Image

from chromapulse.core.registry import ShapeRegistry
from chromapulse.core.settings import CanvasGeometry
from chromapulse.core.shapes import Shape

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Configuration for the polygon renderer."""

    fps: int = 60
    stroke_width: int = 5
    dark_mode: bool = True
    dark_background: tuple[int, int, int] = (17, 24, 39)
    light_background: tuple[int, int, int] = (243, 244, 246)
    status_margin: int = 16

    @property
    def background(self) -> tuple[int, int, int]:
        return self.dark_background if self.dark_mode else self.light_background

    @property
    def foreground(self) -> tuple[int, int, int]:
        return self.light_background if self.dark_mode else self.dark_background


def polygon_points(shape: Shape) -> np.ndarray:
    """
    Vertices of a shape's regular polygon.

    Vertex i sits at angle 2*pi*i/n around (x, y).

    Returns:
        (n, 2) float array of (x, y) points.
    """
    angles = 2 * np.pi * np.arange(shape.vertex_count) / shape.vertex_count
    return np.column_stack((
        shape.x + shape.radius * np.cos(angles),
        shape.y + shape.radius * np.sin(angles),
    ))


def stroke_reaches(shape: Shape, size: tuple[int, int], stroke_width: int) -> bool:
    """
    Whether any part of a shape's stroke can land on a canvas of this size.

    A negative radius is a polygon reflected through its centre, so only
    |radius| matters. Every edge lies at least |radius| * cos(pi/n) from
    the centre; once that ring, less the stroke width, encloses the whole
    canvas there is nothing to draw.
    """
    if not math.isfinite(shape.radius):
        return False
    width, height = size
    farthest = max(
        math.hypot(cx - shape.x, cy - shape.y)
        for cx in (0.0, float(width))
        for cy in (0.0, float(height))
    )
    inner = abs(shape.radius) * math.cos(math.pi / shape.vertex_count)
    return inner - stroke_width <= farthest


def stroke_color(shape: Shape) -> tuple[int, int, int, int]:
    """Shape color with alpha scaled by remaining lifespan."""
    r, g, b = shape.color
    return (r, g, b, int(round(255 * shape.opacity)))


class RenderScheduler:
    """
    Continuous frame loop over a ShapeRegistry.

    Frames are requested one at a time through request_frame, which
    mirrors loop.call_later: at most one request is outstanding, play()
    issues it and pause() cancels it.
    """

    def __init__(
        self,
        registry: ShapeRegistry,
        surface: pygame.Surface,
        config: RenderConfig | None = None,
        request_frame: Callable[[float, Callable[[], None]], Any] | None = None,
        present: Callable[[], None] | None = None,
        font: "pygame.font.Font | None" = None,
    ):
        """
        Args:
            registry: Source of shapes to draw.
            surface: Drawing surface (the display surface when windowed).
            config: Rendering configuration. Uses defaults if None.
            request_frame: Schedules the next frame. Defaults to the running
                event loop's call_later.
            present: Called after each frame is drawn, e.g. display.flip.
            font: Font for the status overlay; no overlay if None.
        """
        self.registry = registry
        self.surface = surface
        self.cfg = config or RenderConfig()
        self._request_frame = request_frame
        self._present = present
        self.font = font

        width, height = surface.get_size()
        self.geometry = CanvasGeometry(float(width), float(height))
        self.status_text = ""
        self.playing = False
        self.frame_count = 0
        self._handle = None

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.cfg.fps

    @property
    def frame_pending(self) -> bool:
        return self._handle is not None

    def _request(self):
        if self._request_frame is not None:
            self._handle = self._request_frame(self.frame_interval, self._on_frame)
        else:
            loop = asyncio.get_running_loop()
            self._handle = loop.call_later(self.frame_interval, self._on_frame)

    def play(self):
        """Start (or resume) producing frames."""
        self.playing = True
        if self._handle is None:
            self._request()

    def pause(self):
        """Stop producing frames. Shape state is untouched."""
        self.playing = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def toggle(self) -> bool:
        if self.playing:
            self.pause()
        else:
            self.play()
        return self.playing

    def toggle_theme(self) -> bool:
        self.cfg.dark_mode = not self.cfg.dark_mode
        return self.cfg.dark_mode

    def _on_frame(self):
        self._handle = None
        if not self.playing:
            return
        self.draw_frame()
        if self._present:
            self._present()
        self._request()

    def resize(self, surface: pygame.Surface | None = None) -> CanvasGeometry:
        """
        Re-read the canvas size from the live surface.

        Only the bounds for future spawns change; shapes on screen keep
        their positions.

        Args:
            surface: Replacement surface, if the old one was invalidated.

        Returns:
            The updated geometry (same object, updated in place).
        """
        if surface is not None:
            self.surface = surface
        width, height = self.surface.get_size()
        self.geometry.width = float(width)
        self.geometry.height = float(height)
        logger.debug("Canvas resized to %dx%d", width, height)
        return self.geometry

    def _draw_shape(self, surface: pygame.Surface, shape: Shape):
        """Stroke one polygon, alpha-blended onto the surface."""
        cfg = self.cfg
        points = polygon_points(shape)

        # Draw on a per-shape layer, clipped to the canvas, so translucent
        # strokes blend with what is already there
        pad = cfg.stroke_width
        canvas = np.array(surface.get_size(), dtype=float)
        origin = np.maximum(np.floor(points.min(axis=0)) - pad, 0.0)
        corner = np.minimum(np.ceil(points.max(axis=0)) + pad + 1, canvas)
        extent = corner - origin
        if np.any(extent <= 0):
            return
        layer = pygame.Surface((int(extent[0]), int(extent[1])), pygame.SRCALPHA)
        pygame.draw.polygon(
            layer,
            stroke_color(shape),
            (points - origin).tolist(),
            cfg.stroke_width,
        )
        surface.blit(layer, (int(origin[0]), int(origin[1])))

    def draw_frame(self) -> pygame.Surface:
        """
        Paint the current registry snapshot.

        Returns:
            The surface that was drawn on.
        """
        cfg = self.cfg
        surface = self.surface
        surface.fill(cfg.background)

        size = surface.get_size()
        for shape in self.registry.snapshot():
            if stroke_reaches(shape, size, cfg.stroke_width):
                self._draw_shape(surface, shape)

        if self.font is not None and self.status_text:
            text = self.font.render(self.status_text, True, cfg.foreground)
            y = surface.get_height() - text.get_height() - cfg.status_margin
            surface.blit(text, (cfg.status_margin, y))

        self.frame_count += 1
        return surface

    def surface_to_array(self) -> np.ndarray:
        """Current surface as an (H, W, 3) uint8 array."""
        # pygame uses (width, height) but numpy expects (height, width)
        arr = pygame.surfarray.array3d(self.surface)
        return np.ascontiguousarray(np.transpose(arr, (1, 0, 2)))

    def save_frame(self, path: Union[str, Path]) -> Path:
        """Write the current surface to an image file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(self.surface_to_array()).save(path)
        logger.info("Saved frame to %s", path)
        return path
