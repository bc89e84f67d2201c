"""
Polygon shape entity.

Each shape marks one detected drum kick. It appears at a random spot on
the canvas, then grows or shrinks with the music's rhythm while its
lifespan decays geometrically until it fades out.
"""

import random
from dataclasses import dataclass, replace

from chromapulse.core.settings import CanvasGeometry, VisualizerSettings


NEON_PALETTE: tuple[tuple[int, int, int], ...] = (
    (255, 0, 255),  # Neon magenta
    (0, 255, 255),  # Neon cyan
    (255, 255, 0),  # Neon yellow
    (57, 255, 20),  # Neon green
    (0, 191, 255),  # Neon blue
    (255, 105, 180),  # Hot pink
    (255, 140, 0),  # Dark orange
)

INITIAL_RADIUS = 30.0
INITIAL_LIFESPAN = 255.0
LIFESPAN_FLOOR = 1.0
MIN_VERTICES = 3
MAX_VERTICES = 10


@dataclass(frozen=True)
class Shape:
    """A single regular polygon on the canvas."""

    x: float
    y: float
    radius: float
    vertex_count: int
    color: tuple[int, int, int]
    lifespan: float = INITIAL_LIFESPAN

    @property
    def alive(self) -> bool:
        return self.lifespan > LIFESPAN_FLOOR

    @property
    def opacity(self) -> float:
        """Stroke opacity in [0, 1], proportional to remaining lifespan."""
        return min(1.0, max(0.0, self.lifespan / INITIAL_LIFESPAN))


def spawn_shape(geometry: CanvasGeometry, rng: random.Random) -> Shape:
    """
    Create a fresh shape somewhere inside the canvas.

    Args:
        geometry: Current canvas bounds.
        rng: Random source; pass a seeded instance for reproducible output.

    Returns:
        New Shape with initial radius and lifespan.
    """
    return Shape(
        x=rng.random() * geometry.width,
        y=rng.random() * geometry.height,
        radius=INITIAL_RADIUS,
        vertex_count=rng.randint(MIN_VERTICES, MAX_VERTICES),
        color=rng.choice(NEON_PALETTE),
    )


def evolve_shape(
    shape: Shape,
    rhythm: float,
    settings: VisualizerSettings,
) -> Shape:
    """
    Advance a shape by one feature event.

    The radius gains a rhythm-proportional share of itself minus a constant
    shrink of one pixel; the lifespan is multiplied by the decay rate.

    Args:
        shape: Shape to advance.
        rhythm: The event's rhythm factor.
        settings: Live settings supplying the rhythm gain and decay rate.

    Returns:
        New Shape; the input is not modified.
    """
    radius = shape.radius + rhythm * settings.rhythm_factor * shape.radius - 1
    return replace(
        shape,
        radius=radius,
        lifespan=shape.lifespan * settings.decay_rate,
    )
