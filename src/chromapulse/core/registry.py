"""
Bounded, insertion-ordered collection of live shapes.
"""

import logging
import random

from chromapulse.core.settings import CanvasGeometry, VisualizerSettings
from chromapulse.core.shapes import Shape, evolve_shape, spawn_shape
from chromapulse.io.decoder import FeatureEvent

logger = logging.getLogger(__name__)


class ShapeRegistry:
    """
    Owns every shape on screen.

    Each feature event is applied as one step: spawn (on a kick), evict
    the oldest shapes over capacity, evolve all survivors, then cull the
    faded ones. The result replaces the previous tuple in a single
    assignment, so snapshot() always returns a fully-applied state.
    """

    def __init__(self, rng: random.Random | None = None):
        """
        Initialize an empty registry.

        Args:
            rng: Random source for spawn position, shape and color.
        """
        self.rng = rng or random.Random()
        self._shapes: tuple[Shape, ...] = ()
        self.spawned_total = 0

    def __len__(self) -> int:
        return len(self._shapes)

    def spawn(self, geometry: CanvasGeometry) -> Shape:
        """Create (but do not register) a new shape inside the given bounds."""
        self.spawned_total += 1
        return spawn_shape(geometry, self.rng)

    def apply_event(
        self,
        event: FeatureEvent,
        settings: VisualizerSettings,
        geometry: CanvasGeometry,
    ):
        """
        Apply one feature event.

        Args:
            event: Decoded feature event.
            settings: Live settings, read at call time.
            geometry: Current canvas bounds for any new shape.
        """
        shapes = list(self._shapes)

        if event.is_drum_kick:
            shapes.append(self.spawn(geometry))

        # Capacity applies on every event so a lowered max takes effect at once
        overflow = len(shapes) - settings.max_shapes
        if overflow > 0:
            del shapes[:overflow]
            logger.debug("Evicted %d oldest shapes", overflow)

        evolved = (evolve_shape(s, event.rhythm_factor, settings) for s in shapes)
        self._shapes = tuple(s for s in evolved if s.alive)

    def reset(self):
        """Remove every shape."""
        self._shapes = ()

    def snapshot(self) -> tuple[Shape, ...]:
        """Current shapes, oldest first. Immutable."""
        return self._shapes
