"""Shape model, registry and live settings."""

from chromapulse.core.registry import ShapeRegistry
from chromapulse.core.settings import CanvasGeometry, VisualizerSettings
from chromapulse.core.shapes import Shape

__all__ = ["CanvasGeometry", "Shape", "ShapeRegistry", "VisualizerSettings"]
