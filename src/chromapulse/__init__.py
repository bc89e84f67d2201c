"""Live audio-reactive polygon visualizer."""

from chromapulse.core.registry import ShapeRegistry
from chromapulse.core.settings import CanvasGeometry, VisualizerSettings
from chromapulse.core.shapes import Shape
from chromapulse.io.decoder import FeatureEvent, decode_event
from chromapulse.io.stream import ConnectionState, ConnectionStateMachine, FeatureStream
from chromapulse.visualizers.polygons import RenderConfig, RenderScheduler

__version__ = "0.1.0"
__all__ = [
    "CanvasGeometry",
    "ConnectionState",
    "ConnectionStateMachine",
    "FeatureEvent",
    "FeatureStream",
    "RenderConfig",
    "RenderScheduler",
    "Shape",
    "ShapeRegistry",
    "VisualizerSettings",
    "decode_event",
]
