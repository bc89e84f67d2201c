"""Visualization modules for audio-reactive graphics."""

from chromapulse.visualizers.polygons import RenderConfig, RenderScheduler

__all__ = ["RenderConfig", "RenderScheduler"]
