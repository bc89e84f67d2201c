"""Pytest configuration and shared fixtures."""

import random

import pygame
import pytest

from chromapulse.core.registry import ShapeRegistry
from chromapulse.core.settings import CanvasGeometry, VisualizerSettings
from chromapulse.io.decoder import FeatureEvent


class FakeHandle:
    """Stand-in for asyncio.TimerHandle."""

    def __init__(self, scheduler, delay, callback):
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """
    Records call_later requests so tests decide when timers fire.
    """

    def __init__(self):
        self.handles: list[FakeHandle] = []

    def call_later(self, delay, callback):
        handle = FakeHandle(self, delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire(self):
        """Run every pending callback once, oldest first."""
        due = self.pending
        for handle in due:
            self.handles.remove(handle)
        for handle in due:
            handle.callback()
        return len(due)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def settings() -> VisualizerSettings:
    """Default settings (rhythm 0.05, decay 0.98, max 50)."""
    return VisualizerSettings()


@pytest.fixture
def geometry() -> CanvasGeometry:
    return CanvasGeometry(width=800.0, height=600.0)


@pytest.fixture
def registry() -> ShapeRegistry:
    """Registry with a fixed random seed."""
    return ShapeRegistry(random.Random(1234))


@pytest.fixture
def kick() -> FeatureEvent:
    return FeatureEvent(is_drum_kick=True, rhythm_factor=0.0)


@pytest.fixture
def tick() -> FeatureEvent:
    return FeatureEvent(is_drum_kick=False, rhythm_factor=0.0)


@pytest.fixture
def surface() -> pygame.Surface:
    """Off-screen drawing surface; no display needed."""
    return pygame.Surface((200, 150))
