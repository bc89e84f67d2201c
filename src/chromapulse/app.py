"""
Live visualizer application.

Wires the feature stream, event decoder, shape registry and renderer
together on a single asyncio event loop, plus a thin pygame window with
keyboard controls.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Union

import pygame

from chromapulse.core.registry import ShapeRegistry
from chromapulse.core.settings import VisualizerSettings
from chromapulse.io.decoder import decode_event
from chromapulse.io.stream import DEFAULT_URL, FeatureStream
from chromapulse.visualizers.polygons import RenderConfig, RenderScheduler

logger = logging.getLogger(__name__)


# key -> (setting name, slider steps)
KEY_NUDGES: dict[int, tuple[str, int]] = {
    pygame.K_UP: ("rhythm_factor", 1),
    pygame.K_DOWN: ("rhythm_factor", -1),
    pygame.K_RIGHT: ("decay_rate", 1),
    pygame.K_LEFT: ("decay_rate", -1),
    pygame.K_RIGHTBRACKET: ("max_shapes", 1),
    pygame.K_LEFTBRACKET: ("max_shapes", -1),
}


@dataclass
class AppConfig:
    """Window and connection configuration for the live visualizer."""

    url: str = DEFAULT_URL
    width: int = 800
    height: int = 600
    fps: int = 60
    dark_mode: bool = True
    seed: int | None = None
    capture_dir: Path = field(default_factory=lambda: Path("."))
    input_poll_interval: float = 1.0 / 60  # seconds between window event polls


class Visualizer:
    """
    The running application.

    Messages are applied to the registry as they arrive; the renderer
    paints on its own frame clock. Both run as callbacks on one event
    loop, so no locking is needed.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        settings: VisualizerSettings | None = None,
        surface: pygame.Surface | None = None,
        present: Callable[[], None] | None = None,
        font: "pygame.font.Font | None" = None,
        connect: Callable[[str], Any] | None = None,
        request_frame: Callable[[float, Callable[[], None]], Any] | None = None,
    ):
        self.cfg = config or AppConfig()
        self.settings = settings or VisualizerSettings()
        self.registry = ShapeRegistry(random.Random(self.cfg.seed))

        if surface is None:
            surface = pygame.Surface((self.cfg.width, self.cfg.height))
        self.renderer = RenderScheduler(
            self.registry,
            surface,
            RenderConfig(fps=self.cfg.fps, dark_mode=self.cfg.dark_mode),
            request_frame=request_frame,
            present=present,
            font=font,
        )
        self.stream = FeatureStream(
            self.cfg.url,
            on_message=self.handle_message,
            on_status=self.handle_status,
            connect=connect,
        )
        self.renderer.status_text = self.stream.status

        self.running = False
        self.events_applied = 0
        self.events_dropped = 0

    def handle_message(self, payload: Union[str, bytes]):
        """Decode one message and apply it to the registry."""
        event = decode_event(payload)
        if event is None:
            self.events_dropped += 1
            return
        self.registry.apply_event(event, self.settings, self.renderer.geometry)
        self.events_applied += 1

    def handle_status(self, status: str):
        self.renderer.status_text = status
        if pygame.display.get_init():
            pygame.display.set_caption(f"Chromapulse - {status}")

    def capture(self) -> Path:
        name = f"chromapulse_{self.renderer.frame_count:06d}.png"
        return self.renderer.save_frame(self.cfg.capture_dir / name)

    def handle_key(self, key: int):
        if key == pygame.K_SPACE:
            playing = self.renderer.toggle()
            logger.info("Rendering %s", "resumed" if playing else "paused")
        elif key == pygame.K_r:
            self.registry.reset()
            logger.info("Shapes cleared")
        elif key == pygame.K_d:
            self.renderer.toggle_theme()
        elif key == pygame.K_c:
            if not self.stream.restart():
                logger.info("Reconnect ignored: connection is %s", self.stream.state.value)
        elif key == pygame.K_s:
            self.capture()
        elif key == pygame.K_ESCAPE:
            self.running = False
        elif key in KEY_NUDGES:
            name, steps = KEY_NUDGES[key]
            value = self.settings.nudge(name, steps)
            logger.info("%s = %s", name, value)

    def handle_window_event(self, event: pygame.event.Event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.VIDEORESIZE:
            self.renderer.resize(pygame.display.get_surface())
        elif event.type == pygame.KEYDOWN:
            self.handle_key(event.key)

    async def run(self):
        """Connect, render, and pump window events until asked to stop."""
        self.running = True
        self.stream.start()
        self.renderer.play()
        try:
            while self.running:
                for event in pygame.event.get():
                    self.handle_window_event(event)
                await asyncio.sleep(self.cfg.input_poll_interval)
        finally:
            self.renderer.pause()
            await self.stream.close()
            logger.info(
                "Stopped after %d events (%d dropped), %d shapes spawned",
                self.events_applied,
                self.events_dropped,
                self.registry.spawned_total,
            )


def launch(config: AppConfig, settings: VisualizerSettings):
    """Open the window and run the visualizer until it is closed."""
    pygame.init()
    try:
        screen = pygame.display.set_mode((config.width, config.height), pygame.RESIZABLE)
        pygame.display.set_caption("Chromapulse")
        font = pygame.font.SysFont(None, 24)
        app = Visualizer(
            config,
            settings,
            surface=screen,
            present=pygame.display.flip,
            font=font,
        )
        asyncio.run(app.run())
    finally:
        pygame.quit()
