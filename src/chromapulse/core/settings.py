"""
Live visualizer settings and canvas geometry.

A single VisualizerSettings instance is shared by the UI layer and the
shape registry. The registry reads it on every event, so a change made
between two events is applied by the very next one.
"""

from dataclasses import dataclass, fields
from typing import Any


# (min, max, slider step) for each tunable value
SETTING_RANGES: dict[str, tuple[float, float, float]] = {
    "rhythm_factor": (0.005, 0.2, 0.005),
    "decay_rate": (0.9, 0.999, 0.001),
    "max_shapes": (10, 200, 10),
}


@dataclass
class CanvasGeometry:
    """Drawing surface dimensions, used as bounds for new shapes."""

    width: float = 800.0
    height: float = 600.0


@dataclass
class VisualizerSettings:
    """User-tunable simulation parameters."""

    rhythm_factor: float = 0.05  # Rhythm pulse: radius growth per unit of event rhythm
    decay_rate: float = 0.98  # Lifespan multiplier applied on every event
    max_shapes: int = 50  # Registry capacity

    def __post_init__(self):
        for f in fields(self):
            self._validate(f.name, getattr(self, f.name))
        self.max_shapes = int(self.max_shapes)

    @staticmethod
    def _validate(name: str, value: Any):
        if name not in SETTING_RANGES:
            raise ValueError(f"Unknown setting: {name}")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a number, got {value!r}")
        if name == "max_shapes" and int(value) != value:
            raise ValueError(f"max_shapes must be an integer, got {value!r}")

        low, high, _ = SETTING_RANGES[name]
        if not low <= value <= high:
            raise ValueError(f"{name}={value} outside [{low}, {high}]")

    def update(self, **changes: Any) -> "VisualizerSettings":
        """
        Apply one or more changes in place.

        All values are validated before any is written, so a rejected
        update leaves the settings untouched.

        Raises:
            ValueError: If a name is unknown or a value is out of range.
        """
        for name, value in changes.items():
            self._validate(name, value)
        for name, value in changes.items():
            setattr(self, name, int(value) if name == "max_shapes" else float(value))
        return self

    def nudge(self, name: str, steps: int = 1) -> float:
        """
        Move a setting by whole slider steps, clamped to its range.

        Returns:
            The new value.
        """
        if name not in SETTING_RANGES:
            raise ValueError(f"Unknown setting: {name}")
        low, high, step = SETTING_RANGES[name]
        value = getattr(self, name) + steps * step
        value = min(high, max(low, value))

        if name == "max_shapes":
            value = int(round(value))
        else:
            # Snap to the step grid to avoid float drift after many nudges
            value = round(value, 3)
        setattr(self, name, value)
        return value
