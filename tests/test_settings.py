"""Tests for live visualizer settings."""

import pytest

from chromapulse.core.settings import SETTING_RANGES, CanvasGeometry, VisualizerSettings


class TestVisualizerSettings:
    def test_defaults(self):
        settings = VisualizerSettings()
        assert settings.rhythm_factor == 0.05
        assert settings.decay_rate == 0.98
        assert settings.max_shapes == 50

    def test_range_limits_accepted(self):
        VisualizerSettings(rhythm_factor=0.005, decay_rate=0.9, max_shapes=10)
        VisualizerSettings(rhythm_factor=0.2, decay_rate=0.999, max_shapes=200)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rhythm_factor": 0.0},
            {"rhythm_factor": 0.5},
            {"decay_rate": 1.0},
            {"decay_rate": 0.5},
            {"max_shapes": 5},
            {"max_shapes": 500},
            {"max_shapes": 20.5},
            {"max_shapes": True},
            {"rhythm_factor": "0.1"},
        ],
    )
    def test_out_of_range_rejected(self, kwargs):
        with pytest.raises(ValueError):
            VisualizerSettings(**kwargs)

    def test_update_in_place(self):
        settings = VisualizerSettings()
        same = settings.update(decay_rate=0.95, max_shapes=120)
        assert same is settings
        assert settings.decay_rate == 0.95
        assert settings.max_shapes == 120

    def test_rejected_update_changes_nothing(self):
        settings = VisualizerSettings()
        with pytest.raises(ValueError):
            settings.update(decay_rate=0.95, max_shapes=1000)
        assert settings.decay_rate == 0.98
        assert settings.max_shapes == 50

    def test_update_unknown_setting(self):
        with pytest.raises(ValueError, match="Unknown setting"):
            VisualizerSettings().update(speed=2)

    def test_nudge_steps(self):
        settings = VisualizerSettings()
        assert settings.nudge("rhythm_factor", 1) == pytest.approx(0.055)
        assert settings.nudge("decay_rate", -2) == pytest.approx(0.978)
        assert settings.nudge("max_shapes", 3) == 80
        assert isinstance(settings.max_shapes, int)

    @pytest.mark.parametrize("name", sorted(SETTING_RANGES))
    def test_nudge_clamps(self, name):
        low, high, _ = SETTING_RANGES[name]
        settings = VisualizerSettings()
        assert settings.nudge(name, 1000) == pytest.approx(high)
        assert settings.nudge(name, -1000) == pytest.approx(low)


def test_canvas_geometry_defaults():
    geometry = CanvasGeometry()
    assert (geometry.width, geometry.height) == (800.0, 600.0)
