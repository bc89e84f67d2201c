"""
CLI entry point for the live visualizer.

Usage:
    chromapulse [--url ws://localhost:8766] [options]
"""

import argparse
import logging
import os
from pathlib import Path

from chromapulse.app import AppConfig, launch
from chromapulse.core.settings import VisualizerSettings
from chromapulse.io.stream import DEFAULT_URL

URL_ENV_VAR = "CHROMAPULSE_WS_URL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chromapulse",
        description="Live audio-reactive polygon visualizer fed by a WebSocket feature stream",
    )

    parser.add_argument(
        "--url", type=str, default=None,
        help=f"Feature stream WebSocket URL (default: ${URL_ENV_VAR} or {DEFAULT_URL})",
    )

    # Window
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument("-f", "--fps", type=int, default=60, help="Frames per second (default: 60)")
    parser.add_argument("--light", action="store_true", help="Start in light mode")

    # Simulation
    parser.add_argument(
        "--rhythm-factor", type=float, default=0.05,
        help="Radius growth per unit of rhythm [0.005-0.2] (default: 0.05)",
    )
    parser.add_argument(
        "--decay-rate", type=float, default=0.98,
        help="Lifespan multiplier per event [0.9-0.999] (default: 0.98)",
    )
    parser.add_argument(
        "--max-shapes", type=int, default=50,
        help="Maximum shapes on screen [10-200] (default: 50)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducible shape placement",
    )

    # Output
    parser.add_argument(
        "--capture-dir", type=Path, default=Path("."),
        help="Directory for frames saved with the S key (default: .)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    return parser


def parse_args(argv: list[str] | None = None) -> tuple[AppConfig, VisualizerSettings, argparse.Namespace]:
    """
    Parse command-line arguments into application config and settings.

    Invalid values are reported through argparse (exit status 2).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")
    if args.fps <= 0:
        parser.error("--fps must be positive")

    try:
        settings = VisualizerSettings(
            rhythm_factor=args.rhythm_factor,
            decay_rate=args.decay_rate,
            max_shapes=args.max_shapes,
        )
    except ValueError as e:
        parser.error(str(e))

    config = AppConfig(
        url=args.url or os.environ.get(URL_ENV_VAR) or DEFAULT_URL,
        width=args.width,
        height=args.height,
        fps=args.fps,
        dark_mode=not args.light,
        seed=args.seed,
        capture_dir=args.capture_dir,
    )
    return config, settings, args


def main(argv: list[str] | None = None):
    config, settings, args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Starting visualizer %dx%d @ %dfps, stream %s",
        config.width, config.height, config.fps, config.url,
    )
    launch(config, settings)


if __name__ == "__main__":
    main()
