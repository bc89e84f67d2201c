"""
Feature event decoding.

The analysis backend sends one JSON object per audio tick:

    {"is_drum_kick": true, "rhythm_factor": 0.73}

Unknown fields are ignored. Anything else (non-JSON, a non-object, a
missing or mistyped field) is a decode failure.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)


class FeatureDecodeError(ValueError):
    """Raised when an inbound message is not a valid feature event."""


@dataclass(frozen=True)
class FeatureEvent:
    """One audio-analysis tick."""

    is_drum_kick: bool
    rhythm_factor: float


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise FeatureDecodeError(f"missing field {key!r}")
    return data[key]


def parse_event(payload: Union[str, bytes]) -> FeatureEvent:
    """
    Strictly parse a raw message.

    Args:
        payload: Message text (bytes are decoded as UTF-8).

    Returns:
        The decoded FeatureEvent.

    Raises:
        FeatureDecodeError: If the payload is not a valid feature event.
    """
    try:
        data = json.loads(payload)
    # ValueError also covers integer literals past the int/str digit limit
    except (ValueError, TypeError, RecursionError) as e:
        raise FeatureDecodeError(f"not JSON: {e}") from e

    if not isinstance(data, dict):
        raise FeatureDecodeError(f"expected an object, got {type(data).__name__}")

    kick = _require(data, "is_drum_kick")
    if not isinstance(kick, bool):
        raise FeatureDecodeError(f"is_drum_kick must be a bool, got {kick!r}")

    rhythm = _require(data, "rhythm_factor")
    # bool is an int subclass; reject it explicitly
    if isinstance(rhythm, bool) or not isinstance(rhythm, (int, float)):
        raise FeatureDecodeError(f"rhythm_factor must be a number, got {rhythm!r}")
    try:
        rhythm = float(rhythm)
    except OverflowError as e:
        raise FeatureDecodeError("rhythm_factor is out of float range") from e
    if not math.isfinite(rhythm):
        raise FeatureDecodeError(f"rhythm_factor must be finite, got {rhythm!r}")

    return FeatureEvent(is_drum_kick=kick, rhythm_factor=rhythm)


def decode_event(payload: Union[str, bytes]) -> FeatureEvent | None:
    """
    Parse a raw message, logging and dropping anything malformed.

    Returns:
        The decoded FeatureEvent, or None if the message was dropped.
    """
    try:
        return parse_event(payload)
    except FeatureDecodeError as e:
        logger.warning("Dropping malformed feature message: %s", e)
        return None
