"""Feature stream transport and message decoding."""

from chromapulse.io.decoder import FeatureDecodeError, FeatureEvent, decode_event, parse_event
from chromapulse.io.stream import ConnectionState, ConnectionStateMachine, FeatureStream

__all__ = [
    "ConnectionState",
    "ConnectionStateMachine",
    "FeatureDecodeError",
    "FeatureEvent",
    "FeatureStream",
    "decode_event",
    "parse_event",
]
