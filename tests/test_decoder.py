"""Tests for feature message decoding."""

import json
import logging

import pytest

from chromapulse.io.decoder import FeatureDecodeError, FeatureEvent, decode_event, parse_event


class TestParseEvent:
    def test_valid_message(self):
        event = parse_event('{"is_drum_kick": true, "rhythm_factor": 0.73}')
        assert event == FeatureEvent(is_drum_kick=True, rhythm_factor=0.73)

    def test_integer_rhythm_becomes_float(self):
        event = parse_event('{"is_drum_kick": false, "rhythm_factor": 1}')
        assert event.rhythm_factor == 1.0
        assert isinstance(event.rhythm_factor, float)

    def test_unknown_fields_ignored(self):
        payload = json.dumps({"is_drum_kick": True, "rhythm_factor": 0.2, "bpm": 128, "tag": "x"})
        assert parse_event(payload) == FeatureEvent(True, 0.2)

    def test_bytes_payload(self):
        assert parse_event(b'{"is_drum_kick": false, "rhythm_factor": 0.5}') == FeatureEvent(False, 0.5)

    @pytest.mark.parametrize(
        "payload",
        [
            '{"is_drum_kick": true, "rhythm_fac',  # truncated
            "not json at all",
            "",
            "[true, 0.5]",
            "42",
            '{"rhythm_factor": 0.5}',
            '{"is_drum_kick": true}',
            '{"is_drum_kick": "yes", "rhythm_factor": 0.5}',
            '{"is_drum_kick": 1, "rhythm_factor": 0.5}',
            '{"is_drum_kick": true, "rhythm_factor": "0.5"}',
            '{"is_drum_kick": true, "rhythm_factor": true}',
            '{"is_drum_kick": true, "rhythm_factor": null}',
            '{"is_drum_kick": true, "rhythm_factor": NaN}',
            '{"is_drum_kick": true, "rhythm_factor": Infinity}',
            b"\xff\xfe\x00",
        ],
    )
    def test_malformed_raises(self, payload):
        with pytest.raises(FeatureDecodeError):
            parse_event(payload)

    @pytest.mark.parametrize(
        "payload",
        [
            '{"is_drum_kick": true, "rhythm_factor": 1' + "0" * 400 + "}",
            '{"is_drum_kick": true, "rhythm_factor": -1' + "0" * 400 + "}",
            '{"is_drum_kick": true, "rhythm_factor": 1e400}',
            '{"is_drum_kick": true, "rhythm_factor": 1' + "0" * 5000 + "}",
        ],
    )
    def test_number_out_of_float_range(self, payload):
        with pytest.raises(FeatureDecodeError):
            parse_event(payload)

    def test_deeply_nested_payload(self):
        with pytest.raises(FeatureDecodeError):
            parse_event("[" * 200000)

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_event("{")


class TestDecodeEvent:
    def test_valid_passes_through(self):
        assert decode_event('{"is_drum_kick": true, "rhythm_factor": 0.1}') == FeatureEvent(True, 0.1)

    def test_malformed_returns_none(self):
        assert decode_event('{"is_drum_kick": tr') is None

    def test_malformed_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="chromapulse.io.decoder"):
            decode_event("garbage")
        assert "Dropping malformed feature message" in caplog.text

    @pytest.mark.parametrize(
        "payload",
        ['{"is_drum_kick": true, "rhythm_factor": 1' + "0" * 400 + "}", "[" * 200000],
    )
    def test_pathological_payload_dropped(self, payload):
        assert decode_event(payload) is None
