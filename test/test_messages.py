"""
WebSocket message protocol tests: inbound parsing and outbound frames.
"""

import orjson
import pytest

from kiosk.core.errors import ProtocolParseError
from kiosk.core.messages import (
    CONNECTED_FRAME, LightMessage, SceneMessage,
    lightComplete, normalizeActive, parseMessage, sceneComplete
)


def frame(obj) -> str:
    return orjson.dumps(obj).decode()


class TestParseScene:

    def test_scene_message(self):
        message = parseMessage(frame({'type': 'scene', 'data': {'name': 'movie-night', 'active': True}}))
        assert message == SceneMessage(name='movie-night', active=True)

    def test_scene_from_binary_frame(self):
        message = parseMessage(orjson.dumps({'type': 'scene', 'data': {'name': 'dinner', 'active': False}}))
        assert message == SceneMessage(name='dinner', active=False)

    def test_scene_active_string_normalized(self):
        message = parseMessage(frame({'type': 'scene', 'data': {'name': 'x', 'active': 'false'}}))
        assert message.active is False

    @pytest.mark.parametrize("data", [
        {'name': 'movie-night'},
        {'active': True},
        {'name': None, 'active': True},
        {'name': 'x', 'active': 'yes'},
        {'name': 'x', 'active': 1},
    ])
    def test_scene_missing_or_bad_fields(self, data):
        with pytest.raises(ProtocolParseError):
            parseMessage(frame({'type': 'scene', 'data': data}))


class TestParseLight:

    def test_light_message(self):
        message = parseMessage(frame({'type': 'light', 'data': {'level': 2}}))
        assert isinstance(message, LightMessage)
        assert message.intensity == 0.5

    def test_light_strength_alias(self):
        message = parseMessage(frame({'type': 'light', 'data': {'strength': 1}}))
        assert message.intensity == 0.05

    def test_light_out_of_range_is_off(self):
        assert parseMessage(frame({'type': 'light', 'data': {'level': 7}})).intensity == 0.0

    def test_light_integral_float_level(self):
        assert parseMessage(b'{"type": "light", "data": {"level": 2.0}}').intensity == 0.5

    def test_light_missing_level(self):
        with pytest.raises(ProtocolParseError):
            parseMessage(frame({'type': 'light', 'data': {}}))


class TestParseRejects:

    @pytest.mark.parametrize("raw", [
        'not json',
        '',
        '[1, 2, 3]',
        '"scene"',
        frame({'type': 'dance', 'data': {}}),
        frame({'type': 'scene'}),
        frame({'type': 'light', 'data': [2]}),
        frame({'data': {'level': 2}}),
    ])
    def test_malformed(self, raw):
        with pytest.raises(ProtocolParseError):
            parseMessage(raw)


class TestOutbound:

    def test_scene_complete_frame(self):
        assert sceneComplete('movie-night', True) == {
            'type': 'scene-complete', 'data': {'name': 'movie-night', 'active': True}
        }

    def test_light_complete_frame(self):
        assert lightComplete(3) == {'type': 'light-complete', 'data': {'level': 3}}

    def test_connected_frame(self):
        assert CONNECTED_FRAME == {'type': 'scene-complete', 'data': {'name': 'connected', 'active': True}}


class TestNormalizeActive:

    @pytest.mark.parametrize("value,expected", [
        (True, True), (False, False), ('true', True), ('false', False), ('TRUE', True), (' False ', False)
    ])
    def test_accepted(self, value, expected):
        assert normalizeActive(value) is expected

    @pytest.mark.parametrize("value", ['', 'yes', '1', 0, 1, None])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            normalizeActive(value)
