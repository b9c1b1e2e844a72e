"""
WebSocket message protocol between the display and the bridge.

Inbound (display -> bridge):
    {"type": "scene", "data": {"name": "movie-night", "active": true}}
    {"type": "light", "data": {"level": 2}}

Outbound (bridge -> display):
    {"type": "scene-complete", "data": {"name": "movie-night", "active": true}}
    {"type": "light-complete", "data": {"level": 2}}

Inbound frames are parsed into a tagged union (SceneMessage | LightMessage).
Anything that does not match a known tag with all required fields raises
ProtocolParseError; the bridge drops such frames.

Property of Uncompromising Sensors LLC.
"""

import orjson
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .errors import ProtocolParseError
from .levels import decodeLevel


class MessageType(str, Enum):
    """Inbound message types (display -> bridge)"""
    SCENE = "scene"
    LIGHT = "light"


class ResponseType(str, Enum):
    """Outbound confirmation types (bridge -> display)"""
    SCENE_COMPLETE = "scene-complete"
    LIGHT_COMPLETE = "light-complete"


def normalizeActive(value: Any) -> bool:
    """
    Coerce a scene 'active' flag to bool.

    Accepts a real bool or the strings "true"/"false" (case-insensitive).
    Everything else is rejected so that "" or "false" never read as truthy.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == 'true':
            return True
        if text == 'false':
            return False
    raise ValueError(f"Invalid active flag: {value!r}")


@dataclass(frozen=True)
class SceneMessage:
    """Scene toggled on the display"""
    name: str
    active: bool

    type = MessageType.SCENE


@dataclass(frozen=True)
class LightMessage:
    """Light dial moved on the display"""
    level: Any  # raw client value, decoded fail-soft

    type = MessageType.LIGHT

    @property
    def intensity(self) -> float:
        return decodeLevel(self.level)


InboundMessage = Union[SceneMessage, LightMessage]


def parseMessage(raw: Union[str, bytes]) -> InboundMessage:
    """Parse one WebSocket frame. Raises ProtocolParseError on any mismatch."""
    try:
        message = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ProtocolParseError(f"Invalid JSON: {e}") from e

    if not isinstance(message, dict):
        raise ProtocolParseError("Message is not an object")

    msgType = message.get('type')
    data = message.get('data')
    if not isinstance(data, dict):
        raise ProtocolParseError(f"Message '{msgType}' has no data object")

    if msgType == MessageType.SCENE.value:
        name = data.get('name')
        if name is None or 'active' not in data:
            raise ProtocolParseError("Scene message requires name and active")
        try:
            active = normalizeActive(data['active'])
        except ValueError as e:
            raise ProtocolParseError(str(e)) from e
        return SceneMessage(name=str(name), active=active)

    if msgType == MessageType.LIGHT.value:
        # 'strength' is what older kiosk bundles send
        level = data.get('level', data.get('strength'))
        if level is None:
            raise ProtocolParseError("Light message requires level")
        return LightMessage(level=level)

    raise ProtocolParseError(f"Unknown message type: {msgType}")


def sceneComplete(name: str, active: bool) -> Dict[str, Any]:
    """Outbound scene confirmation frame"""
    return {'type': ResponseType.SCENE_COMPLETE.value, 'data': {'name': name, 'active': active}}


def lightComplete(level: int) -> Dict[str, Any]:
    """Outbound light confirmation frame"""
    return {'type': ResponseType.LIGHT_COMPLETE.value, 'data': {'level': level}}


# Sent once to every client right after the upgrade
CONNECTED_FRAME = sceneComplete('connected', True)
