"""
Kiosk Core Package

Protocol-level pieces of the bridge with no I/O: level codec, WebSocket
message protocol, typed bridge events, device registry, error taxonomy.
"""

from .errors import KioskError, BindError, AssetError, ProtocolParseError, RegistrationError
from .levels import LightLevel, LIGHT_INTENSITIES, decodeLevel, encodeIntensity
from .events import BridgeEvents
from .registry import DeviceRegistry, PendingDevice, RegisteredDevice

__all__ = [
    'KioskError', 'BindError', 'AssetError', 'ProtocolParseError', 'RegistrationError',
    'LightLevel', 'LIGHT_INTENSITIES', 'decodeLevel', 'encodeIntensity',
    'BridgeEvents',
    'DeviceRegistry', 'PendingDevice', 'RegisteredDevice'
]
