"""
Kiosk bridge error taxonomy.

- BindError and AssetError are raised from KioskServer.start()
- ProtocolParseError never leaves the event bridge (frames are dropped)
- RegistrationError never leaves the registry (register() returns False)
"""


class KioskError(Exception):
    """Base class for all kiosk bridge errors"""


class BindError(KioskError):
    """HTTP listener could not be bound (port in use, permission denied)"""

    def __init__(self, host: str, port: int, reason: str):
        super().__init__(f"Cannot bind {host}:{port}: {reason}")
        self.host = host
        self.port = port
        self.reason = reason


class AssetError(KioskError):
    """Kiosk asset bundle is unusable (entry document missing)"""


class ProtocolParseError(KioskError):
    """WebSocket frame is not valid JSON or does not match a known message shape"""


class RegistrationError(KioskError):
    """Device address is empty or malformed"""
