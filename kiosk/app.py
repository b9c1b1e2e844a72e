"""
Kiosk app lifecycle.

Owns the gateway for the lifetime of the host app. A gateway that cannot
start (port taken, asset bundle missing) is logged and left stopped; the
host app keeps running without the bridge.
"""

from typing import Any, Dict, Optional

from kiosk.core.errors import AssetError, BindError
from kiosk.core.events import BridgeEvents
from kiosk.server.server import KioskServer
from sdk.logging import getLogger


class KioskApp:
    """Host-side owner of the KioskServer; drivers and devices reach it through here"""

    def __init__(self, config: Optional[Dict[str, Any]] = None, events: Optional[BridgeEvents] = None):
        self.config = config or {}
        self.events = events or BridgeEvents()
        self.kioskServer: Optional[KioskServer] = None
        self.log = getLogger()

    async def onInit(self):
        """Create and start the gateway. Returns True if it is running."""
        self.kioskServer = KioskServer(self.config, events=self.events)
        try:
            await self.kioskServer.start()
        except (BindError, AssetError) as e:
            self.log.error(f"[App] Kiosk server not started: {e}")
            return False

        self.log.info("[App] Kiosk app initialized", port=self.kioskServer.getPort())
        return True

    async def onUninit(self):
        if self.kioskServer:
            await self.kioskServer.stop()
        self.log.info("[App] Kiosk app stopped")
