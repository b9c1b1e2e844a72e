"""
Paired display device hooks.

The registry is in-memory, so a device that was paired before a restart
registers itself again on init. Adding a device registers it; deleting it
unregisters it.
"""

from typing import Any, Dict, Optional

from sdk.logging import getLogger


class DisplayDevice:

    def __init__(self, app, data: Optional[Dict[str, Any]] = None, store: Optional[Dict[str, Any]] = None):
        self.app = app
        self.data = data or {}
        self.store = store or {}
        self.log = getLogger()

    @property
    def address(self) -> Optional[str]:
        return self.data.get('id') or self.store.get('ip')

    def _kioskServer(self):
        kioskServer = getattr(self.app, 'kioskServer', None)
        if kioskServer is None:
            self.log.error("[Device] KioskServer not found in app")
        return kioskServer

    def onInit(self) -> bool:
        """Restore registration after an app restart"""
        if not self.address:
            return False
        kioskServer = self._kioskServer()
        if kioskServer is None:
            return False
        success = kioskServer.registry.register(self.address)
        self.log.info("[Device] Device restored", address=self.address, registered=success)
        return success

    def onAdded(self) -> bool:
        """Called right after pairing"""
        kioskServer = self._kioskServer()
        if kioskServer is None:
            return False

        success = kioskServer.registry.register(self.address)
        if success:
            self.log.info(f"[Device] Device {self.address} successfully registered")
        else:
            self.log.error(f"[Device] Failed to register device {self.address}")
        return success

    def onDeleted(self):
        if not self.address:
            return
        kioskServer = self._kioskServer()
        if kioskServer is None:
            return
        kioskServer.registry.unregister(self.address)
        self.log.info(f"[Device] Device {self.address} unregistered from server")
