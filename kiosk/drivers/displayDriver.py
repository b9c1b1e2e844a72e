"""
Display driver: pairing list for newly discovered displays.

Every pending address in the gateway's registry is offered as a pairable
device; the address doubles as the device id.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from sdk.logging import getLogger

DEVICE_LABEL = 'Shelly Wall Display'


class DisplayDriver:

    def __init__(self, app):
        self.app = app
        self.log = getLogger()

    def onPairListDevices(self) -> List[Dict[str, Any]]:
        """Devices offered in the pairing list, one per pending address"""
        kioskServer = getattr(self.app, 'kioskServer', None)
        if kioskServer is None:
            self.log.error("[Driver] KioskServer not found in app")
            return []

        pending = sorted(device.address for device in kioskServer.registry.listPending())
        self.log.info(f"[Driver] Found {len(pending)} pending device(s)")

        registeredAt = datetime.now(timezone.utc).isoformat()
        return [
            {
                'name': f"{address} - {DEVICE_LABEL}",
                'data': {'id': address},
                'store': {'ip': address, 'registeredAt': registeredAt}
            }
            for address in pending
        ]
