"""
Package init for kiosk.server
"""

from kiosk.server.server import KioskServer
from kiosk.server.bridge import EventBridge, ClientConnection
from kiosk.server.auth import AuthShim
from kiosk.server.spa import SpaServer

__all__ = ['KioskServer', 'EventBridge', 'ClientConnection', 'AuthShim', 'SpaServer']
