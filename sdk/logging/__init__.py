"""
SDK Logging - hierarchical structured logger.

API:
    from sdk.logging import getLogger

    class DeviceRegistry:
        def __init__(self):
            self.log = getLogger()  # Auto: 'kiosk.core.registry.DeviceRegistry'

        def register(self, address):
            self.log.info("[Registry] Registered", address=address)

    # Global configuration (optional, once at app startup)
    from sdk.logging import configureLogging
    configureLogging(logDir='./logs', level='DEBUG')
"""

from .logger import getLogger, configureLogging, StructuredFormatter, StructuredLogger

__all__ = [
    'getLogger',
    'configureLogging',
    'StructuredFormatter',
    'StructuredLogger'
]
