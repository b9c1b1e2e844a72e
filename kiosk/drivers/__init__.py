"""
Display driver and device hooks used by the pairing workflow.
"""

from kiosk.drivers.displayDriver import DisplayDriver
from kiosk.drivers.displayDevice import DisplayDevice

__all__ = ['DisplayDriver', 'DisplayDevice']
