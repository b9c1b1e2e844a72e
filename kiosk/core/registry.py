"""
Device registry for display pairing.

Two-phase workflow:
- observe(): an address that talked to the gateway becomes *pending*
- register(): the user pairs it, it becomes *registered*
- unregister(): the device was deleted; it only comes back as pending
  when it is observed again

An address is never pending and registered at the same time. State lives in
memory only; paired devices re-register themselves on startup.

Property of Uncompromising Sensors LLC.
"""

import threading
from dataclasses import dataclass
from typing import Set

from sdk.logging import getLogger
from .errors import RegistrationError


@dataclass(frozen=True)
class PendingDevice:
    """Display seen on the network, not yet paired"""
    address: str


@dataclass(frozen=True)
class RegisteredDevice:
    """Paired display"""
    address: str


def normalizeAddress(address) -> str:
    """
    Trim a device address. Addresses are opaque: case and format are kept as
    given, so 'Display.local' and 'display.local' are different devices.
    Raises RegistrationError for non-strings, empty values and embedded whitespace.
    """
    if not isinstance(address, str):
        raise RegistrationError(f"Address must be a string, got {type(address).__name__}")
    text = address.strip()
    if not text:
        raise RegistrationError("Address is empty")
    if any(ch.isspace() for ch in text):
        raise RegistrationError(f"Malformed address: {address!r}")
    return text


class DeviceRegistry:
    """Pending/registered display addresses. Mutations are serialized by a lock."""

    def __init__(self):
        self.log = getLogger()
        self._lock = threading.Lock()
        self._pending: Set[str] = set()
        self._registered: Set[str] = set()

    def observe(self, address: str):
        """Record address as pending unless it is already registered. Idempotent."""
        try:
            address = normalizeAddress(address)
        except RegistrationError as e:
            self.log.debug(f"[Registry] Ignoring observation: {e}")
            return

        with self._lock:
            if address in self._registered or address in self._pending:
                return
            self._pending.add(address)
        self.log.info("[Registry] New pending device", address=address)

    def listPending(self) -> Set[PendingDevice]:
        with self._lock:
            return {PendingDevice(address) for address in self._pending}

    def listRegistered(self) -> Set[RegisteredDevice]:
        with self._lock:
            return {RegisteredDevice(address) for address in self._registered}

    def isRegistered(self, address: str) -> bool:
        try:
            address = normalizeAddress(address)
        except RegistrationError:
            return False
        with self._lock:
            return address in self._registered

    def register(self, address: str) -> bool:
        """Promote address (pending or unseen) to registered. False if address is invalid."""
        try:
            address = normalizeAddress(address)
        except RegistrationError as e:
            self.log.warning(f"[Registry] Registration rejected: {e}")
            return False

        with self._lock:
            self._pending.discard(address)
            self._registered.add(address)
        self.log.info("[Registry] Device registered", address=address)
        return True

    def unregister(self, address: str):
        """Remove address from registered. Unknown addresses are a no-op."""
        try:
            address = normalizeAddress(address)
        except RegistrationError:
            return

        with self._lock:
            if address not in self._registered:
                return
            self._registered.discard(address)
        self.log.info("[Registry] Device unregistered", address=address)
