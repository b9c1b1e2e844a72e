"""
Kiosk Event Bridge - WebSocket channel between displays and the flow engine.

Per-connection lifecycle: Connecting -> Open -> Closed.
- On upgrade the client immediately gets a 'connected' scene-complete frame
- Inbound scene/light frames become bridge events (see kiosk.core.events)
- Malformed frames are logged and dropped; the connection stays open
- Confirmations from the flow engine are broadcast to every open client
- Any close (client, transport error, shutdown) removes the connection;
  nothing is ever sent to it again

Property of Uncompromising Sensors LLC.
"""

import uuid
import orjson
from enum import Enum
from typing import Any, Dict, Union
from aiohttp import web, WSMsgType, WSCloseCode

from kiosk.core.errors import ProtocolParseError
from kiosk.core.events import BridgeEvents
from kiosk.core.levels import encodeIntensity
from kiosk.core.messages import (
    CONNECTED_FRAME, SceneMessage, LightMessage,
    parseMessage, normalizeActive, sceneComplete, lightComplete
)
from sdk.logging import getLogger


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class ClientConnection:
    """
    One live display WebSocket session.

    Exists only while the socket is open. Sends on a connection that is not
    open are no-ops; a failed write marks it closed.
    """

    def __init__(self, connId: str, ws: web.WebSocketResponse, remote: str = None):
        self.connId = connId
        self.ws = ws
        self.remote = remote
        self._state = ConnectionState.OPEN
        self.log = getLogger()

    @property
    def state(self) -> ConnectionState:
        if self._state is ConnectionState.OPEN and self.ws.closed:
            return ConnectionState.CLOSED
        return self._state

    @property
    def isOpen(self) -> bool:
        return self.state is ConnectionState.OPEN

    async def send(self, message: Dict[str, Any]) -> bool:
        """Send a JSON text frame. Returns False if nothing was sent."""
        if not self.isOpen:
            return False
        try:
            await self.ws.send_str(orjson.dumps(message).decode())
            return True
        except (ConnectionError, RuntimeError) as e:
            self.log.warning(f"[Bridge] Send failed, dropping connection: {e}", connId=self.connId)
            self._state = ConnectionState.CLOSED
            return False

    async def close(self, code: int = WSCloseCode.GOING_AWAY, message: bytes = b'Server shutdown'):
        if self._state is ConnectionState.CLOSED:
            return
        self._state = ConnectionState.CLOSING
        try:
            if not self.ws.closed:
                await self.ws.close(code=code, message=message)
        except (ConnectionError, RuntimeError) as e:
            self.log.debug(f"[Bridge] Error closing connection: {e}", connId=self.connId)
        finally:
            self._state = ConnectionState.CLOSED

    def markClosed(self):
        self._state = ConnectionState.CLOSED


class EventBridge:
    """
    Owns the live connection set and the display message protocol.

    Not accepting until open() is called by the gateway; close() stops
    accepting and force-closes every connection.
    """

    def __init__(self, events: BridgeEvents):
        self.events = events
        self.log = getLogger()

        # Active connections: connId -> ClientConnection (insertion ordered)
        self.connections: Dict[str, ClientConnection] = {}
        self.accepting = False

    @staticmethod
    def isUpgrade(request: web.Request) -> bool:
        return request.headers.get('Upgrade', '').lower() == 'websocket'

    def open(self):
        self.accepting = True

    async def close(self):
        """Stop accepting upgrades, close every connection, clear the live set"""
        self.accepting = False
        connections = list(self.connections.values())
        self.connections.clear()
        for conn in connections:
            await conn.close()
        if connections:
            self.log.info(f"[Bridge] Closed {len(connections)} connection(s)")

    # =========================================================================
    # Inbound
    # =========================================================================

    async def handleWebSocket(self, request: web.Request) -> web.WebSocketResponse:
        if not self.accepting:
            raise web.HTTPServiceUnavailable(text="Bridge is not running")

        ws = web.WebSocketResponse()
        await ws.prepare(request)

        connId = str(uuid.uuid4())
        conn = ClientConnection(connId, ws, request.remote)
        self.connections[connId] = conn
        self.log.info("[Bridge] Client connected", connId=connId, remote=request.remote)

        await conn.send(CONNECTED_FRAME)

        try:
            async for msg in ws:
                if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                    await self.handleFrame(conn, msg.data)
                elif msg.type == WSMsgType.ERROR:
                    self.log.error(f"[Bridge] WebSocket error: {ws.exception()}", connId=connId)
                    break
        except Exception as e:
            self.log.error(f"[Bridge] Connection error: {e}", connId=connId, exc_info=True)
        finally:
            self.connections.pop(connId, None)
            conn.markClosed()
            self.log.info("[Bridge] Client disconnected", connId=connId)

        return ws

    async def handleFrame(self, conn: ClientConnection, data: Union[str, bytes]):
        """Parse one frame and raise the matching bridge event. Bad frames are dropped."""
        try:
            message = parseMessage(data)
        except ProtocolParseError as e:
            self.log.warning(f"[Bridge] Dropped frame: {e}", connId=conn.connId)
            return

        if isinstance(message, SceneMessage):
            await self.events.emitScene(message.name, message.active)
        elif isinstance(message, LightMessage):
            await self.events.emitLight(message.intensity)

    # =========================================================================
    # Outbound
    # =========================================================================

    async def broadcast(self, message: Dict[str, Any]) -> int:
        """Send to every open connection in live-set order. Returns clients reached."""
        sent = 0
        for conn in list(self.connections.values()):
            if await conn.send(message):
                sent += 1
            elif not conn.isOpen:
                self.connections.pop(conn.connId, None)
        return sent

    async def sceneComplete(self, name: str, active: Union[bool, str]) -> int:
        """Confirm a scene to all displays. 'active' may be a bool or "true"/"false"."""
        try:
            isActive = normalizeActive(active)
        except ValueError as e:
            self.log.warning(f"[Bridge] Scene complete ignored: {e}", scene=name)
            return 0
        self.log.info("[Bridge] Scene complete", scene=name, active=active, normalized=isActive)
        return await self.broadcast(sceneComplete(name, isActive))

    async def lightLevelComplete(self, intensity: float) -> int:
        """Confirm a light intensity to all displays as the nearest discrete level"""
        level = encodeIntensity(intensity)
        self.log.info("[Bridge] Light level complete", intensity=intensity, discreteLevel=level)
        return await self.broadcast(lightComplete(level))
