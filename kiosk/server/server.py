"""
Kiosk Server - the gateway process the wall display talks to.

One aiohttp listener carries everything:
- /auth/*            minimal hub identity handshake (AuthShim)
- /api/health        liveness check with a request counter
- WebSocket upgrade  on any path (EventBridge)
- everything else    kiosk front-end with SPA fallback (SpaServer)

Architecture invariants:
- running iff the HTTP listener is bound
- WebSocket upgrades are accepted only while running
- every request is logged and its remote address observed by the registry
- the health counter lives for the process, not for one start/stop cycle

Property of Uncompromising Sensors LLC.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from aiohttp import web

from kiosk.core.errors import BindError
from kiosk.core.events import BridgeEvents
from kiosk.core.registry import DeviceRegistry
from kiosk.server.auth import AuthShim
from kiosk.server.bridge import EventBridge
from kiosk.server.spa import SpaServer
from sdk.logging import getLogger

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 8123
MAX_BODY_BYTES = 50 * 1024


def isoNow() -> str:
    """UTC timestamp with millisecond precision, e.g. '2024-05-01T12:00:00.000Z'"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class KioskServer:
    """
    Gateway lifecycle: start()/stop() bind and release the shared listener.

    Collaborators are injected: the flow engine subscribes on `events` and
    pushes confirmations through sceneComplete()/lightLevelComplete(); the
    pairing driver works on `registry`.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 events: Optional[BridgeEvents] = None,
                 registry: Optional[DeviceRegistry] = None):
        self.config = config or {}
        self.log = getLogger()

        self.host = self.config.get('host', DEFAULT_HOST)
        self.port = int(self.config.get('port', DEFAULT_PORT))

        self.events = events or BridgeEvents()
        self.registry = registry or DeviceRegistry()
        self.bridge = EventBridge(self.events)
        self.auth = AuthShim()
        self.spa = SpaServer(self.config.get('publicDir'))

        # Health counter: process lifetime
        self.pingCounter = 0

        self.app: Optional[web.Application] = None
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    def _buildApp(self) -> web.Application:
        """Fresh aiohttp app per start() so the gateway can be restarted"""
        app = web.Application(middlewares=[self._logRequests], client_max_size=MAX_BODY_BYTES)
        self.auth.setupRoutes(app)
        app.router.add_get('/api/health', self.handleHealth)
        # WebSocket upgrades and the SPA share the catch-all route
        app.router.add_get('/{tail:.*}', self.handleFallback)
        return app

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self):
        """Bind the listener and start accepting WebSocket upgrades"""
        if self.isRunning():
            return

        self.log.info("[Server] Starting...")
        self.spa.verify()

        app = self._buildApp()
        runner = web.AppRunner(app, access_log=None)
        await runner.setup()

        site = web.TCPSite(runner, self.host, self.port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            self.log.error(f"[Server] Bind failed on {self.host}:{self.port}: {e}")
            raise BindError(self.host, self.port, e.strerror or str(e)) from e

        self.app = app
        self._runner = runner
        self._site = site
        self.bridge.open()

        self.log.info(f"[Server] Kiosk server on http://{self.host}:{self.port}")

    async def stop(self):
        """Close all WebSocket clients, then release the listener. Idempotent."""
        if not self.isRunning():
            return

        self.log.info("[Server] Stopping...")
        await self.bridge.close()

        runner = self._runner
        self._site = None
        self._runner = None
        await runner.cleanup()

        self.log.info("[Server] Stopped")

    def isRunning(self) -> bool:
        return self._site is not None

    def getPort(self) -> int:
        return self.port

    def getApp(self) -> Optional[web.Application]:
        return self.app

    # =========================================================================
    # Flow engine facing
    # =========================================================================

    async def sceneComplete(self, name: str, active: Union[bool, str]) -> int:
        return await self.bridge.sceneComplete(name, active)

    async def lightLevelComplete(self, intensity: float) -> int:
        return await self.bridge.lightLevelComplete(intensity)

    # =========================================================================
    # HTTP Handlers
    # =========================================================================

    @web.middleware
    async def _logRequests(self, request: web.Request, handler):
        self.log.info(f"[Server] {isoNow()} {request.method} {request.path_qs}")
        self.registry.observe(request.remote)
        return await handler(request)

    async def handleHealth(self, request: web.Request) -> web.Response:
        """Health check with per-process request counter"""
        self.pingCounter += 1
        return web.json_response({
            'ok': True,
            'counter': self.pingCounter,
            'timestamp': isoNow()
        })

    async def handleFallback(self, request: web.Request) -> web.StreamResponse:
        if self.bridge.isUpgrade(request):
            return await self.bridge.handleWebSocket(request)
        return await self.spa.handle(request)
