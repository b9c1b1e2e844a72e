"""
Bridge events published to the flow engine.

Exactly two event kinds with fixed payloads:
    scene(name: str, active: bool)
    light(intensity: float)

Subscribers may be plain callables or coroutine functions. A subscriber that
raises is logged and skipped; it never affects other subscribers or the
WebSocket connection that produced the event.
"""

import inspect
from typing import Awaitable, Callable, List, Union

from sdk.logging import getLogger

SceneListener = Callable[[str, bool], Union[None, Awaitable[None]]]
LightListener = Callable[[float], Union[None, Awaitable[None]]]


class BridgeEvents:
    """Typed publish/subscribe surface for scene and light events"""

    def __init__(self):
        self.log = getLogger()
        self._sceneListeners: List[SceneListener] = []
        self._lightListeners: List[LightListener] = []

    def onScene(self, listener: SceneListener) -> Callable[[], None]:
        """Subscribe to scene events. Returns an unsubscribe function."""
        self._sceneListeners.append(listener)
        return lambda: self._discard(self._sceneListeners, listener)

    def onLight(self, listener: LightListener) -> Callable[[], None]:
        """Subscribe to light events. Returns an unsubscribe function."""
        self._lightListeners.append(listener)
        return lambda: self._discard(self._lightListeners, listener)

    async def emitScene(self, name: str, active: bool):
        self.log.info("[Events] scene", scene=name, active=active)
        for listener in list(self._sceneListeners):
            await self._call(listener, name, active)

    async def emitLight(self, intensity: float):
        self.log.info("[Events] light", intensity=intensity)
        for listener in list(self._lightListeners):
            await self._call(listener, intensity)

    async def _call(self, listener, *args):
        try:
            result = listener(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self.log.error(f"[Events] Listener {getattr(listener, '__name__', listener)} failed: {e}",
                           exc_info=True)

    @staticmethod
    def _discard(listeners: list, listener):
        if listener in listeners:
            listeners.remove(listener)
