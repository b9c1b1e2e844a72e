"""
Minimal hub identity endpoints.

The display's onboarding wizard queries the auth provider list and runs one
login flow before it accepts a hub. These handlers answer that handshake
with fixed payloads: one passwordless local provider, a username/password
form, and an unconditional "finish". No credentials are checked and nothing
is stored between calls.

Property of Uncompromising Sensors LLC.
"""

import secrets
import string
from aiohttp import web

from sdk.logging import getLogger

HANDLER_NAME = 'homeassistant'
FLOW_ID_PREFIX = 'dummy-'
FLOW_ID_LENGTH = 8
_FLOW_ID_ALPHABET = string.ascii_lowercase + string.digits

PROVIDERS = [{'name': 'Local', 'id': None, 'type': HANDLER_NAME}]


def newFlowId() -> str:
    """Opaque login flow id, e.g. 'dummy-k3x9a0qz'"""
    suffix = ''.join(secrets.choice(_FLOW_ID_ALPHABET) for _ in range(FLOW_ID_LENGTH))
    return FLOW_ID_PREFIX + suffix


class AuthShim:
    """Route handlers for /auth/providers and /auth/login_flow"""

    def __init__(self):
        self.log = getLogger()

    def setupRoutes(self, app: web.Application):
        app.router.add_get('/auth/providers', self.handleProviders, allow_head=False)
        app.router.add_head('/auth/providers', self.handleHead)
        app.router.add_post('/auth/login_flow', self.handleLoginFlow)
        app.router.add_head('/auth/login_flow', self.handleHead)
        app.router.add_post('/auth/login_flow/{flowId}', self.handleLoginFlowStep)

    async def handleProviders(self, request: web.Request) -> web.Response:
        return web.json_response(PROVIDERS)

    async def handleHead(self, request: web.Request) -> web.Response:
        return web.Response(status=200)

    async def handleLoginFlow(self, request: web.Request) -> web.Response:
        """Start a login flow: hand out a fresh flow id and a username/password form"""
        flowId = newFlowId()
        self.log.info("[Auth] Login flow started", flowId=flowId, remote=request.remote)
        return web.json_response({
            'type': 'form',
            'flow_id': flowId,
            'handler': [HANDLER_NAME, None],
            'step_id': 'init',
            'data_schema': [
                {'name': 'username', 'type': 'string'},
                {'name': 'password', 'type': 'string'},
            ],
            'description_placeholders': None,
        })

    async def handleLoginFlowStep(self, request: web.Request) -> web.Response:
        """Any submitted step finishes the flow"""
        flowId = request.match_info['flowId']
        self.log.info("[Auth] Login flow finished", flowId=flowId, remote=request.remote)
        return web.json_response({
            'type': 'create_entry',
            'flow_id': flowId,
            'result': {'type': 'finish'},
        })
