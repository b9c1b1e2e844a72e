"""
Kiosk bridge - local gateway between a wall-mounted touch display and a
home-automation flow engine.

The display believes it is talking to its usual hub: the gateway answers the
hub's onboarding handshake, serves the kiosk UI, and relays scene/light
interactions over a WebSocket in both directions.
"""

__version__ = "1.0.0"
