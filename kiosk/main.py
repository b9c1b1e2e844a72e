"""
Kiosk bridge entry point.

Runs the gateway in the foreground until SIGINT/SIGTERM. Bridge events are
logged; a flow engine embedding the bridge subscribes through KioskApp.events
instead.

Usage:
    python -m kiosk [--config path/to/config.json] [--port 8123]

Property of Uncompromising Sensors LLC.
"""

import asyncio
import argparse
import signal
import sys

from kiosk.app import KioskApp
from kiosk.config import loadConfig
from sdk.logging import getLogger, configureLogging


async def runApp(config: dict) -> int:
    """Run until a stop signal arrives. Returns the process exit code."""
    log = getLogger()
    app = KioskApp(config)

    app.events.onScene(lambda name, active: log.info("[Main] Scene event", scene=name, active=active))
    app.events.onLight(lambda intensity: log.info("[Main] Light event", intensity=intensity))

    if not await app.onInit():
        return 1

    stopEvent = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stopEvent.set)
        except NotImplementedError:
            pass  # Windows: KeyboardInterrupt ends asyncio.run instead

    try:
        await stopEvent.wait()
        log.info("[Main] Shutdown signal received")
    finally:
        await app.onUninit()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Kiosk bridge - wall display gateway')
    parser.add_argument('--config', default=None, help='Path to JSON config file')
    parser.add_argument('--port', type=int, default=None, help='Listen port (overrides config)')
    args = parser.parse_args(argv)

    try:
        config = loadConfig(args.config, port=args.port)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    logConfig = config['logging']
    configureLogging(logDir=logConfig.get('logDir'), level=logConfig.get('level', 'INFO'),
                     utc=logConfig.get('utc', False))
    log = getLogger()
    log.info(f"[Main] Config: {args.config or 'defaults'}")

    try:
        return asyncio.run(runApp(config))
    except KeyboardInterrupt:
        log.info("[Main] Interrupted")
        return 0


if __name__ == '__main__':
    sys.exit(main())
