"""
App lifecycle, pairing driver and device hook tests.
"""

import socket

import pytest
import pytest_asyncio

from kiosk.app import KioskApp
from kiosk.drivers import DisplayDevice, DisplayDriver


@pytest_asyncio.fixture
async def app(port, publicDir):
    kioskApp = KioskApp({'host': '127.0.0.1', 'port': port, 'publicDir': str(publicDir)})
    assert await kioskApp.onInit() is True
    yield kioskApp
    await kioskApp.onUninit()


class NoServerApp:
    kioskServer = None


class TestKioskApp:

    @pytest.mark.asyncio
    async def test_init_starts_server(self, app):
        assert app.kioskServer.isRunning()

    @pytest.mark.asyncio
    async def test_uninit_stops_server(self, app):
        await app.onUninit()
        assert not app.kioskServer.isRunning()

    @pytest.mark.asyncio
    async def test_bind_failure_is_not_fatal(self, port, publicDir):
        blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        blocker.bind(('127.0.0.1', port))
        blocker.listen()
        try:
            kioskApp = KioskApp({'host': '127.0.0.1', 'port': port, 'publicDir': str(publicDir)})
            assert await kioskApp.onInit() is False
            assert kioskApp.kioskServer is not None
            assert not kioskApp.kioskServer.isRunning()
            await kioskApp.onUninit()
        finally:
            blocker.close()

    @pytest.mark.asyncio
    async def test_missing_assets_is_not_fatal(self, port, tmp_path):
        kioskApp = KioskApp({'host': '127.0.0.1', 'port': port, 'publicDir': str(tmp_path / 'nothing')})
        assert await kioskApp.onInit() is False
        assert not kioskApp.kioskServer.isRunning()


class TestDisplayDriver:

    @pytest.mark.asyncio
    async def test_pair_list_from_pending(self, app):
        app.kioskServer.registry.observe('192.168.1.31')
        app.kioskServer.registry.observe('192.168.1.30')
        app.kioskServer.registry.register('192.168.1.31')

        devices = DisplayDriver(app).onPairListDevices()

        assert len(devices) == 1
        device = devices[0]
        assert device['name'] == '192.168.1.30 - Shelly Wall Display'
        assert device['data'] == {'id': '192.168.1.30'}
        assert device['store']['ip'] == '192.168.1.30'
        assert 'registeredAt' in device['store']

    def test_pair_list_sorted(self):
        from kiosk.server.server import KioskServer

        class StubApp:
            kioskServer = KioskServer()

        for address in ['10.0.0.3', '10.0.0.1', '10.0.0.2']:
            StubApp.kioskServer.registry.observe(address)
        names = [d['data']['id'] for d in DisplayDriver(StubApp()).onPairListDevices()]
        assert names == ['10.0.0.1', '10.0.0.2', '10.0.0.3']

    def test_no_server(self):
        assert DisplayDriver(NoServerApp()).onPairListDevices() == []


class TestDisplayDevice:

    @pytest.mark.asyncio
    async def test_added_registers(self, app):
        registry = app.kioskServer.registry
        registry.observe('192.168.1.30')

        device = DisplayDevice(app, data={'id': '192.168.1.30'}, store={'ip': '192.168.1.30'})
        assert device.onAdded() is True
        assert registry.isRegistered('192.168.1.30')
        assert registry.listPending() == set()

    @pytest.mark.asyncio
    async def test_address_falls_back_to_store(self, app):
        device = DisplayDevice(app, data={}, store={'ip': '192.168.1.44'})
        assert device.address == '192.168.1.44'
        assert device.onInit() is True
        assert app.kioskServer.registry.isRegistered('192.168.1.44')

    @pytest.mark.asyncio
    async def test_added_without_address_fails(self, app):
        assert DisplayDevice(app).onAdded() is False

    @pytest.mark.asyncio
    async def test_deleted_unregisters(self, app):
        device = DisplayDevice(app, data={'id': '192.168.1.30'})
        device.onAdded()
        device.onDeleted()
        assert not app.kioskServer.registry.isRegistered('192.168.1.30')
        assert app.kioskServer.registry.listPending() == set()

    def test_hooks_without_server(self):
        device = DisplayDevice(NoServerApp(), data={'id': '192.168.1.30'})
        assert device.onInit() is False
        assert device.onAdded() is False
        device.onDeleted()
