"""
Device registry tests: pending vs. registered pairing state.
"""

import threading

import pytest

from kiosk.core.registry import DeviceRegistry, PendingDevice, RegisteredDevice


@pytest.fixture
def registry():
    return DeviceRegistry()


class TestObserve:

    def test_observe_makes_pending(self, registry):
        registry.observe('192.168.1.20')
        assert registry.listPending() == {PendingDevice('192.168.1.20')}

    def test_observe_idempotent(self, registry):
        registry.observe('192.168.1.20')
        registry.observe('192.168.1.20')
        assert len(registry.listPending()) == 1

    def test_observe_registered_stays_registered(self, registry):
        registry.register('192.168.1.20')
        registry.observe('192.168.1.20')
        assert registry.listPending() == set()
        assert registry.isRegistered('192.168.1.20')

    @pytest.mark.parametrize("address", [None, '', '   ', 'not an address'])
    def test_observe_ignores_invalid(self, registry, address):
        registry.observe(address)
        assert registry.listPending() == set()


class TestRegister:

    def test_register_moves_out_of_pending(self, registry):
        registry.observe('10.0.0.5')
        assert registry.register('10.0.0.5') is True
        assert registry.listPending() == set()
        assert registry.listRegistered() == {RegisteredDevice('10.0.0.5')}

    def test_register_unseen_address(self, registry):
        assert registry.register('display.local') is True
        assert registry.isRegistered('display.local')

    def test_register_twice(self, registry):
        assert registry.register('10.0.0.5') is True
        assert registry.register('10.0.0.5') is True
        assert registry.listRegistered() == {RegisteredDevice('10.0.0.5')}

    @pytest.mark.parametrize("address", [None, '', '  ', 'two words', 42])
    def test_register_invalid(self, registry, address):
        assert registry.register(address) is False
        assert registry.listRegistered() == set()

    def test_addresses_are_normalized(self, registry):
        registry.observe(' 10.0.0.5 ')
        registry.register('10.0.0.5')
        assert registry.listPending() == set()

    @pytest.mark.parametrize("address", ['Display.local', 'FE80::1', 'display_1', '::ffff:10.0.0.5'])
    def test_addresses_kept_as_given(self, registry, address):
        registry.observe(address)
        assert registry.listPending() == {PendingDevice(address)}
        assert registry.register(address) is True
        assert registry.listRegistered() == {RegisteredDevice(address)}
        assert registry.isRegistered(address)

    def test_case_is_significant(self, registry):
        registry.register('Display.local')
        assert not registry.isRegistered('display.local')
        registry.unregister('display.local')
        assert registry.isRegistered('Display.local')


class TestUnregister:

    def test_unregister_unknown_is_noop(self, registry):
        registry.unregister('10.0.0.9')
        registry.unregister('')
        assert registry.listRegistered() == set()

    def test_unregister_does_not_restore_pending(self, registry):
        registry.observe('10.0.0.5')
        registry.register('10.0.0.5')
        registry.unregister('10.0.0.5')
        assert registry.listRegistered() == set()
        assert registry.listPending() == set()

        # Traffic resumes
        registry.observe('10.0.0.5')
        assert registry.listPending() == {PendingDevice('10.0.0.5')}


class TestConcurrency:

    def test_parallel_observe_and_register(self, registry):
        addresses = [f"10.0.{i // 250}.{i % 250 + 1}" for i in range(500)]

        def observeAll():
            for address in addresses:
                registry.observe(address)

        def registerAll():
            for address in addresses:
                registry.register(address)

        threads = [threading.Thread(target=observeAll), threading.Thread(target=registerAll)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        registered = {d.address for d in registry.listRegistered()}
        pending = {d.address for d in registry.listPending()}
        assert registered == set(addresses)
        assert pending.isdisjoint(registered)
