import asyncio
import logging

from apps.storefront.core.guards import InFlightRegistry
from apps.storefront.core.signals import Channel
from apps.storefront.core.storage import MemoryStorage


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_guard_blocks_until_released():
    guard = InFlightRegistry(cooldown=0.3)
    assert guard.acquire("a")
    assert not guard.acquire("a")
    assert guard.acquire("b")
    guard.release("a")
    assert guard.acquire("a")


def test_guard_cooldown_frees_abandoned_keys():
    clock = FakeClock()
    guard = InFlightRegistry(cooldown=0.3, clock=clock)
    guard.acquire(("x", 1))
    clock.now += 0.2
    assert guard.is_pending(("x", 1))
    clock.now += 0.1
    assert not guard.is_pending(("x", 1))
    assert guard.acquire(("x", 1))


def test_channel_delivers_immediately_without_loop():
    channel = Channel("k")
    received, delivered = [], []
    channel.subscribe(received.append)
    channel.publish("sender", on_delivered=lambda: delivered.append(True))
    assert received == ["sender"]
    assert delivered == [True]


def test_channel_defers_inside_event_loop():
    async def scenario():
        channel = Channel("k")
        received = []
        channel.subscribe(received.append)
        channel.publish("s")
        before = list(received)
        await asyncio.sleep(0)
        return before, received

    before, after = asyncio.run(scenario())
    assert before == []
    assert after == ["s"]


def test_failing_listener_does_not_stop_delivery(caplog):
    channel = Channel("k")
    received, delivered = [], []

    def broken(sender):
        raise RuntimeError("boom")

    channel.subscribe(broken)
    channel.subscribe(received.append)
    with caplog.at_level(logging.ERROR):
        channel.publish("s", on_delivered=lambda: delivered.append(True))
    assert received == ["s"]
    assert delivered == [True]
    assert "Listener on channel k failed" in caplog.text


def test_unsubscribe():
    channel = Channel("k")
    unsubscribe = channel.subscribe(lambda sender: None)
    assert len(channel) == 1
    unsubscribe()
    unsubscribe()
    assert len(channel) == 0


def test_storage_channels_are_per_key_and_per_storage():
    first, second = MemoryStorage(), MemoryStorage()
    assert first.channel("cart") is first.channel("cart")
    assert first.channel("cart") is not first.channel("favorites")
    assert first.channel("cart") is not second.channel("cart")
