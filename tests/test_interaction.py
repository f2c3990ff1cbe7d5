"""
Test Suite: Input Hub
=====================
Subscription, dispatch and revocation of pointer / resize callbacks.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orrery.interaction import POINTER, RESIZE, InputHub, PointerEvent, ResizeEvent


@pytest.fixture
def hub():
    return InputHub()


class TestInputHub:
    def test_pointer_dispatch(self, hub):
        received = []
        hub.subscribe(POINTER, received.append)
        hub.pointer(12, 34)
        assert received == [PointerEvent(12, 34, 1)]

    def test_resize_dispatch(self, hub):
        received = []
        hub.subscribe(RESIZE, received.append)
        hub.resize(800, 600)
        assert received == [ResizeEvent(800, 600)]

    def test_kinds_are_separate(self, hub):
        pointers = []
        hub.subscribe(POINTER, pointers.append)
        hub.resize(10, 10)
        assert pointers == []

    def test_unknown_kind(self, hub):
        with pytest.raises(ValueError):
            hub.subscribe("keyboard", print)


class TestSubscription:
    def test_unsubscribe_stops_delivery(self, hub):
        received = []
        subscription = hub.subscribe(POINTER, received.append)
        assert subscription.unsubscribe() is True
        hub.pointer(1, 1)
        assert received == []
        assert hub.subscriber_count(POINTER) == 0

    def test_unsubscribe_is_idempotent(self, hub):
        subscription = hub.subscribe(RESIZE, lambda event: None)
        subscription.unsubscribe()
        assert subscription.unsubscribe() is False
        assert hub.subscriber_count(RESIZE) == 0

    def test_unsubscribe_during_dispatch(self, hub):
        received = []
        subscriptions = []

        def once(event):
            received.append(event)
            subscriptions[0].unsubscribe()

        subscriptions.append(hub.subscribe(POINTER, once))
        hub.pointer(1, 1)
        hub.pointer(2, 2)
        assert len(received) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
