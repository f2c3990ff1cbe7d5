"""
Test Suite: Asset Loading
=========================
Cooperative load queue and completion tracking.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orrery.assets import AssetFailed, AssetLoaded, AssetLoadQueue, LoadingTracker
from orrery.errors import AssetLoadFailure


def fake_loader(body_id, path):
    if path == "broken.glb":
        raise IOError("corrupt file")
    if path == "empty.glb":
        return None
    return f"handle:{body_id}"


class TestLoadingTracker:
    def test_percent_rounds(self):
        tracker = LoadingTracker(total=3)
        assert tracker.percent == 0
        assert tracker.record(AssetLoaded("A", object())) == 33
        assert tracker.record(AssetFailed("B", "b.glb", AssetLoadFailure("B", "b.glb"))) == 67
        assert not tracker.is_complete
        assert tracker.record(AssetLoaded("C", object())) == 100
        assert tracker.is_complete

    def test_counts(self):
        tracker = LoadingTracker(total=2)
        tracker.record(AssetLoaded("A", object()))
        tracker.record(AssetFailed("B", None, AssetLoadFailure("B", None)))
        assert (tracker.loaded, tracker.failed, tracker.terminated) == (1, 1, 2)

    def test_empty_batch_is_complete(self):
        tracker = LoadingTracker(total=0)
        assert tracker.is_complete
        assert tracker.percent == 100


class TestAssetLoadQueue:
    """One terminal event per request, bounded work per pump"""

    @pytest.fixture
    def queue(self):
        queue = AssetLoadQueue(fake_loader)
        queue.request("Sun")
        queue.request("Earth", "earth.glb")
        queue.request("Mars", "broken.glb")
        return queue

    def test_pump_respects_budget(self, queue):
        events = queue.pump(budget=1)
        assert len(events) == 1
        assert len(queue) == 2

        events = queue.pump(budget=5)
        assert len(events) == 2
        assert queue.is_empty

    def test_requests_run_in_order(self, queue):
        events = queue.drain()
        assert [e.body_id for e in events] == ["Sun", "Earth", "Mars"]

    def test_success_event(self, queue):
        event = queue.pump()[0]
        assert isinstance(event, AssetLoaded)
        assert event.handle == "handle:Sun"
        assert event.path is None

    def test_failure_is_captured(self, queue):
        event = queue.drain()[-1]
        assert isinstance(event, AssetFailed)
        assert event.path == "broken.glb"
        assert isinstance(event.error, AssetLoadFailure)
        assert isinstance(event.error.cause, IOError)
        assert "Mars" in str(event.error)

    def test_loader_returning_nothing_fails(self):
        queue = AssetLoadQueue(fake_loader)
        queue.request("Venus", "empty.glb")
        event = queue.pump()[0]
        assert isinstance(event, AssetFailed)
        assert event.error.cause is None

    def test_pump_on_empty_queue(self):
        assert AssetLoadQueue(fake_loader).pump() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
