"""
Asset Loading
=============
Cooperative, message-passing asset loading.

Each load request terminates in exactly one event:

    AssetLoaded(body_id, handle)        -> registry.attach(...)
    AssetFailed(body_id, path, error)   -> logged, body stays without drawable

LoadingTracker counts terminated requests against the total. Failure is
terminal for that asset, so one bad model cannot keep the simulation in
the loading state.

AssetLoadQueue performs at most `budget` loads per pump, so a host can
call it once per frame without blocking the frame loop.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, List, Optional, Tuple, Union

from .errors import AssetLoadFailure

logger = logging.getLogger(__name__)


@dataclass
class AssetLoaded:
    body_id: str
    handle: Any
    path: Optional[str] = None


@dataclass
class AssetFailed:
    body_id: str
    path: Optional[str]
    error: AssetLoadFailure


AssetEvent = Union[AssetLoaded, AssetFailed]


class LoadingTracker:
    """Completed-vs-total counter for a batch of asset loads."""

    def __init__(self, total: int = 0):
        self.total = total
        self.loaded = 0
        self.failed = 0

    @property
    def terminated(self) -> int:
        return self.loaded + self.failed

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 100
        return round(self.terminated / self.total * 100)

    @property
    def is_complete(self) -> bool:
        return self.terminated >= self.total

    def record(self, event: AssetEvent) -> int:
        """Count one terminal event and return the new percentage."""
        if isinstance(event, AssetLoaded):
            self.loaded += 1
        else:
            self.failed += 1
        return self.percent


class AssetLoadQueue:
    """
    Pending load requests drained a few at a time.

    loader(body_id, path) returns a drawable handle or raises.
    """

    def __init__(self, loader: Callable[[str, Optional[str]], Any]):
        self.loader = loader
        self._pending: Deque[Tuple[str, Optional[str]]] = deque()

    def request(self, body_id: str, path: Optional[str] = None):
        self._pending.append((body_id, path))

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def is_empty(self) -> bool:
        return not self._pending

    def pump(self, budget: int = 1) -> List[AssetEvent]:
        """Run up to `budget` loads, returning one event per load."""
        events: List[AssetEvent] = []
        while self._pending and len(events) < budget:
            body_id, path = self._pending.popleft()
            events.append(self._load(body_id, path))
        return events

    def drain(self) -> List[AssetEvent]:
        """Run every pending load."""
        return self.pump(budget=len(self._pending))

    def _load(self, body_id: str, path: Optional[str]) -> AssetEvent:
        logger.debug("Loading %s (%s)", body_id, path or "procedural")
        try:
            handle = self.loader(body_id, path)
        except Exception as exc:
            failure = AssetLoadFailure(body_id, path, exc)
            logger.error("%s", failure)
            return AssetFailed(body_id, path, failure)

        if handle is None:
            failure = AssetLoadFailure(body_id, path)
            logger.error("%s (loader returned nothing)", failure)
            return AssetFailed(body_id, path, failure)

        return AssetLoaded(body_id, handle, path)
