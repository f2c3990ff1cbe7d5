"""
Input Events
============
Pointer-click and viewport-resize payloads plus a small subscription hub.

The host window forwards its events into an InputHub; the simulation
subscribes its picking and resize handlers. Unsubscribing is idempotent,
so teardown can revoke every subscription without tracking which ones
are still live.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

POINTER = "pointer"
RESIZE = "resize"


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: int = 1


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


class Subscription:
    """Handle returned by InputHub.subscribe."""

    def __init__(self, hub: "InputHub", kind: str, callback: Callable):
        self._hub = hub
        self.kind = kind
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> bool:
        """Revoke the callback. Returns False if it was already revoked."""
        if not self.active:
            return False
        self.active = False
        self._hub._remove(self)
        return True


class InputHub:
    """Dispatches input events to subscribed callbacks."""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscription]] = {POINTER: [], RESIZE: []}

    def subscribe(self, kind: str, callback: Callable) -> Subscription:
        if kind not in self._subscribers:
            raise ValueError(f"Unknown event kind '{kind}'. Available: {', '.join(self._subscribers)}")
        subscription = Subscription(self, kind, callback)
        self._subscribers[kind].append(subscription)
        return subscription

    def _remove(self, subscription: Subscription):
        self._subscribers[subscription.kind].remove(subscription)

    def subscriber_count(self, kind: str) -> int:
        return len(self._subscribers[kind])

    def _dispatch(self, kind: str, event):
        for subscription in list(self._subscribers[kind]):
            subscription.callback(event)

    def pointer(self, x: float, y: float, button: int = 1):
        self._dispatch(POINTER, PointerEvent(x, y, button))

    def resize(self, width: int, height: int):
        self._dispatch(RESIZE, ResizeEvent(width, height))
