"""
Orrery - Simulation Loop
========================
Clock, state aggregate and the per-frame update loop.

LIFECYCLE:
    LOADING  -> assets pending; each frame pumps the load queue and
                reports progress. No transforms, no frames submitted.
    RUNNING  -> each frame: advance the clock by a fixed increment,
                compose every body's world transform (parents first),
                push transforms to the drawables, submit the frame.
    STOPPED  -> after teardown; frames are ignored.

LOADING -> RUNNING fires exactly once, when every load request has
terminated (loaded or failed). A failed body simply has no drawable.

The host calls frame() from its per-frame callback; nothing here blocks
or performs I/O other than the bounded asset loads while LOADING.
"""

import logging
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .assets import AssetEvent, AssetFailed, AssetLoaded, AssetLoadQueue, LoadingTracker
from .config import SimulationSettings
from .entities import BodyRegistry
from .interaction import POINTER, RESIZE, InputHub, PointerEvent, ResizeEvent
from .physics import HierarchyComposer
from .visualization.picking import Camera, SelectionController, Viewport

logger = logging.getLogger(__name__)


class LoopState(Enum):
    LOADING = "loading"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SimulationClock:
    """Monotonic simulation time advanced by a fixed increment per tick."""
    increment: float = 0.01
    time: float = 0.0
    ticks: int = 0

    def advance(self) -> float:
        self.ticks += 1
        self.time = self.ticks * self.increment
        return self.time


@dataclass
class SimulationState:
    """Everything the update loop and the picker share."""
    clock: SimulationClock
    registry: BodyRegistry
    selection: SelectionController
    loop_state: LoopState = LoopState.LOADING


class SolarSystemSimulation:
    """
    Main controller for the orrery.

    Orchestrates:
    - Asset loading and the Loading -> Running transition
    - Orbit kinematics and hierarchy composition
    - Transform submission to the renderer
    - Pointer picking and viewport resizes
    """

    def __init__(self,
                 registry: BodyRegistry,
                 settings: Optional[SimulationSettings] = None,
                 ui=None,
                 camera: Optional[Camera] = None,
                 viewport: Optional[Viewport] = None,
                 input_hub: Optional[InputHub] = None):
        self.settings = settings or SimulationSettings()
        self.ui = ui
        self.viewport = viewport or Viewport(1280, 720)
        self.camera = camera or Camera(position=np.array([0.0, 15000.0, 30000.0]),
                                       aspect_ratio=self.viewport.aspect_ratio)
        self.input_hub = input_hub or InputHub()

        self.composer = HierarchyComposer(wrap_angles=self.settings.wrap_angles)
        self.state = SimulationState(
            clock=SimulationClock(increment=self.settings.time_increment),
            registry=registry,
            selection=SelectionController(registry, ui, self.settings.highlight_scale),
        )

        self.backend = None
        self.load_queue: Optional[AssetLoadQueue] = None
        self.tracker = LoadingTracker()
        self._subscriptions = []
        self._faulted = set()

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    @property
    def registry(self) -> BodyRegistry:
        return self.state.registry

    @property
    def clock(self) -> SimulationClock:
        return self.state.clock

    @property
    def selection(self) -> SelectionController:
        return self.state.selection

    @property
    def loop_state(self) -> LoopState:
        return self.state.loop_state

    @property
    def is_running(self) -> bool:
        return self.state.loop_state == LoopState.RUNNING

    def set_ui(self, ui):
        """Route UI signals to a different presentation layer."""
        self.ui = ui
        self.selection.ui = ui

    # ------------------------------------------------------------------
    # Startup and loading
    # ------------------------------------------------------------------

    def start(self, backend):
        """
        Bind the renderer backend, queue one load per body and subscribe
        to input. Stays in LOADING until every load terminates.
        """
        self.backend = backend
        self.load_queue = AssetLoadQueue(self._load_asset)
        for body in self.registry:
            self.load_queue.request(body.id, body.config.model)
        self.tracker = LoadingTracker(total=len(self.load_queue))

        self._subscriptions = [
            self.input_hub.subscribe(POINTER, self.on_pointer),
            self.input_hub.subscribe(RESIZE, self.on_resize),
        ]

        logger.info("Loading %d bodies", self.tracker.total)
        if self.ui is not None:
            self.ui.set_loading_percent(0)
        self._check_loading_complete()

    def _load_asset(self, body_id: str, path: Optional[str]):
        body = self.registry.get(body_id)
        if path is None:
            return self.backend.create_drawable(body)
        return self.backend.load_drawable(body, path)

    def handle_asset_event(self, event: AssetEvent):
        """Consume one terminal load event."""
        if isinstance(event, AssetLoaded):
            self.registry.attach(event.body_id, event.handle)
        elif isinstance(event, AssetFailed):
            logger.warning("%s will not be drawn or pickable", event.body_id)

        percent = self.tracker.record(event)
        logger.info("Loaded %d of %d files", self.tracker.terminated, self.tracker.total)
        if self.ui is not None:
            self.ui.set_loading_percent(percent)
        self._check_loading_complete()

    def _check_loading_complete(self):
        if self.state.loop_state != LoopState.LOADING or not self.tracker.is_complete:
            return
        self.state.loop_state = LoopState.RUNNING
        logger.info("Loading complete! %d loaded, %d failed", self.tracker.loaded, self.tracker.failed)
        if self.ui is not None:
            self.ui.loading_complete()

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def frame(self) -> Optional[Dict]:
        """Per-frame host callback."""
        state = self.state.loop_state
        if state == LoopState.LOADING:
            if self.load_queue is not None:
                for event in self.load_queue.pump(self.settings.load_budget):
                    self.handle_asset_event(event)
            return None
        if state == LoopState.RUNNING:
            return self.tick()
        return None

    def tick(self) -> Optional[Dict]:
        """
        Execute one simulation tick.

        Returns telemetry data, or None when not running.
        """
        if self.state.loop_state != LoopState.RUNNING:
            return None

        time = self.clock.advance()
        positions = self.composer.compose_all(self.registry, time)

        # Whole tick composed before anything reaches the renderer
        for body in self.registry.update_order():
            if body.drawable is None:
                continue
            self._apply_transform(body)

        if self.backend is not None:
            self.backend.submit_frame()

        return {
            'time': time,
            'tick': self.clock.ticks,
            'positions': {body_id: pos.copy() for body_id, pos in positions.items()},
            'selected': self.selection.selected_id,
        }

    def _apply_transform(self, body):
        if self.backend is None:
            return
        try:
            self.backend.apply_transform(body.drawable, body.transform.model_matrix())
        except Exception:
            if body.id not in self._faulted:
                self._faulted.add(body.id)
                logger.exception("Applying transform for %s failed", body.id)

    def run_frames(self, count: int) -> List[Dict]:
        """Drive `count` host frames, returning telemetry of the ticks run."""
        telemetry = []
        for _ in range(count):
            result = self.frame()
            if result is not None:
                telemetry.append(result)
        return telemetry

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_pointer(self, event: PointerEvent):
        if self.state.loop_state != LoopState.RUNNING:
            return
        self.selection.handle_click(event.x, event.y, self.viewport, self.camera)

    def on_resize(self, event: ResizeEvent):
        self.viewport = Viewport(event.width, event.height)
        self.camera.aspect_ratio = self.viewport.aspect_ratio
        logger.debug("Viewport resized to %dx%d", event.width, event.height)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def teardown(self):
        """
        Stop the loop, revoke input subscriptions, then release renderer
        resources. Safe to call more than once.
        """
        if self.state.loop_state == LoopState.STOPPED:
            return
        self.state.loop_state = LoopState.STOPPED

        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

        if self.backend is not None:
            self.backend.release()
        logger.info("Simulation stopped after %d ticks", self.clock.ticks)
