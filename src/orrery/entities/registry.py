"""
Body Registry
=============
The fixed set of celestial bodies, built once from configuration.

Composition is immutable after construction: no bodies are added or
removed. Only the transient fields of each Body change (transform,
drawable handle).

Lookups:
    get(body_id)              - by identifier
    find_by_drawable(handle)  - by drawable, O(1), used by picking
    primitives(body_id)       - flat pickable-primitive index

Construction validates the configuration and rejects it early:
    - duplicate identifiers
    - not exactly one central body
    - parent references to unknown bodies (MissingParentReference)
    - cycles in the parent chain (HierarchyCycleError)
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Any

from .body import Body, BodyConfig
from ..errors import (
    CentralBodyError,
    DuplicateBodyError,
    HierarchyCycleError,
    MissingParentReference,
)

logger = logging.getLogger(__name__)


class BodyRegistry:
    """Ordered collection of bodies with parent-before-child update order."""

    def __init__(self, configs: Iterable[BodyConfig]):
        self._bodies: Dict[str, Body] = {}
        for config in configs:
            if config.name in self._bodies:
                raise DuplicateBodyError(config.name)
            self._bodies[config.name] = Body(config)

        self._validate_central_body()
        self._validate_parents()
        self._order: List[Body] = self._resolve_update_order()

        # Drawable lookup keyed by object identity; handles need not be hashable
        self._by_drawable: Dict[int, Body] = {}
        self._primitives: Dict[str, List[Any]] = {}

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_central_body(self):
        central = [b.id for b in self._bodies.values() if b.config.is_central]
        if len(central) != 1:
            raise CentralBodyError(
                f"Expected exactly one central body (orbit_radius 0, no parent), found {len(central)}: {central}"
            )

    def _validate_parents(self):
        for body in self._bodies.values():
            if body.parent_id is not None and body.parent_id not in self._bodies:
                raise MissingParentReference(body.id, body.parent_id)

    def _resolve_update_order(self) -> List[Body]:
        """
        Depth-first ordering so each parent precedes its children.

        Siblings keep insertion order. Raises HierarchyCycleError when a
        parent chain loops back on itself.
        """
        order: List[Body] = []
        done = set()

        for body in self._bodies.values():
            chain = []
            current = body
            while current is not None and current.id not in done:
                if current.id in chain:
                    cycle = chain[chain.index(current.id):] + [current.id]
                    raise HierarchyCycleError(cycle)
                chain.append(current.id)
                current = self._bodies[current.parent_id] if current.parent_id else None

            # chain runs child -> ancestor; emit ancestors first
            for body_id in reversed(chain):
                order.append(self._bodies[body_id])
                done.add(body_id)

        return order

    # ------------------------------------------------------------------
    # Enumeration and lookup
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Body]:
        return iter(self._bodies.values())

    def __len__(self) -> int:
        return len(self._bodies)

    def __contains__(self, body_id: str) -> bool:
        return body_id in self._bodies

    def bodies(self) -> List[Body]:
        """All bodies in insertion order."""
        return list(self._bodies.values())

    def ids(self) -> List[str]:
        return list(self._bodies.keys())

    def update_order(self) -> List[Body]:
        """Bodies ordered so every parent comes before its children."""
        return list(self._order)

    def get(self, body_id: str) -> Body:
        return self._bodies[body_id]

    def find(self, body_id: str) -> Optional[Body]:
        return self._bodies.get(body_id)

    @property
    def central_body(self) -> Body:
        return next(b for b in self._bodies.values() if b.config.is_central)

    def children_of(self, body_id: str) -> List[Body]:
        return [b for b in self._bodies.values() if b.parent_id == body_id]

    def find_by_drawable(self, handle) -> Optional[Body]:
        """Resolve the body owning a drawable handle."""
        if handle is None:
            return None
        return self._by_drawable.get(id(handle))

    # ------------------------------------------------------------------
    # Drawable attachment
    # ------------------------------------------------------------------

    def attach(self, body_id: str, handle) -> bool:
        """
        Attach a loaded drawable to a body.

        A second attachment for the same body replaces the first. Unknown
        ids are logged and ignored. Returns True when the handle was stored.
        """
        body = self._bodies.get(body_id)
        if body is None:
            logger.warning("Ignoring drawable for unknown body '%s'", body_id)
            return False

        if body.drawable is not None:
            if body.drawable is handle:
                return True
            logger.debug("Replacing drawable for '%s'", body_id)
            self._by_drawable.pop(id(body.drawable), None)

        body.drawable = handle
        self._by_drawable[id(handle)] = body
        self._primitives[body_id] = self._collect_primitives(body_id, handle)
        return True

    @staticmethod
    def _collect_primitives(body_id: str, handle) -> List[Any]:
        """Flatten a drawable's pickable primitives, tagged with the owner id."""
        primitives = list(getattr(handle, 'primitives', lambda: [])())
        for primitive in primitives:
            primitive.owner_id = body_id
        return primitives

    def primitives(self, body_id: str) -> List[Any]:
        return list(self._primitives.get(body_id, []))

    def primitive_index(self) -> Dict[str, List[Any]]:
        """id -> primitive list for every body holding a drawable."""
        return {body_id: list(prims) for body_id, prims in self._primitives.items()}

    def loaded_bodies(self) -> List[Body]:
        return [b for b in self._bodies.values() if b.is_loaded]

    def get_status_report(self) -> Dict[str, dict]:
        return {body.id: body.get_status_report() for body in self._bodies.values()}
