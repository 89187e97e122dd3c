"""Hover state machine: Idle or Active(scene).

A pointer move asks the spatial index what is under the pointer. Only when
the answer differs from the current active scene does the machine
transition; each transition rebuilds the full highlight snapshot, swaps it in
with a single assignment, then notifies listeners exactly once. Observers
therefore never see two active scenes or a half-updated highlight map.
"""

import logging
from collections.abc import Callable

from emospine.config import InteractionConfig
from emospine.graph import chronological_neighbors
from emospine.models import EdgeKind, EdgeSets, HighlightState, InteractionSnapshot, PositionedEntity
from emospine.spatial import Ray, SpatialIndex

logger = logging.getLogger(__name__)

ActiveChangeCallback = Callable[[PositionedEntity | None], None]


def highlight_opacity(state: HighlightState, base: float, config: InteractionConfig) -> float:
    """Rendered opacity for an element in the given highlight state."""
    if state == HighlightState.DIMMED:
        return min(base, config.dim_opacity)
    if state in (HighlightState.ACTIVE, HighlightState.RELATED):
        return config.related_opacity
    return base


def compute_highlights(
    active: int | None,
    entities: list[PositionedEntity],
    edges: EdgeSets,
) -> InteractionSnapshot:
    """Highlight state for every entity and edge given the active scene.

    Related scenes share the active scene's speaker or main emotion, or sit
    right before/after it in the story. Everything else is dimmed. With no
    active scene everything is neutral.
    """
    by_ordinal = {e.ordinal: e for e in entities}
    target = by_ordinal.get(active) if active is not None else None
    if target is None:
        return InteractionSnapshot(
            active=None,
            entities={e.ordinal: HighlightState.NEUTRAL for e in entities},
            edges={edge.key: HighlightState.NEUTRAL for edge in edges.all()},
        )

    neighbors = set(chronological_neighbors(entities, target.ordinal))
    category = target.category.strip().lower()
    speaker = target.speaker_key

    entity_states: dict[int, HighlightState] = {}
    for e in entities:
        if e.ordinal == target.ordinal:
            entity_states[e.ordinal] = HighlightState.ACTIVE
        elif (
            e.ordinal in neighbors
            or e.speaker_key == speaker
            or e.category.strip().lower() == category
        ):
            entity_states[e.ordinal] = HighlightState.RELATED
        else:
            entity_states[e.ordinal] = HighlightState.DIMMED

    edge_states: dict[str, HighlightState] = {}
    for edge in edges.all():
        if edge.kind == EdgeKind.CHRONOLOGICAL:
            related = edge.touches(target.ordinal)
        elif edge.kind == EdgeKind.BY_SPEAKER:
            related = edge.group == speaker
        else:
            related = edge.group == category
        edge_states[edge.key] = HighlightState.RELATED if related else HighlightState.DIMMED

    return InteractionSnapshot(active=target.ordinal, entities=entity_states, edges=edge_states)


class InteractionStateMachine:
    """Sole owner of the active-scene handle. Everyone else reads the snapshot."""

    def __init__(
        self,
        config: InteractionConfig | None = None,
        on_active_change: ActiveChangeCallback | None = None,
    ) -> None:
        self.config = config or InteractionConfig()
        self._entities: list[PositionedEntity] = []
        self._by_ordinal: dict[int, PositionedEntity] = {}
        self._edges = EdgeSets()
        self._index: SpatialIndex | None = None
        self._snapshot = InteractionSnapshot()
        self._listeners: list[ActiveChangeCallback] = []
        if on_active_change is not None:
            self._listeners.append(on_active_change)

    @property
    def snapshot(self) -> InteractionSnapshot:
        return self._snapshot

    @property
    def active(self) -> int | None:
        return self._snapshot.active

    @property
    def is_idle(self) -> bool:
        return self._snapshot.active is None

    def subscribe(self, callback: ActiveChangeCallback) -> None:
        self._listeners.append(callback)

    def bind(self, entities: list[PositionedEntity], edges: EdgeSets, index: SpatialIndex) -> None:
        """Attach a freshly computed layout.

        The active scene survives if it still exists; otherwise the machine
        drops to Idle and notifies listeners.
        """
        self._entities = list(entities)
        self._by_ordinal = {e.ordinal: e for e in entities}
        self._edges = edges
        self._index = index
        previous = self._snapshot.active
        if previous is not None and previous not in self._by_ordinal:
            logger.debug("Active scene %d gone after relayout", previous)
            self._transition(None)
        else:
            # Same active scene, new geometry: recompute without notifying
            self._snapshot = compute_highlights(previous, self._entities, self._edges)

    def pointer_move(self, ray: Ray) -> bool:
        """Handle a pointer move. Returns True if the active scene changed."""
        if self._index is None or not len(self._index):
            return False
        hit = self._index.nearest(ray)
        return self.activate(hit)

    def activate(self, ordinal: int | None) -> bool:
        """Make ordinal the active scene (None for Idle). No-op if unchanged."""
        if ordinal is not None and ordinal not in self._by_ordinal:
            ordinal = None
        if ordinal == self._snapshot.active:
            return False
        self._transition(ordinal)
        return True

    def _transition(self, ordinal: int | None) -> None:
        previous = self._snapshot.active
        self._snapshot = compute_highlights(ordinal, self._entities, self._edges)
        logger.debug("Active scene %s -> %s", previous, ordinal)
        entity = self._by_ordinal.get(ordinal) if ordinal is not None else None
        for listener in self._listeners:
            listener(entity)

    def state_of(self, ordinal: int) -> HighlightState:
        return self._snapshot.entities.get(ordinal, HighlightState.NEUTRAL)

    def opacity_for(self, ordinal: int, base: float) -> float:
        """Rendered opacity for a scene given its encoded base opacity."""
        return highlight_opacity(self.state_of(ordinal), base, self.config)
