"""Tests for highlight computation and the hover state machine."""

import pytest

from emospine.config import InteractionConfig
from emospine.graph import build_edges
from emospine.interaction import InteractionStateMachine, compute_highlights, highlight_opacity
from emospine.layout import layout
from emospine.models import HighlightState
from emospine.spatial import Ray, SpatialIndex


@pytest.fixture()
def ten(ten_records):
    entities = layout(ten_records)
    edges = build_edges(entities)
    return entities, edges, SpatialIndex(entities)


def _ray_at(entities, ordinal):
    e = next(e for e in entities if e.ordinal == ordinal)
    return Ray.orthographic(e.position[0], e.position[1])


# --- compute_highlights ---


class TestComputeHighlights:
    def test_idle_all_neutral(self, ten):
        entities, edges, _ = ten
        snap = compute_highlights(None, entities, edges)
        assert snap.active is None
        assert set(snap.entities.values()) == {HighlightState.NEUTRAL}
        assert set(snap.edges.values()) == {HighlightState.NEUTRAL}

    def test_hover_scene_5(self, ten):
        """Speaker match 2, category matches 8 and 9, neighbors 4 and 6."""
        entities, edges, _ = ten
        snap = compute_highlights(5, entities, edges)
        assert snap.active == 5
        assert snap.entities[5] == HighlightState.ACTIVE
        related = {o for o, s in snap.entities.items() if s == HighlightState.RELATED}
        dimmed = {o for o, s in snap.entities.items() if s == HighlightState.DIMMED}
        assert related == {2, 4, 6, 8, 9}
        assert dimmed == {1, 3, 7, 10}

    def test_edges_related_to_active(self, ten):
        entities, edges, _ = ten
        snap = compute_highlights(5, entities, edges)
        assert snap.edges["chronological:4-5"] == HighlightState.RELATED
        assert snap.edges["chronological:5-6"] == HighlightState.RELATED
        assert snap.edges["chronological:1-2"] == HighlightState.DIMMED
        assert snap.edges["by-speaker:2-5"] == HighlightState.RELATED
        assert snap.edges["by-speaker:1-3"] == HighlightState.DIMMED
        assert snap.edges["by-category:8-9"] == HighlightState.RELATED
        assert snap.edges["by-category:1-3"] == HighlightState.DIMMED

    def test_every_edge_has_a_state(self, ten):
        entities, edges, _ = ten
        snap = compute_highlights(5, entities, edges)
        assert set(snap.edges) == {e.key for e in edges.all()}

    def test_unknown_active_is_idle(self, ten):
        entities, edges, _ = ten
        assert compute_highlights(99, entities, edges).active is None


class TestHighlightOpacity:
    def test_rules(self):
        cfg = InteractionConfig()
        assert highlight_opacity(HighlightState.DIMMED, 0.9, cfg) == 0.25
        assert highlight_opacity(HighlightState.DIMMED, 0.1, cfg) == 0.1
        assert highlight_opacity(HighlightState.RELATED, 0.3, cfg) == 1.0
        assert highlight_opacity(HighlightState.ACTIVE, 0.3, cfg) == 1.0
        assert highlight_opacity(HighlightState.NEUTRAL, 0.3, cfg) == 0.3


# --- State machine ---


class TestStateMachine:
    def test_starts_idle(self):
        machine = InteractionStateMachine()
        assert machine.is_idle
        assert machine.active is None

    def test_pointer_move_activates(self, ten):
        entities, edges, index = ten
        calls = []
        machine = InteractionStateMachine(on_active_change=calls.append)
        machine.bind(entities, edges, index)
        assert machine.pointer_move(_ray_at(entities, 5)) is True
        assert machine.active == 5
        assert [c.ordinal for c in calls] == [5]

    def test_callback_once_per_transition(self, ten):
        entities, edges, index = ten
        calls = []
        machine = InteractionStateMachine(on_active_change=calls.append)
        machine.bind(entities, edges, index)
        ray = _ray_at(entities, 5)
        machine.pointer_move(ray)
        machine.pointer_move(ray)
        machine.pointer_move(ray)
        assert len(calls) == 1

    def test_leaving_goes_idle(self, ten):
        entities, edges, index = ten
        calls = []
        machine = InteractionStateMachine(on_active_change=calls.append)
        machine.bind(entities, edges, index)
        machine.pointer_move(_ray_at(entities, 5))
        assert machine.pointer_move(Ray.orthographic(50.0, 50.0)) is True
        assert machine.is_idle
        assert calls[-1] is None
        assert len(calls) == 2

    def test_callback_sees_new_snapshot(self, ten):
        entities, edges, index = ten
        seen = []
        machine = InteractionStateMachine()
        machine.subscribe(lambda entity: seen.append(machine.snapshot.active))
        machine.bind(entities, edges, index)
        machine.activate(7)
        assert seen == [7]

    def test_activate_unknown_is_idle(self, ten):
        entities, edges, index = ten
        machine = InteractionStateMachine()
        machine.bind(entities, edges, index)
        machine.activate(3)
        assert machine.activate(42) is True
        assert machine.is_idle

    def test_pointer_move_before_bind_is_noop(self):
        machine = InteractionStateMachine()
        assert machine.pointer_move(Ray.orthographic(0, 0)) is False

    def test_rebind_keeps_surviving_active(self, ten, ten_records):
        entities, edges, index = ten
        calls = []
        machine = InteractionStateMachine(on_active_change=calls.append)
        machine.bind(entities, edges, index)
        machine.activate(5)
        relaid = layout(ten_records[:8])
        machine.bind(relaid, build_edges(relaid), SpatialIndex(relaid))
        assert machine.active == 5
        assert len(calls) == 1
        assert set(machine.snapshot.entities) == {e.ordinal for e in relaid}

    def test_rebind_drops_vanished_active(self, ten, ten_records):
        entities, edges, index = ten
        calls = []
        machine = InteractionStateMachine(on_active_change=calls.append)
        machine.bind(entities, edges, index)
        machine.activate(9)
        relaid = layout(ten_records[:5])
        machine.bind(relaid, build_edges(relaid), SpatialIndex(relaid))
        assert machine.is_idle
        assert calls[-1] is None

    def test_opacity_for(self, ten):
        entities, edges, index = ten
        machine = InteractionStateMachine()
        machine.bind(entities, edges, index)
        assert machine.opacity_for(1, 0.6) == 0.6
        machine.activate(5)
        assert machine.opacity_for(1, 0.6) == 0.25
        assert machine.opacity_for(2, 0.6) == 1.0
