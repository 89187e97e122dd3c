"""Visualization session: loading, recomputation and pointer handling.

A session owns everything derived from the records (entities, edges, spatial
index) plus the interaction machine. Records and guide geometry arrive from
two independent async sources; layout runs only once both have resolved.
Each call to load() takes a new generation number, and a load that finishes
after a newer one has started is discarded.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from emospine.ambient import AmbientFrame, BackgroundField, fog_range
from emospine.config import Config
from emospine.errors import GateError, SceneNotFoundError, SessionClosedError
from emospine.graph import build_edges
from emospine.guide import GuideGeometry, default_guide, load_guide
from emospine.ingest import load_records
from emospine.interaction import ActiveChangeCallback, InteractionStateMachine
from emospine.layout import GoldenAngleLayout, LayoutParams, LayoutStrategy, layout, make_strategy
from emospine.models import EdgeSets, PositionedEntity, Record, RenderPayload
from emospine.spatial import Ray, SpatialIndex

logger = logging.getLogger(__name__)


class ReadyGate:
    """Count-down latch over named inputs. Resolution order doesn't matter."""

    def __init__(self, *names: str) -> None:
        self._pending = set(names)
        self._values: dict[str, Any] = {}
        self._event = asyncio.Event()
        if not self._pending:
            self._event.set()

    @property
    def is_ready(self) -> bool:
        return self._event.is_set()

    def resolve(self, name: str, value: Any) -> None:
        if name in self._values:
            raise GateError(f"Input '{name}' already resolved")
        if name not in self._pending:
            raise GateError(f"Unknown input '{name}'")
        self._pending.remove(name)
        self._values[name] = value
        if not self._pending:
            self._event.set()

    async def wait(self) -> dict[str, Any]:
        await self._event.wait()
        return dict(self._values)


def _valid_records(records: list[Record]) -> list[Record]:
    """Drop repeated ordinals (first one wins)."""
    seen: set[int] = set()
    kept: list[Record] = []
    for record in records:
        if record.ordinal in seen:
            logger.debug("Dropped record with duplicate ordinal %d", record.ordinal)
            continue
        seen.add(record.ordinal)
        kept.append(record)
    return kept


class VisualizationSession:
    def __init__(
        self,
        config: Config | None = None,
        strategy: LayoutStrategy | None = None,
        on_active_change: ActiveChangeCallback | None = None,
    ) -> None:
        self.config = config or Config()
        self.strategy = strategy or make_strategy(self.config)
        self.interaction = InteractionStateMachine(self.config.interaction, on_active_change)
        self.background = BackgroundField(
            count=self.config.render.background_particles,
            seed=self.config.render.background_seed,
        )
        self.viewport = (self.config.layout.viewport_width, self.config.layout.viewport_height)
        self.records: list[Record] = []
        self.guide: GuideGeometry = default_guide(self.config.guide)
        self.entities: list[PositionedEntity] = []
        self.edges = EdgeSets()
        self.index = SpatialIndex([], self._hit_tolerance())
        self._generation = 0
        self._closed = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_closed(self) -> bool:
        return self._closed

    # --- Loading ---

    async def load(
        self,
        record_source: Awaitable[list[Record]],
        guide_source: Awaitable[GuideGeometry] | None = None,
    ) -> bool:
        """Await both sources, then rebuild. Returns False if the result was stale."""
        if self._closed:
            for source in (record_source, guide_source):
                if asyncio.iscoroutine(source):
                    source.close()
            raise SessionClosedError("Session is closed")
        self._generation += 1
        generation = self._generation
        gate = ReadyGate("records", "guide")

        async def feed(name: str, source: Awaitable[Any]) -> None:
            gate.resolve(name, await source)

        if guide_source is None:
            gate.resolve("guide", default_guide(self.config.guide))
            await feed("records", record_source)
        else:
            await asyncio.gather(feed("records", record_source), feed("guide", guide_source))
        values = await gate.wait()

        if self._closed or generation != self._generation:
            logger.info("Discarding load %d (current generation %d)", generation, self._generation)
            return False

        self.records = _valid_records(values["records"])
        self.guide = values["guide"]
        self.rebuild()
        logger.info("Load %d ready: %d scenes", generation, len(self.records))
        return True

    async def load_from_config(self) -> bool:
        """Load scenes and guide from the paths in the session config."""
        return await self.load(
            load_records(self.config.resolved_data_path),
            load_guide(self.config.resolved_guide_path, self.config.guide),
        )

    # --- Recomputation ---

    def _hit_tolerance(self) -> float:
        if isinstance(self.strategy, GoldenAngleLayout):
            return self.strategy.config.max_radius
        return self.config.interaction.hit_tolerance

    def rebuild(self) -> None:
        """Recompute entities, edges and the index; keep the active scene if it survives."""
        width, height = self.viewport
        params = LayoutParams(
            guide=self.guide,
            viewport_width=width,
            viewport_height=height,
            encoding=self.config.encoding,
        )
        self.entities = layout(self.records, params, self.strategy)
        self.edges = build_edges(self.entities, self.config.edges)
        self.index = SpatialIndex(self.entities, self._hit_tolerance())
        self.interaction.bind(self.entities, self.edges, self.index)

    def set_viewport(self, width: int, height: int) -> None:
        if (width, height) == self.viewport:
            return
        self.viewport = (width, height)
        self.rebuild()

    def set_strategy(self, strategy: LayoutStrategy) -> None:
        self.strategy = strategy
        self.rebuild()

    # --- Interaction ---

    def pointer_move(self, ray: Ray) -> bool:
        return self.interaction.pointer_move(ray)

    def hover_point(self, x: float, y: float) -> bool:
        """Pointer at (x, y) as seen by a front-facing camera."""
        return self.pointer_move(Ray.orthographic(x, y))

    def activate(self, ordinal: int | None) -> bool:
        return self.interaction.activate(ordinal)

    # --- Queries ---

    def record(self, ordinal: int) -> Record:
        for r in self.records:
            if r.ordinal == ordinal:
                return r
        raise SceneNotFoundError(ordinal)

    def entity(self, ordinal: int) -> PositionedEntity:
        for e in self.entities:
            if e.ordinal == ordinal:
                return e
        raise SceneNotFoundError(ordinal)

    def payload(self) -> RenderPayload:
        return RenderPayload(
            generation=self._generation,
            strategy=self.strategy.name,
            entities=self.entities,
            edges=self.edges,
            interaction=self.interaction.snapshot,
        )

    def tick(self, elapsed: float) -> AmbientFrame:
        near, far = fog_range(self.config.render.camera_distance)
        return AmbientFrame(
            elapsed=elapsed,
            positions=self.background.positions_at(elapsed),
            colors=self.background.colors,
            fog_near=near,
            fog_far=far,
        )

    def close(self) -> None:
        """Drop derived state and invalidate any load still in flight."""
        if self._closed:
            return
        self.interaction.activate(None)
        self._generation += 1
        self._closed = True
        self.records = []
        self.entities = []
        self.edges = EdgeSets()
        self.index = SpatialIndex([], self._hit_tolerance())
        self.interaction.bind(self.entities, self.edges, self.index)
        logger.debug("Session closed")
