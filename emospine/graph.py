"""Relationship graphs between positioned scenes.

Three edge sets, each with its own style:

* chronological: scene i to scene i+1, a single path through the story.
* by_speaker: one path per speaker, in story order (a "thread").
* by_category: every pair of scenes sharing a main emotion (a "web").
"""

import logging
from collections import defaultdict
from collections.abc import Callable

from emospine.config import EdgeStyleConfig, EdgeStylesConfig
from emospine.encoding import lighten
from emospine.models import Edge, EdgeKind, EdgeSets, EdgeStyle, PositionedEntity

logger = logging.getLogger(__name__)


def _style(cfg: EdgeStyleConfig, entity: PositionedEntity) -> EdgeStyle:
    color = lighten(entity.color, cfg.lighten) if cfg.lighten else entity.color
    return EdgeStyle(
        width=cfg.width,
        opacity=cfg.opacity,
        color=color,
        dash=cfg.dash,
        blending=cfg.blending,
    )


def _group(
    entities: list[PositionedEntity],
    key: Callable[[PositionedEntity], str],
) -> dict[str, list[PositionedEntity]]:
    """Group entities by key, each group sorted by ordinal. Groups keep first-seen order."""
    groups: dict[str, list[PositionedEntity]] = defaultdict(list)
    for entity in sorted(entities, key=lambda e: e.ordinal):
        groups[key(entity)].append(entity)
    return groups


def chronological_edges(entities: list[PositionedEntity], cfg: EdgeStyleConfig) -> list[Edge]:
    ordered = sorted(entities, key=lambda e: e.ordinal)
    return [
        Edge(
            kind=EdgeKind.CHRONOLOGICAL,
            source=a.ordinal,
            target=b.ordinal,
            style=_style(cfg, a),
        )
        for a, b in zip(ordered, ordered[1:])
    ]


def speaker_edges(entities: list[PositionedEntity], cfg: EdgeStyleConfig) -> list[Edge]:
    edges: list[Edge] = []
    for speaker, members in _group(entities, lambda e: e.speaker_key).items():
        # Size-1 groups produce no pairs
        for a, b in zip(members, members[1:]):
            edges.append(Edge(
                kind=EdgeKind.BY_SPEAKER,
                source=a.ordinal,
                target=b.ordinal,
                group=speaker,
                style=_style(cfg, a),
            ))
    return edges


def category_edges(entities: list[PositionedEntity], cfg: EdgeStyleConfig) -> list[Edge]:
    edges: list[Edge] = []
    for category, members in _group(entities, lambda e: e.category.strip().lower()).items():
        for i, a in enumerate(members):
            for b in members[i + 1:]:
                edges.append(Edge(
                    kind=EdgeKind.BY_CATEGORY,
                    source=a.ordinal,
                    target=b.ordinal,
                    group=category,
                    style=_style(cfg, a),
                ))
    return edges


def build_edges(
    entities: list[PositionedEntity],
    styles: EdgeStylesConfig | None = None,
) -> EdgeSets:
    """Build all three edge sets. Empty input gives empty sets."""
    styles = styles or EdgeStylesConfig()
    edge_sets = EdgeSets(
        chronological=chronological_edges(entities, styles.chronological),
        by_speaker=speaker_edges(entities, styles.by_speaker),
        by_category=category_edges(entities, styles.by_category),
    )
    logger.debug(
        "Built edges: %d chronological, %d speaker, %d category",
        len(edge_sets.chronological), len(edge_sets.by_speaker), len(edge_sets.by_category),
    )
    return edge_sets


def chronological_neighbors(entities: list[PositionedEntity], ordinal: int) -> list[int]:
    """Ordinals of the scenes immediately before and after the given one."""
    ordinals = sorted(e.ordinal for e in entities)
    try:
        idx = ordinals.index(ordinal)
    except ValueError:
        return []
    neighbors: list[int] = []
    if idx > 0:
        neighbors.append(ordinals[idx - 1])
    if idx < len(ordinals) - 1:
        neighbors.append(ordinals[idx + 1])
    return neighbors
