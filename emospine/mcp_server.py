#!/usr/bin/env python3
"""Emotional spine MCP server: query scenes, layout and relationships."""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from emospine.config import Config, load_config
from emospine.data import section_for
from emospine.encoding import emotion_group, to_hex
from emospine.inspect import describe
from emospine.models import EdgeKind, HighlightState
from emospine.session import VisualizationSession

mcp = FastMCP("emospine")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_session: VisualizationSession | None = None
_config: Config | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


async def _get_session() -> VisualizationSession:
    global _session
    if _session is None:
        session = VisualizationSession(_get_config())
        await session.load_from_config()
        logger.info("Session ready (%s, %d scenes)", session.strategy.name, len(session.records))
        _session = session
    return _session


def _scene_summary(session: VisualizationSession, ordinal: int) -> dict:
    record = session.record(ordinal)
    section = section_for(ordinal)
    return {
        "scene": record.ordinal,
        "emotion": record.category,
        "group": emotion_group(record.category).value,
        "intensity": record.intensity,
        "speaker": record.speaker,
        "section": section.key if section else None,
    }


@mcp.tool()
async def list_scenes() -> str:
    """List all scenes in story order with emotion, intensity and speaker."""
    session = await _get_session()
    return json.dumps([_scene_summary(session, r.ordinal) for r in session.records])


@mcp.tool()
async def get_scene(scene: int) -> str:
    """Get one scene's full annotation and tooltip text."""
    session = await _get_session()
    try:
        record = session.record(scene)
        result = record.model_dump(mode="json")
        result["tooltip"] = describe(record)
        result["color"] = to_hex(session.entity(scene).color)
        return json.dumps(result)
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
async def get_layout(strategy: Optional[str] = None) -> str:
    """Get positioned scenes. Strategy is 'helix' (3D, default) or 'golden_angle' (2D pixels)."""
    session = await _get_session()
    try:
        if strategy is not None and strategy != session.strategy.name:
            config = _get_config().model_copy(deep=True)
            config.layout.strategy = strategy
            other = VisualizationSession(config)
            await other.load_from_config()
            payload = other.payload()
            other.close()
        else:
            payload = session.payload()
        return json.dumps({
            "strategy": payload.strategy,
            "entities": [e.model_dump(mode="json") for e in payload.entities],
        })
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
async def get_edges(kind: Optional[str] = None) -> str:
    """Get relationship edges. Kind is 'chronological', 'by-speaker' or 'by-category' (all if omitted)."""
    session = await _get_session()
    try:
        kinds = [EdgeKind(kind)] if kind else list(EdgeKind)
        return json.dumps({
            k.value: [
                {"source": e.source, "target": e.target, "group": e.group}
                for e in session.edges.of_kind(k)
            ]
            for k in kinds
        })
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
async def hover(scene: Optional[int] = None) -> str:
    """Make a scene active (or clear with no argument) and return what it highlights."""
    session = await _get_session()
    try:
        if scene is not None:
            session.record(scene)
        session.activate(scene)
        snapshot = session.interaction.snapshot
        return json.dumps({
            "active": snapshot.active,
            "related": sorted(o for o, s in snapshot.entities.items() if s == HighlightState.RELATED),
            "dimmed": sorted(o for o, s in snapshot.entities.items() if s == HighlightState.DIMMED),
            "related_edges": sorted(k for k, s in snapshot.edges.items() if s == HighlightState.RELATED),
        })
    except ValueError as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
