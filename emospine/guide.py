"""Guide geometry: the spine the scene helix wraps around.

The guide is loaded from a YAML/JSON file of polyline points (exported from
the spine model) and fitted to a fixed height, centered on the origin. If the
file is missing or unusable the default geometry is used, so the layout
never waits on a broken asset.
"""

import asyncio
import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel

from emospine.config import GuideConfig
from emospine.models import Vec3

logger = logging.getLogger(__name__)


class GuideGeometry(BaseModel):
    """Vertical extent of the guide object after fitting."""
    center: Vec3 = (0.0, -0.05, 0.0)
    height: float = 2.5
    scale: float = 1.0  # factor applied to the source points
    half_width: float = 0.0  # widest horizontal reach after scaling

    @property
    def top(self) -> float:
        return self.center[1] + self.height / 2

    @property
    def bottom(self) -> float:
        return self.center[1] - self.height / 2


def default_guide(config: GuideConfig | None = None) -> GuideGeometry:
    config = config or GuideConfig()
    return GuideGeometry(center=(0.0, config.vertical_offset, 0.0), height=config.target_height)


def fit_guide(
    points: list[Vec3],
    target_height: float = 2.5,
    vertical_offset: float = -0.05,
) -> GuideGeometry:
    """Scale a guide polyline to target_height and center it at the origin.

    Only the vertical extent matters to the layout; after fitting, the guide's
    bounding box center lands at (0, vertical_offset, 0).
    """
    if not points:
        raise ValueError("Guide has no points")
    ys = [p[1] for p in points]
    span = max(ys) - min(ys)
    if span <= 0:
        raise ValueError("Guide has zero height")
    scale = target_height / span
    cx = (max(p[0] for p in points) + min(p[0] for p in points)) / 2
    cz = (max(p[2] for p in points) + min(p[2] for p in points)) / 2
    reach = max(max(abs(p[0] - cx), abs(p[2] - cz)) for p in points)
    return GuideGeometry(
        center=(0.0, vertical_offset, 0.0),
        height=target_height,
        scale=scale,
        half_width=reach * scale,
    )


def _read_points(path: Path) -> list[Vec3]:
    text = path.read_text()
    if path.suffix == ".json":
        raw = json.loads(text)
    else:
        raw = yaml.safe_load(text)
    points = raw.get("points", []) if isinstance(raw, dict) else raw
    return [(float(p[0]), float(p[1]), float(p[2]) if len(p) > 2 else 0.0) for p in points]


async def load_guide(path: Path | None, config: GuideConfig | None = None) -> GuideGeometry:
    """Load and fit the guide. Falls back to the default geometry on any failure."""
    config = config or GuideConfig()
    if path is None:
        return default_guide(config)
    try:
        points = await asyncio.to_thread(_read_points, path)
        guide = fit_guide(points, config.target_height, config.vertical_offset)
    except (OSError, ValueError, TypeError, IndexError, AttributeError, yaml.YAMLError) as e:
        logger.warning("Guide load failed for %s (%s); using default guide", path, e)
        return default_guide(config)
    logger.info("Loaded guide from %s (%d points)", path, len(points))
    return guide
