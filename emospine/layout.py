"""Curve layout: places scenes along the spine in story order.

Two strategies satisfy the same contract (deterministic position from the
scene's index, monotonic progression along y, angular spread so neighbours
don't overlap):

* HelixLayout: wraps scenes around the 3D guide in a helix, top to bottom.
  World units, y decreases with story order. Default.
* GoldenAngleLayout: 2D scatter along a vertical axis in viewport pixels,
  angle stepped by the golden angle. y increases with story order (screen
  coordinates).

Secondary emotions become satellites fanned around their primary particle.
"""

import abc
import logging
import math
from dataclasses import dataclass, field

from emospine.config import Config, EncodingConfig, GoldenAngleConfig, HelixConfig
from emospine.encoding import (
    blur_size_scale,
    lighten,
    resolve_blur,
    resolve_color,
    resolve_opacity,
    resolve_size,
)
from emospine.guide import GuideGeometry
from emospine.models import RGB, PositionedEntity, Record, Satellite, Vec3

logger = logging.getLogger(__name__)


@dataclass
class LayoutParams:
    """Everything besides the records that a layout depends on."""
    guide: GuideGeometry = field(default_factory=GuideGeometry)
    viewport_width: int = 960
    viewport_height: int = 1400
    encoding: EncodingConfig = field(default_factory=EncodingConfig)

    @classmethod
    def from_config(cls, config: Config, guide: GuideGeometry | None = None) -> "LayoutParams":
        return cls(
            guide=guide or GuideGeometry(),
            viewport_width=config.layout.viewport_width,
            viewport_height=config.layout.viewport_height,
            encoding=config.encoding,
        )


@dataclass(frozen=True)
class SatelliteFan:
    """Where satellites sit relative to their primary particle."""
    start_offset: float  # radians added to the primary's angle
    sweep: float  # total arc shared by all satellites
    ring_factor: float  # ring radius as a multiple of primary size
    z_wobble: float = 0.0


# --- Strategies ---


class LayoutStrategy(abc.ABC):
    """Maps a scene's index along the story to a primary position."""

    name: str = ""
    axis_direction: int = -1  # sign of dy as the ordinal index increases
    fan: SatelliteFan

    @abc.abstractmethod
    def primary(self, idx: int, record: Record, t: float, params: LayoutParams) -> tuple[Vec3, float]:
        """Return (position, angle) for the scene at index idx, t in [0, 1]."""
        ...

    @abc.abstractmethod
    def size_range(self, params: LayoutParams) -> tuple[float, float]:
        """Min and max particle size in this strategy's units."""
        ...


class HelixLayout(LayoutStrategy):
    name = "helix"
    axis_direction = -1
    fan = SatelliteFan(start_offset=math.pi * 0.25, sweep=math.pi * 1.6, ring_factor=1.8, z_wobble=0.08)

    def __init__(self, config: HelixConfig | None = None) -> None:
        self.config = config or HelixConfig()

    def anchors(self, guide: GuideGeometry) -> tuple[float, float]:
        """Top and bottom y, symmetric about the origin the camera orbits."""
        reach = guide.height / 2 + self.config.anchor_margin
        return reach, -reach

    def primary(self, idx: int, record: Record, t: float, params: LayoutParams) -> tuple[Vec3, float]:
        cfg = self.config
        top, bottom = self.anchors(params.guide)
        y = top - t * (top - bottom)
        angle = cfg.angle_step * idx
        # Radius must clear the guide object itself
        base = max(cfg.radial_base, params.guide.half_width + cfg.radial_jitter)
        radius = base + math.sin(idx * cfg.jitter_frequency) * cfg.radial_jitter
        return (math.cos(angle) * radius, y, math.sin(angle) * radius), angle

    def size_range(self, params: LayoutParams) -> tuple[float, float]:
        return params.encoding.min_size, params.encoding.max_size


class GoldenAngleLayout(LayoutStrategy):
    name = "golden_angle"
    axis_direction = 1
    fan = SatelliteFan(start_offset=0.4, sweep=math.pi * 1.8, ring_factor=1.4)

    def __init__(self, config: GoldenAngleConfig | None = None) -> None:
        self.config = config or GoldenAngleConfig()

    def primary(self, idx: int, record: Record, t: float, params: LayoutParams) -> tuple[Vec3, float]:
        cfg = self.config
        w, h = params.viewport_width, params.viewport_height
        top = h * cfg.top_fraction
        bottom = h * cfg.bottom_fraction
        short_side = min(w, h)
        offset = (
            short_side * cfg.radial_base_fraction
            + short_side * cfg.radial_jitter_fraction * math.sin(idx * cfg.jitter_frequency)
        )
        angle = math.radians((record.ordinal * cfg.golden_angle_deg) % 360)
        x = w * 0.5 + math.cos(angle) * offset
        y = top + t * (bottom - top)
        return (x, y, 0.0), angle

    def size_range(self, params: LayoutParams) -> tuple[float, float]:
        return self.config.min_radius, self.config.max_radius


STRATEGIES: dict[str, type[LayoutStrategy]] = {
    HelixLayout.name: HelixLayout,
    GoldenAngleLayout.name: GoldenAngleLayout,
}


def make_strategy(config: Config) -> LayoutStrategy:
    """Build the strategy named in config.layout.strategy."""
    name = config.layout.strategy
    if name == HelixLayout.name:
        return HelixLayout(config.layout.helix)
    if name == GoldenAngleLayout.name:
        return GoldenAngleLayout(config.layout.golden_angle)
    raise ValueError(f"Unknown layout strategy '{name}' (expected one of {sorted(STRATEGIES)})")


# --- Layout ---


def _satellites(
    record: Record,
    position: Vec3,
    angle: float,
    size: float,
    color: RGB,
    fan: SatelliteFan,
    encoding: EncodingConfig,
) -> list[Satellite]:
    count = len(record.secondary)
    if not count:
        return []
    x, y, z = position
    ring = size * fan.ring_factor
    step = fan.sweep / max(1, count)
    faded = lighten(color, encoding.satellite_lighten)
    satellites: list[Satellite] = []
    for i, label in enumerate(record.secondary):
        theta = angle + fan.start_offset + i * step
        satellites.append(Satellite(
            label=label,
            position=(
                x + math.cos(theta) * ring,
                y + math.sin(theta) * ring,
                z + math.sin(theta * 0.8) * fan.z_wobble,
            ),
            size=size * encoding.satellite_size_factor,
            opacity=encoding.satellite_opacity,
            color=faded,
        ))
    return satellites


def layout(
    records: list[Record],
    params: LayoutParams | None = None,
    strategy: LayoutStrategy | None = None,
) -> list[PositionedEntity]:
    """Position and encode every record. Output is ordered by ordinal.

    Pure function of its inputs: calling it twice with the same records and
    params gives identical entities.
    """
    params = params or LayoutParams()
    strategy = strategy or HelixLayout()
    ordered = sorted(records, key=lambda r: r.ordinal)
    n = len(ordered)
    min_size, max_size = strategy.size_range(params)
    enc = params.encoding

    entities: list[PositionedEntity] = []
    for idx, record in enumerate(ordered):
        t = 0.0 if n == 1 else idx / (n - 1)
        position, angle = strategy.primary(idx, record, t, params)
        size = resolve_size(record.intensity, min_size, max_size)
        color = resolve_color(record.category)
        entities.append(PositionedEntity(
            ordinal=record.ordinal,
            category=record.category,
            speaker=record.speaker,
            position=position,
            angle=angle,
            size=size,
            render_size=size * blur_size_scale(record.intensity, enc),
            opacity=resolve_opacity(record.intensity, enc),
            blur=resolve_blur(record.intensity, enc),
            color=color,
            satellites=_satellites(record, position, angle, size, color, strategy.fan, enc),
        ))

    logger.debug("Laid out %d scenes with %s strategy", n, strategy.name)
    return entities
