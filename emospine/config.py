"""Configuration loading for the emotional spine visualization."""

import math
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class HelixConfig(BaseModel):
    radial_base: float = 1.3
    radial_jitter: float = 0.25
    jitter_frequency: float = 0.75
    angle_step: float = math.pi * 0.38
    anchor_margin: float = 0.15  # distance past the guide ends for first/last scene


class GoldenAngleConfig(BaseModel):
    golden_angle_deg: float = 137.508
    top_fraction: float = 0.08
    bottom_fraction: float = 0.92
    radial_base_fraction: float = 0.07  # of min(viewport width, height)
    radial_jitter_fraction: float = 0.04
    jitter_frequency: float = 0.7
    min_radius: float = 6.0  # pixels
    max_radius: float = 24.0


class LayoutConfig(BaseModel):
    strategy: str = "helix"  # "helix" or "golden_angle"
    viewport_width: int = 960
    viewport_height: int = 1400
    helix: HelixConfig = Field(default_factory=HelixConfig)
    golden_angle: GoldenAngleConfig = Field(default_factory=GoldenAngleConfig)


class EncodingConfig(BaseModel):
    min_size: float = 0.02
    max_size: float = 0.40
    blur_threshold: float = 0.7
    solid_threshold: float = 0.99
    max_blur: float = 30.0
    satellite_lighten: float = 0.65
    satellite_opacity: float = 0.55
    satellite_size_factor: float = 0.45


class EdgeStyleConfig(BaseModel):
    width: float = 1.0
    opacity: float = 0.35
    dash: tuple[float, ...] | None = None
    lighten: float = 0.0
    blending: str = "normal"


class EdgeStylesConfig(BaseModel):
    chronological: EdgeStyleConfig = Field(default_factory=EdgeStyleConfig)
    by_speaker: EdgeStyleConfig = Field(default_factory=lambda: EdgeStyleConfig(
        width=1.4, opacity=0.28, dash=(6.0, 6.0), lighten=0.7,
    ))
    by_category: EdgeStyleConfig = Field(default_factory=lambda: EdgeStyleConfig(
        width=1.0, opacity=0.12, blending="additive",
    ))


class InteractionConfig(BaseModel):
    hit_tolerance: float = 0.18  # world units; golden_angle uses its max_radius in pixels
    dim_opacity: float = 0.25
    related_opacity: float = 1.0


class GuideConfig(BaseModel):
    path: str | None = None
    target_height: float = 2.5
    vertical_offset: float = -0.05


class RenderConfig(BaseModel):
    output_dir: str = "data/render"
    width: int = 900
    height: int = 1200
    pixels_per_unit: float = 300.0
    camera_distance: float = 6.0
    background: tuple[int, int, int] = (5, 6, 10)
    background_particles: int = 1800
    background_seed: int = 7


class Config(BaseModel):
    data_path: str | None = None  # scene CSV; bundled scenes when unset
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    edges: EdgeStylesConfig = Field(default_factory=EdgeStylesConfig)
    interaction: InteractionConfig = Field(default_factory=InteractionConfig)
    guide: GuideConfig = Field(default_factory=GuideConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @property
    def resolved_data_path(self) -> Path | None:
        """Resolve data_path relative to project root."""
        if self.data_path is None:
            return None
        p = Path(self.data_path).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_guide_path(self) -> Path | None:
        if self.guide.path is None:
            return None
        p = Path(self.guide.path).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.render.output_dir).expanduser()


def _project_root() -> Path:
    """Return the emospine project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
