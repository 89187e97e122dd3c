"""Ambient frame state: drifting background particles and distance fog.

Re-evaluated every render tick. Nothing here is interactive or depends on
the loaded scenes.
"""

from dataclasses import dataclass

import numpy as np

from emospine.encoding import EMOTION_COLORS


@dataclass(frozen=True)
class AmbientFrame:
    """Background particle positions and fog settings for one tick."""
    elapsed: float
    positions: np.ndarray
    colors: np.ndarray
    fog_near: float
    fog_far: float


class BackgroundField:
    """A shell of faint palette-colored particles that drift slowly in place."""

    def __init__(
        self,
        count: int = 1800,
        seed: int = 7,
        inner_radius: float = 7.0,
        thickness: float = 3.5,
    ) -> None:
        rng = np.random.default_rng(seed)
        radius = inner_radius + rng.random(count) * thickness
        theta = np.arccos(2 * rng.random(count) - 1)
        phi = rng.random(count) * np.pi * 2
        self.base = np.column_stack([
            radius * np.sin(theta) * np.cos(phi),
            radius * np.cos(theta),
            radius * np.sin(theta) * np.sin(phi),
        ])
        palette = np.array(list(EMOTION_COLORS.values()), dtype=np.uint8)
        self.colors = palette[rng.integers(0, len(palette), count)]
        self.phases = rng.random((count, 3)) * 10

    def __len__(self) -> int:
        return len(self.base)

    def positions_at(self, elapsed: float) -> np.ndarray:
        """Particle positions after `elapsed` seconds, shape (count, 3)."""
        drift = np.column_stack([
            np.sin(elapsed * 0.18 + self.phases[:, 0]) * 0.18,
            np.cos(elapsed * 0.2 + self.phases[:, 1]) * 0.22,
            np.sin(elapsed * 0.16 + self.phases[:, 2]) * 0.18,
        ])
        return self.base + drift


def fog_range(camera_distance: float) -> tuple[float, float]:
    """Fog (near, far) that keeps the spine readable from any orbit distance."""
    return max(0.5, camera_distance * 0.3), camera_distance * 3.5


def fog_factor(depth: float, near: float, far: float) -> float:
    """0 = no fog, 1 = fully fogged, linear between near and far."""
    if depth <= near:
        return 0.0
    if depth >= far:
        return 1.0
    return (depth - near) / (far - near)
