"""Pointer hit-testing against primary scene particles."""

import logging
from dataclasses import dataclass

import numpy as np

from emospine.models import PositionedEntity, Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ray:
    """A pointer ray. Direction is normalized on construction."""
    origin: Vec3
    direction: Vec3

    def __post_init__(self) -> None:
        d = np.asarray(self.direction, dtype=float)
        norm = float(np.linalg.norm(d))
        if norm == 0.0:
            raise ValueError("Ray direction must be non-zero")
        object.__setattr__(self, "direction", tuple(float(c) for c in d / norm))

    @classmethod
    def orthographic(cls, x: float, y: float, depth: float = 100.0) -> "Ray":
        """Ray looking down -z through (x, y), as from a front-facing camera."""
        return cls(origin=(x, y, depth), direction=(0.0, 0.0, -1.0))


class SpatialIndex:
    """Nearest-particle lookup, built once per layout.

    Only primary particles are indexed; satellites are decoration. Positions
    are held in ordinal order so exact distance ties resolve to the lowest
    ordinal.
    """

    def __init__(self, entities: list[PositionedEntity], tolerance: float = 0.18) -> None:
        ordered = sorted(entities, key=lambda e: e.ordinal)
        self.tolerance = tolerance
        self._ordinals = np.array([e.ordinal for e in ordered], dtype=int)
        self._points = np.array([e.position for e in ordered], dtype=float).reshape(-1, 3)
        logger.debug("Indexed %d particles (tolerance %.3f)", len(ordered), tolerance)

    def __len__(self) -> int:
        return int(self._ordinals.size)

    def distances(self, ray: Ray) -> np.ndarray:
        """Perpendicular distance from each particle to the ray; inf for points behind it."""
        if not len(self):
            return np.empty(0)
        origin = np.asarray(ray.origin, dtype=float)
        direction = np.asarray(ray.direction, dtype=float)
        rel = self._points - origin
        along = rel @ direction
        perp = rel - np.outer(along, direction)
        dist = np.linalg.norm(perp, axis=1)
        dist[along < 0] = np.inf
        return dist

    def nearest(self, ray: Ray) -> int | None:
        """Ordinal of the closest particle within tolerance of the ray, or None."""
        dist = self.distances(ray)
        if not dist.size:
            return None
        dist = np.where(dist <= self.tolerance, dist, np.inf)
        idx = int(np.argmin(dist))  # first minimum, i.e. lowest ordinal on ties
        if not np.isfinite(dist[idx]):
            return None
        return int(self._ordinals[idx])
