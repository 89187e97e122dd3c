"""Front-camera projection from layout coordinates to canvas pixels."""

from emospine.ambient import fog_factor, fog_range
from emospine.config import Config
from emospine.models import RenderPayload, Vec3


class Projection:
    """Maps layout coordinates to canvas pixels.

    Helix layouts are in world units centered on the origin and are scaled
    to fit; golden-angle layouts are already in viewport pixels and are only
    rescaled to the canvas.
    """

    def __init__(self, payload: RenderPayload, config: Config) -> None:
        r = config.render
        self.width, self.height = r.width, r.height
        self.camera_distance = r.camera_distance
        self.fog_near, self.fog_far = fog_range(r.camera_distance)
        self.world = payload.strategy != "golden_angle"
        if self.world:
            xs = [abs(e.position[0]) for e in payload.entities] or [1.0]
            ys = [abs(e.position[1]) for e in payload.entities] or [1.0]
            self.scale = min(
                r.pixels_per_unit,
                self.width * 0.4 / max(max(xs), 1e-6),
                self.height * 0.42 / max(max(ys), 1e-6),
            )
        else:
            self.sx = self.width / config.layout.viewport_width
            self.sy = self.height / config.layout.viewport_height
            self.scale = min(self.sx, self.sy)

    def point(self, position: Vec3) -> tuple[float, float]:
        x, y, _ = position
        if self.world:
            return self.width / 2 + x * self.scale, self.height / 2 - y * self.scale
        return x * self.sx, y * self.sy

    def fog(self, position: Vec3) -> float:
        """0 at the near plane, 1 at the far plane. Flat layouts have no fog."""
        if not self.world:
            return 0.0
        return fog_factor(self.camera_distance - position[2], self.fog_near, self.fog_far)
