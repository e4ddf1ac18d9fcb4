"""
    A wall is a straight, vertical, thick box. This is the geometry the ray
    caster tests duct and pipe centerlines against.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional
from holecast_types import Identity
from mathutils.vec3 import Vec3

# Tolerance for ray/face parallelism and for the in-face bounds check
FACE_TOLERANCE = 1e-9

_UP = Vec3(0.0, 0.0, 1.0)


class WallSide(IntEnum):
    FRONT = 0
    BACK = 1
    TOP = 2
    BOTTOM = 3
    START = 4
    END = 5


@dataclass(frozen=True)
class WallFace:
    """
    One planar rectangular face of a wall.

    The face spans corner + a * u_edge + b * v_edge for a, b in [0, 1].
    """
    surface_id: Identity
    side: WallSide
    corner: Vec3
    u_edge: Vec3
    v_edge: Vec3

    @property
    def normal(self) -> Vec3:
        return self.u_edge.cross(self.v_edge).normalized()

    def intersect(self, origin, direction) -> Optional[float]:
        """
        Distance along the ray to this face, or None if the ray misses it or
        only hits it behind the origin.
        """
        normal = self.normal
        denom = normal.dot(direction)
        if abs(denom) < FACE_TOLERANCE:
            return None

        t = normal.dot(self.corner - origin) / denom
        if t < -FACE_TOLERANCE:
            return None

        local = Vec3(origin) + Vec3(direction) * t - self.corner
        a = local.dot(self.u_edge) / self.u_edge.length_sq()
        b = local.dot(self.v_edge) / self.v_edge.length_sq()
        if a < -FACE_TOLERANCE or a > 1.0 + FACE_TOLERANCE:
            return None
        if b < -FACE_TOLERANCE or b > 1.0 + FACE_TOLERANCE:
            return None
        return max(t, 0.0)


@dataclass
class Wall:
    """
    A straight wall.

    `start` and `end` are the location line end points at the wall base; the
    location line runs through the middle of the wall thickness. Height grows
    along +Z.
    """
    id: int
    start: Vec3
    end: Vec3
    thickness: float
    height: float
    level_id: Optional[int] = None

    def __post_init__(self):
        self.start = Vec3(self.start)
        self.end = Vec3(self.end)

    def get_primary_axis(self) -> Vec3:
        """Unit vector along the location line, flattened to the XY plane."""
        delta = self.end - self.start
        return Vec3(delta.x, delta.y, 0.0).normalized()

    def get_normal_axis(self) -> Vec3:
        """Unit vector pointing out of the FRONT face."""
        return _UP.cross(self.get_primary_axis())

    def get_faces(self, surface_id: Optional[Identity] = None, offset=(0.0, 0.0, 0.0)) -> List[WallFace]:
        """
        Build the six faces of the wall solid.

        Args:
            surface_id: Identity stamped on every face (defaults to the local id)
            offset: Translation applied to the wall, used for linked models
        """
        if surface_id is None:
            surface_id = Identity(self.id)

        offset = Vec3(offset)
        start = self.start + offset
        span = Vec3(self.end.x - self.start.x, self.end.y - self.start.y, 0.0)
        across = self.get_normal_axis() * self.thickness
        rise = _UP * self.height
        back_start = start - across * 0.5

        return [
            WallFace(surface_id, WallSide.FRONT, back_start + across, span, rise),
            WallFace(surface_id, WallSide.BACK, back_start, span, rise),
            WallFace(surface_id, WallSide.TOP, back_start + rise, span, across),
            WallFace(surface_id, WallSide.BOTTOM, back_start, span, across),
            WallFace(surface_id, WallSide.START, back_start, across, rise),
            WallFace(surface_id, WallSide.END, back_start + span, across, rise),
        ]
