"""
HCRay - A ray with origin, direction, and length.
"""

from dataclasses import dataclass
from typing import Optional
from mathutils.vec3 import Vec3


@dataclass(frozen=True)
class HCRay:
    """A ray with origin, direction, and length."""
    origin: Vec3
    direction: Vec3  # Normalized
    length: float

    def point_at_distance(self, distance: float) -> Vec3:
        """Get the point `distance` units from the origin along the ray."""
        return self.origin + self.direction * distance

    def point_at_t(self, t: float) -> Vec3:
        """Get a point along the ray at parameter t (0-1 maps to origin-end)."""
        return self.point_at_distance(t * self.length)

    def project_point(self, point) -> float:
        """Project a point onto the ray and return the distance along it."""
        return (Vec3(point) - self.origin).dot(self.direction)

    def contains_distance(self, distance: float) -> bool:
        """True if a distance along the ray lies on the segment [0, length] (inclusive)."""
        return 0.0 <= distance <= self.length

    @property
    def end(self) -> Vec3:
        return self.point_at_distance(self.length)

    @staticmethod
    def from_points(start, end, tolerance: float = 1e-6) -> Optional['HCRay']:
        """Create a HCRay from two points. Returns None if points are too close."""
        start = Vec3(start)
        delta = Vec3(end) - start
        length = delta.length()
        if length < tolerance:
            return None
        return HCRay(origin=start, direction=delta / length, length=length)
