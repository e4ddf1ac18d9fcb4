"""
Centerline geometry for ducts and pipes.

Host models describe a duct or pipe route by a location curve. Only straight
lines can be ray-cast; arcs (bent runs) and multi-segment poly curves exist so
that callers can represent what the host hands over and get a clear
rejection instead of a silently wrong opening.
"""

import math
from dataclasses import dataclass
from typing import Tuple
from mathutils.vec3 import Vec3


@dataclass(frozen=True)
class Line:
    """A bounded straight segment between two end points."""
    start: Vec3
    end: Vec3

    def __post_init__(self):
        object.__setattr__(self, 'start', Vec3(self.start))
        object.__setattr__(self, 'end', Vec3(self.end))

    def get_end_point(self, index: int) -> Vec3:
        """End point 0 is the start, end point 1 is the end."""
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError(f"Line end point index {index} out of range")

    @property
    def length(self) -> float:
        return (self.end - self.start).length()

    @property
    def direction(self) -> Vec3:
        """Unit direction from start to end (zero vector for degenerate lines)."""
        return (self.end - self.start).normalized()

    def is_bound(self) -> bool:
        return not (self.end - self.start).is_zero()


@dataclass(frozen=True)
class Arc:
    """
    A circular arc through three points.

    Only the end points and the sweep are needed here; the arc is never
    ray-cast.
    """
    start: Vec3
    end: Vec3
    center: Vec3

    def __post_init__(self):
        object.__setattr__(self, 'start', Vec3(self.start))
        object.__setattr__(self, 'end', Vec3(self.end))
        object.__setattr__(self, 'center', Vec3(self.center))

    def get_end_point(self, index: int) -> Vec3:
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError(f"Arc end point index {index} out of range")

    @property
    def radius(self) -> float:
        return (self.start - self.center).length()

    @property
    def length(self) -> float:
        a = (self.start - self.center).normalized()
        b = (self.end - self.center).normalized()
        sweep = math.acos(max(-1.0, min(1.0, a.dot(b))))
        return self.radius * sweep


@dataclass(frozen=True)
class PolyCurve:
    """A chain of curves, e.g. a run exported as several connected segments."""
    segments: Tuple

    def get_end_point(self, index: int) -> Vec3:
        if index == 0:
            return self.segments[0].get_end_point(0)
        if index == 1:
            return self.segments[-1].get_end_point(1)
        raise IndexError(f"PolyCurve end point index {index} out of range")

    @property
    def length(self) -> float:
        return sum(segment.length for segment in self.segments)


def describe_curve(curve) -> str:
    """Short human readable name of a curve kind for error messages."""
    if curve is None:
        return "no curve"
    return type(curve).__name__
