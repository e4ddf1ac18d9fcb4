"""
    Ducts and pipes that penetrate walls.

    Both kinds expose the same `diameter` and `centerline`, so nothing
    downstream needs to know which one it is handling. The resolver works on
    LinearPenetratingElement, the straight-line view of either kind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional
from holecast_types import UnsupportedGeometryError
from mathutils.hc_curves import Line, describe_curve
from mathutils.hc_ray import HCRay
from mathutils.vec3 import Vec3


class PenetratingKind(Enum):
    DUCT = "duct"
    PIPE = "pipe"


@dataclass(frozen=True)
class LinearPenetratingElement:
    """
    A straight duct or pipe segment reduced to what the ray cast needs.

    Attributes:
        origin: First end point of the centerline
        direction: Unit vector from the first to the second end point
        length: Centerline length
        nominal_diameter: Size given to every opening this element produces
        element_id: Source element id, for diagnostics only
    """
    origin: Vec3
    direction: Vec3
    length: float
    nominal_diameter: float
    element_id: Optional[int] = None

    def __post_init__(self):
        direction = Vec3(self.direction)
        if direction.is_zero():
            raise UnsupportedGeometryError(
                f"Element {self.element_id} has no direction", element_id=self.element_id)
        if self.length < 0.0:
            raise UnsupportedGeometryError(
                f"Element {self.element_id} has negative length {self.length}", element_id=self.element_id)
        object.__setattr__(self, 'origin', Vec3(self.origin))
        object.__setattr__(self, 'direction', direction.normalized())
        object.__setattr__(self, 'length', float(self.length))

    @property
    def ray(self) -> HCRay:
        return HCRay(origin=self.origin, direction=self.direction, length=self.length)

    @staticmethod
    def from_curve(curve, nominal_diameter: float,
                   element_id: Optional[int] = None) -> 'LinearPenetratingElement':
        """
        Build from a host centerline.

        Raises:
            UnsupportedGeometryError: The curve is not a bounded straight Line.
        """
        if not isinstance(curve, Line):
            raise UnsupportedGeometryError(
                f"Element {element_id} has a {describe_curve(curve)} centerline; "
                f"only straight lines can be ray-cast",
                element_id=element_id)
        if not curve.is_bound():
            raise UnsupportedGeometryError(
                f"Element {element_id} has a zero-length centerline",
                element_id=element_id)

        return LinearPenetratingElement(
            origin=curve.get_end_point(0),
            direction=curve.direction,
            length=curve.length,
            nominal_diameter=float(nominal_diameter),
            element_id=element_id,
        )


@dataclass
class PenetratingElement:
    """A duct or pipe from one of the engineering models."""
    id: int
    centerline: object
    diameter: float
    system_name: str = ""

    kind: ClassVar[PenetratingKind]

    def to_linear(self) -> LinearPenetratingElement:
        return LinearPenetratingElement.from_curve(self.centerline, self.diameter, element_id=self.id)


@dataclass
class Duct(PenetratingElement):
    """Round duct from the HVAC model."""
    kind: ClassVar[PenetratingKind] = PenetratingKind.DUCT


@dataclass
class Pipe(PenetratingElement):
    """Pipe from the plumbing model."""
    kind: ClassVar[PenetratingKind] = PenetratingKind.PIPE
