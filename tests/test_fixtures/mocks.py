"""Mock collaborators and sample host projects for Holecast testing."""

from dataclasses import dataclass, field
from typing import List, Optional
from holecast_types import Identity, SurfaceHit
from elements.hc_penetrating_element import LinearPenetratingElement
from host.hc_document import HostDocument
from mathutils.hc_curves import Line

WIDTH_PARAMETER = "ADSK_Размер_Ширина"
HEIGHT_PARAMETER = "ADSK_Размер_Высота"
OPENING_FAMILY = "Отверстие"


def hit(element_id: int, distance: float, linked_element_id: Optional[int] = None) -> SurfaceHit:
    """Shorthand for a SurfaceHit on wall `element_id`."""
    return SurfaceHit(Identity(element_id, linked_element_id), distance)


def make_linear_element(length=10.0, diameter=0.5, origin=(0.0, 0.0, 0.0),
                        direction=(1.0, 0.0, 0.0)) -> LinearPenetratingElement:
    """A straight element along `direction`."""
    return LinearPenetratingElement(
        origin=origin,
        direction=direction,
        length=length,
        nominal_diameter=diameter,
    )


class ScriptedRayCaster:
    """Ray caster returning a fixed hit list, in the given order, and recording calls.

    Examples:
        >>> caster = ScriptedRayCaster([hit(1, 2.0), hit(2, 7.0)])
        >>> IntersectionResolver.resolve(element, caster)
        >>> caster.calls  # [(origin, direction)]
    """

    def __init__(self, hits):
        self.hits = list(hits)
        self.calls = []

    def __call__(self, origin, direction):
        self.calls.append((origin, direction))
        return list(self.hits)


class FailingRayCaster:
    """Ray caster that always raises the given exception."""

    def __init__(self, error: Exception):
        self.error = error

    def __call__(self, origin, direction):
        raise self.error


@dataclass
class SampleProject:
    """Three open documents wired the way the batch expects them.

    Architectural model "Project_АР":
        wall_a: along Y at x=5, 0.5 thick, 10 high, on level_1
        wall_b: along Y at x=15, same size
        3D views: a template first, then "{3D}"
        "Отверстие" generic model symbol (inactive) with width/height parameters

    HVAC model "Project_ОВ":
        duct: (0,0,3) -> (20,0,3), diameter 0.8; crosses wall_a and wall_b

    Plumbing model "Project_ВК":
        pipe: (0,2,1) -> (10,2,1), diameter 0.1; crosses wall_a only
        riser: vertical, crosses nothing
    """
    arch: HostDocument
    hvac: HostDocument
    plumbing: HostDocument
    wall_a: object
    wall_b: object
    level_1: object
    symbol: object
    duct: object
    pipe: object
    riser: object
    extra: dict = field(default_factory=dict)

    @property
    def documents(self) -> List[HostDocument]:
        return [self.arch, self.hvac, self.plumbing]


def build_sample_project(parameter_names=(WIDTH_PARAMETER, HEIGHT_PARAMETER)) -> SampleProject:
    arch = HostDocument("Project_АР")
    level_1 = arch.add_level("Level 1", 0.0)
    wall_a = arch.add_wall((5, -10, 0), (5, 10, 0), 0.5, 10.0, level_1)
    wall_b = arch.add_wall((15, -10, 0), (15, 10, 0), 0.5, 10.0, level_1)
    arch.add_view_3d("3D Template", is_template=True)
    arch.add_view_3d("{3D}")
    symbol = arch.add_family_symbol(OPENING_FAMILY, "Round", parameter_names)

    hvac = HostDocument("Project_ОВ")
    duct = hvac.add_duct(Line((0, 0, 3), (20, 0, 3)), 0.8, "Supply Air")

    plumbing = HostDocument("Project_ВК")
    pipe = plumbing.add_pipe(Line((0, 2, 1), (10, 2, 1)), 0.1, "Cold Water")
    riser = plumbing.add_pipe(Line((2, 2, 0), (2, 2, 5)), 0.1, "Cold Water")

    return SampleProject(
        arch=arch,
        hvac=hvac,
        plumbing=plumbing,
        wall_a=wall_a,
        wall_b=wall_b,
        level_1=level_1,
        symbol=symbol,
        duct=duct,
        pipe=pipe,
        riser=riser,
    )
