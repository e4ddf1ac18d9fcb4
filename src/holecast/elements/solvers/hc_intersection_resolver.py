"""
Wall penetration resolver - turns one duct/pipe centerline into opening placements.

Core Concepts:
    Ray cast:
        The element's centerline is cast as a ray from its first end point along
        its direction. The ray caster is injected (any callable
        `cast_ray(origin, direction) -> Iterable[SurfaceHit]`), so the resolver
        never touches a host document.

    Truncation:
        The ray is infinite, the element is not. Hits farther than the element
        length are beyond its terminus and dropped. Both 0 and length are
        accepted.

    Deduplication:
        A ray through a thick wall strikes its front and back faces, and
        coincident geometry can report the same face twice. All hits with the
        same Identity.key collapse into the nearest one. Dedup is scoped to a
        single element: two ducts through the same wall get two openings.

    Ordering:
        Results are nearest first. Hits are stably sorted by distance, so
        equal-distance hits keep the ray caster's relative order.

Main API:
    placements = IntersectionResolver.resolve(element, cast_ray)
    placements -> List[PlacementResult]

Errors:
    UnsupportedGeometryError when a Duct/Pipe has a non-line centerline.
    Anything raised by cast_ray propagates unchanged.
"""

from typing import Callable, Iterable, List, Union
from holecast_profile import profile
from holecast_types import PlacementResult, SurfaceHit
from elements.hc_penetrating_element import LinearPenetratingElement, PenetratingElement


RayCaster = Callable[..., Iterable[SurfaceHit]]


def sort_by_proximity(hits: Iterable[SurfaceHit]) -> List[SurfaceHit]:
    """Nearest first; stable for equal distances."""
    return sorted(hits, key=lambda hit: hit.distance)


def filter_hits_within(hits: Iterable[SurfaceHit], length: float) -> List[SurfaceHit]:
    """Keep hits lying on the segment [0, length], both ends inclusive."""
    return [hit for hit in hits if 0.0 <= hit.distance <= length]


def deduplicate_hits(hits: Iterable[SurfaceHit]) -> List[SurfaceHit]:
    """Keep the first hit for every surface key, preserving order."""
    seen = set()
    unique = []
    for hit in hits:
        key = hit.surface_id.key
        if key in seen:
            continue
        seen.add(key)
        unique.append(hit)
    return unique


class IntersectionResolver:
    """
    Resolves where a straight penetrating element crosses walls.

    Stateless; every call is independent of every other.
    """

    @staticmethod
    def as_linear(element: Union[LinearPenetratingElement, PenetratingElement]) -> LinearPenetratingElement:
        """Reduce a Duct/Pipe to its straight-line form (raises UnsupportedGeometryError)."""
        if isinstance(element, LinearPenetratingElement):
            return element
        return element.to_linear()

    @staticmethod
    @profile("resolve_intersections")
    def resolve(element: Union[LinearPenetratingElement, PenetratingElement],
                cast_ray: RayCaster) -> List[PlacementResult]:
        """
        Compute opening placements for one element.

        Args:
            element: A LinearPenetratingElement, or a Duct/Pipe to convert
            cast_ray: Ray caster returning every surface hit along the ray

        Returns:
            One PlacementResult per distinct wall on the element, nearest
            first. Empty when the element crosses no wall.
        """
        linear = IntersectionResolver.as_linear(element)
        ray = linear.ray

        hits = sort_by_proximity(cast_ray(ray.origin, ray.direction))
        hits = filter_hits_within(hits, ray.length)
        hits = deduplicate_hits(hits)

        return [
            PlacementResult(
                insertion_point=ray.point_at_distance(hit.distance),
                size=linear.nominal_diameter,
                target_surface_id=hit.surface_id,
                distance=hit.distance,
            )
            for hit in hits
        ]


def resolve(element, cast_ray: RayCaster) -> List[PlacementResult]:
    """Module-level shortcut for IntersectionResolver.resolve."""
    return IntersectionResolver.resolve(element, cast_ray)
