"""
Wall surface index - the ray caster the resolver is fed with.

Holds the planar faces of every wall that openings may be cut into, both
walls of the active model and walls seen through linked models, and reports
every face a ray strikes. Like a host reference intersector targeting wall
elements, it reports one hit per struck face, so a ray through a wall yields
two hits (front and back) sharing one Identity.

Usage:
    index = WallSurfaceIndex.from_walls(arch_walls)
    index.add_linked_walls(link_id, linked_walls, offset=(10, 0, 0))
    hits = index.cast_ray(origin, direction)   # List[SurfaceHit], nearest first
"""

from typing import Iterable, List, Optional
from holecast_profile import profile
from holecast_types import Identity, SurfaceHit
from elements.hc_wall import Wall, WallFace
from mathutils.vec3 import Vec3


class BaseSurfaceIndex:
    """Face bookkeeping shared by the ray-cast backends."""

    def __init__(self, faces: Optional[Iterable[WallFace]] = None):
        self._faces: List[WallFace] = list(faces or [])

    @classmethod
    def from_walls(cls, walls: Iterable[Wall]) -> 'BaseSurfaceIndex':
        index = cls()
        index.add_walls(walls)
        return index

    @property
    def faces(self) -> List[WallFace]:
        return list(self._faces)

    def __len__(self):
        return len(self._faces)

    def _on_faces_changed(self) -> None:
        """Hook for backends that cache derived data."""

    def add_wall(self, wall: Wall, surface_id: Optional[Identity] = None, offset=(0.0, 0.0, 0.0)) -> None:
        self._faces.extend(wall.get_faces(surface_id, offset))
        self._on_faces_changed()

    def add_walls(self, walls: Iterable[Wall]) -> None:
        for wall in walls:
            self.add_wall(wall)

    def add_linked_walls(self, link_instance_id: int, walls: Iterable[Wall], offset=(0.0, 0.0, 0.0)) -> None:
        """
        Add walls of a linked model.

        Each face is identified by (link_instance_id, wall.id) and moved by the
        link's offset into the active model's coordinates.
        """
        for wall in walls:
            self.add_wall(wall, Identity(link_instance_id, wall.id), offset)

    def cast_ray(self, origin, direction) -> List[SurfaceHit]:
        raise NotImplementedError

    def __call__(self, origin, direction) -> List[SurfaceHit]:
        return self.cast_ray(origin, direction)


class WallSurfaceIndex(BaseSurfaceIndex):
    """Pure Python ray caster, one face at a time."""

    @profile("cast_ray")
    def cast_ray(self, origin, direction) -> List[SurfaceHit]:
        """
        Find every face hit by the ray.

        Args:
            origin: Ray start point
            direction: Ray direction (normalized here; distances are world units)

        Returns:
            Hits in front of the origin, nearest first. Hits at equal distance
            keep the order their faces were added in.
        """
        origin = Vec3(origin)
        direction = Vec3(direction).normalized()
        if direction.is_zero():
            return []

        hits = []
        for face in self._faces:
            distance = face.intersect(origin, direction)
            if distance is not None:
                hits.append(SurfaceHit(face.surface_id, distance))

        hits.sort(key=lambda hit: hit.distance)
        return hits
