"""
Vectorised wall surface index.

Same contract and results as WallSurfaceIndex, but tests the ray against all
faces at once with numpy. Worth it for large architectural models where the
per-face Python loop dominates.
"""

from typing import List
import numpy as np
from holecast_profile import profile
from holecast_types import SurfaceHit
from elements.hc_wall import FACE_TOLERANCE
from elements.solvers.hc_surface_index import BaseSurfaceIndex


class NumpyWallSurfaceIndex(BaseSurfaceIndex):
    """Numpy ray caster. Face arrays are built lazily and rebuilt after edits."""

    def __init__(self, faces=None):
        super().__init__(faces)
        self._arrays = None

    def _on_faces_changed(self) -> None:
        self._arrays = None

    def _get_arrays(self):
        if self._arrays is None:
            corners = np.array([face.corner.to_tuple() for face in self._faces], dtype=np.float64).reshape(-1, 3)
            u_edges = np.array([face.u_edge.to_tuple() for face in self._faces], dtype=np.float64).reshape(-1, 3)
            v_edges = np.array([face.v_edge.to_tuple() for face in self._faces], dtype=np.float64).reshape(-1, 3)
            normals = np.cross(u_edges, v_edges)
            norms = np.linalg.norm(normals, axis=1)
            normals = normals / np.where(norms > 0.0, norms, 1.0)[:, None]
            self._arrays = (
                corners,
                u_edges,
                v_edges,
                normals,
                np.einsum('ij,ij->i', u_edges, u_edges),
                np.einsum('ij,ij->i', v_edges, v_edges),
            )
        return self._arrays

    @profile("cast_ray_numpy")
    def cast_ray(self, origin, direction) -> List[SurfaceHit]:
        """Find every face hit by the ray, nearest first (see WallSurfaceIndex.cast_ray)."""
        if not self._faces:
            return []

        o = np.asarray(tuple(origin), dtype=np.float64)
        d = np.asarray(tuple(direction), dtype=np.float64)
        d_len = np.linalg.norm(d)
        if d_len < 1e-10:
            return []
        d = d / d_len

        corners, u_edges, v_edges, normals, u_len_sq, v_len_sq = self._get_arrays()

        denom = normals @ d
        facing = np.abs(denom) >= FACE_TOLERANCE
        safe_denom = np.where(facing, denom, 1.0)
        t = np.einsum('ij,ij->i', normals, corners - o) / safe_denom

        local = o + t[:, None] * d - corners
        a = np.einsum('ij,ij->i', local, u_edges) / u_len_sq
        b = np.einsum('ij,ij->i', local, v_edges) / v_len_sq

        lo, hi = -FACE_TOLERANCE, 1.0 + FACE_TOLERANCE
        mask = facing & (t >= lo) & (a >= lo) & (a <= hi) & (b >= lo) & (b <= hi)

        indices = np.nonzero(mask)[0]
        ordered = indices[np.argsort(t[indices], kind='stable')]
        return [SurfaceHit(self._faces[i].surface_id, max(float(t[i]), 0.0)) for i in ordered]
