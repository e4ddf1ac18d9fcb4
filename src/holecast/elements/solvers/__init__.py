"""
Solvers for wall penetrations.

Pipeline:
1. Surface index - casts a centerline ray against wall faces
2. IntersectionResolver - truncates, deduplicates and sizes the hits
"""

from .hc_intersection_resolver import (
    IntersectionResolver,
    resolve,
    sort_by_proximity,
    filter_hits_within,
    deduplicate_hits,
)

from .hc_surface_index import (
    BaseSurfaceIndex,
    WallSurfaceIndex,
)

from .hc_numpy_surface_index import (
    NumpyWallSurfaceIndex,
)

__all__ = [
    # Stage 1: Ray casting
    'BaseSurfaceIndex',
    'WallSurfaceIndex',
    'NumpyWallSurfaceIndex',
    # Stage 2: Resolution
    'IntersectionResolver',
    'resolve',
    'sort_by_proximity',
    'filter_hits_within',
    'deduplicate_hits',
]
