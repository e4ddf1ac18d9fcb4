"""
Ray-cast backend selection for Holecast.

Usage:
    from backend import set_raycast_backend, get_surface_index

    set_raycast_backend('numpy')
    index = get_surface_index().from_walls(walls)

numpy is a hard dependency, so both backends are always available.
"""

# =============================================================================
# Backend Selection
# =============================================================================

BACKENDS = ('python', 'numpy')

_raycast_backend = 'python'


def set_raycast_backend(backend: str) -> None:
    """
    Set the ray-cast backend.

    Args:
        backend:
            'python' - pure Python face loop (default)
            'numpy' - vectorised over all wall faces
    """
    global _raycast_backend
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend: {backend}. Use 'python' or 'numpy'.")

    _raycast_backend = backend


def get_raycast_backend() -> str:
    """Get the current ray-cast backend."""
    return _raycast_backend


def get_surface_index():
    """Get the surface index class for the current backend."""
    if _raycast_backend == 'numpy':
        from elements.solvers.hc_numpy_surface_index import NumpyWallSurfaceIndex
        return NumpyWallSurfaceIndex

    from elements.solvers.hc_surface_index import WallSurfaceIndex
    return WallSurfaceIndex
