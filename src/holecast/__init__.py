"""Holecast - wall openings where ducts and pipes penetrate walls."""
import sys
from pathlib import Path

__version__ = "0.1.0"

# Add src/holecast to path for flat imports used by the codebase
# This allows imports like `from holecast_engine import run` to work
_src_path = Path(__file__).parent
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

# Main API - use flat import (after path setup)
from holecast_engine import run, HolecastConfig, HolecastResult
from holecast_types import (
    Identity,
    SurfaceHit,
    PlacementResult,
    HolecastError,
    UnsupportedGeometryError,
    CollaboratorFailure,
    HostLookupError,
    DocumentNotFoundError,
    ViewNotFoundError,
    FamilyNotFoundError,
)
from elements.hc_penetrating_element import LinearPenetratingElement, Duct, Pipe
from elements.solvers import IntersectionResolver, resolve
from backend import BACKENDS, get_raycast_backend, set_raycast_backend
from logging_config import setup_logging


__all__ = [
    'run',
    'HolecastConfig',
    'HolecastResult',
    'Identity',
    'SurfaceHit',
    'PlacementResult',
    'LinearPenetratingElement',
    'Duct',
    'Pipe',
    'IntersectionResolver',
    'resolve',
    'HolecastError',
    'UnsupportedGeometryError',
    'CollaboratorFailure',
    'HostLookupError',
    'DocumentNotFoundError',
    'ViewNotFoundError',
    'FamilyNotFoundError',
    'BACKENDS',
    'get_raycast_backend',
    'set_raycast_backend',
    'setup_logging',
]
