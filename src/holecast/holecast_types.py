"""
    Provides the value types and error taxonomy shared across Holecast.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from mathutils.vec3 import Vec3


# ============================================================================
# IDENTITIES AND HITS
# ============================================================================

@dataclass(frozen=True)
class Identity:
    """
    Identifies a struck wall.

    Local walls carry only `element_id`. A wall that lives in a linked model
    is addressed through the link: `element_id` is the link instance in the
    active document and `linked_element_id` is the wall inside the linked
    document. Two walls with the same local id in different links therefore
    stay distinct.
    """
    element_id: int
    linked_element_id: Optional[int] = None

    @property
    def key(self) -> Tuple[int, Optional[int]]:
        """Deduplication key: hits sharing a key are the same logical wall."""
        return (self.element_id, self.linked_element_id)

    def is_linked(self) -> bool:
        return self.linked_element_id is not None

    def __str__(self):
        if self.is_linked():
            return f"{self.element_id}:{self.linked_element_id}"
        return str(self.element_id)


@dataclass(frozen=True)
class SurfaceHit:
    """A single ray/surface intersection reported by the ray caster."""
    surface_id: Identity
    distance: float  # Proximity from the ray origin


@dataclass(frozen=True)
class PlacementResult:
    """
    Where to put one opening.

    Attributes:
        insertion_point: origin + direction * distance
        size: Opening width and height (the penetrating element's diameter)
        target_surface_id: Wall that hosts the opening
        distance: Accepted proximity along the element's centerline
    """
    insertion_point: Vec3
    size: float
    target_surface_id: Identity
    distance: float


# ============================================================================
# ERRORS
# ============================================================================

class HolecastError(Exception):
    """Base class for all Holecast errors."""


class UnsupportedGeometryError(HolecastError):
    """A duct or pipe centerline is not a single straight line."""

    def __init__(self, message: str, element_id: Optional[int] = None):
        super().__init__(message)
        self.element_id = element_id


class CollaboratorFailure(HolecastError):
    """The host failed to place or parameterise an opening."""


class HostLookupError(HolecastError):
    """A document, view or family required by the batch could not be found."""


class DocumentNotFoundError(HostLookupError):
    pass


class ViewNotFoundError(HostLookupError):
    pass


class FamilyNotFoundError(HostLookupError):
    pass
