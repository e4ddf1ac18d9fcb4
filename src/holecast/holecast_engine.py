"""
Holecast Engine - Main entry point for placing wall openings.

Finds the HVAC and plumbing models among the open documents, casts every duct
and pipe centerline against the walls of the active architectural model
(including walls in its linked models), and places a sized opening instance
wherever one penetrates a wall.

Usage:
    from holecast_engine import run, HolecastConfig

    # Defaults: HVAC model title contains "ОВ", plumbing "ВК",
    # opening family "Отверстие"
    result = run(documents)

    # With configuration
    config = HolecastConfig(backend='numpy', on_unsupported='skip')
    result = run(documents, config=config)

    # With individual options
    result = run(documents, backend='numpy', profile=True)
    print(result.stats, result.timings)
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence

from backend import get_raycast_backend, get_surface_index, set_raycast_backend
from holecast_profile import perf_marker, profiling_session
from holecast_types import DocumentNotFoundError, HolecastError, UnsupportedGeometryError
from elements.solvers.hc_intersection_resolver import IntersectionResolver
from host.hc_document import (
    HostDocument,
    OpeningInstance,
    find_3d_view,
    find_document,
    find_family_symbol,
)

logger = logging.getLogger("holecast.engine")


# =============================================================================
# Configuration
# =============================================================================

Backend = Literal['python', 'numpy']
UnsupportedPolicy = Literal['fail', 'skip']


@dataclass
class HolecastConfig:
    """
    Configuration options for an opening placement batch.

    Attributes:
        backend: Ray-cast backend.
            - 'python': Pure Python face loop (default)
            - 'numpy': Vectorised over all faces

        hvac_title_token: Substring identifying the HVAC (duct) model title.
        plumbing_title_token: Substring identifying the plumbing (pipe) model title.
        active_title: Title substring of the architectural model that receives
            the openings. None means the first document.

        opening_family_name: Generic model family placed at each penetration.
        width_parameter / height_parameter: Localized names of the opening's
            size parameters; both receive the element diameter.

        transaction_name: Name of the single transaction wrapping all placements.
        activation_transaction_name: Name of the transaction activating the symbol.

        on_unsupported: What to do with a duct/pipe whose centerline is not a
            straight line.
            - 'fail': Abort the whole batch (default)
            - 'skip': Leave the element out and log a warning

        profile: Collect timings of the instrumented sections.
    """
    backend: Backend = 'python'
    hvac_title_token: str = "ОВ"
    plumbing_title_token: str = "ВК"
    active_title: Optional[str] = None
    opening_family_name: str = "Отверстие"
    width_parameter: str = "ADSK_Размер_Ширина"
    height_parameter: str = "ADSK_Размер_Высота"
    transaction_name: str = "Создание отверстий"
    activation_transaction_name: str = "Activate of family"
    on_unsupported: UnsupportedPolicy = 'fail'
    profile: bool = False


@dataclass
class HolecastResult:
    """
    Result of one placement batch.

    Attributes:
        document: The architectural document that received the openings.
        duct_openings / pipe_openings: Created instances, in creation order.
        skipped: Ids of elements left out under on_unsupported='skip'.
        stats: duct_count, pipe_count, opening_count, skipped_count.
        timings: Profile results when config.profile is set.
    """
    document: HostDocument
    duct_openings: List[OpeningInstance] = field(default_factory=list)
    pipe_openings: List[OpeningInstance] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)
    timings: Optional[Dict[str, Any]] = None

    @property
    def openings(self) -> List[OpeningInstance]:
        return self.duct_openings + self.pipe_openings


# =============================================================================
# Internal Helpers
# =============================================================================

def _get_active_document(documents: Sequence[HostDocument], config: HolecastConfig) -> HostDocument:
    if config.active_title is not None:
        return find_document(documents, config.active_title)
    if not documents:
        raise DocumentNotFoundError("No open documents")
    return documents[0]


def build_surface_index(document: HostDocument):
    """Index the document's own walls and the walls of every linked model."""
    index = get_surface_index()()
    index.add_walls(document.walls.values())
    for link in document.links.values():
        index.add_linked_walls(link.id, link.document.walls.values(), link.offset)
    return index


def _place_openings(document, elements, cast_ray, symbol, config, skipped) -> List[OpeningInstance]:
    """Resolve and place openings for one family of elements (ducts or pipes)."""
    created = []
    for element in elements:
        try:
            placements = IntersectionResolver.resolve(element, cast_ray)
        except UnsupportedGeometryError as e:
            if config.on_unsupported != 'skip':
                raise
            logger.warning("Skipping %s %s: %s", element.kind.value, element.id, e)
            skipped.append(element.id)
            continue

        for placement in placements:
            created.append(document.place_instance(
                placement.insertion_point,
                placement.target_surface_id,
                placement.size,
                symbol,
                config.width_parameter,
                config.height_parameter,
            ))
    return created


# =============================================================================
# Main API
# =============================================================================

def run(
    documents: Sequence[HostDocument],
    config: Optional[HolecastConfig] = None,
    *,
    backend: Optional[Backend] = None,
    profile: Optional[bool] = None,
    on_unsupported: Optional[UnsupportedPolicy] = None,
) -> HolecastResult:
    """
    Place openings for every duct and pipe crossing an architectural wall.

    The placements happen inside one transaction: if anything fails (a
    lookup, an unsupported centerline under 'fail', a host error while
    placing), every opening created so far is rolled back and the exception
    propagates. The ray-cast backend is switched for this call only.

    Args:
        documents: Open documents. The first is the architectural model unless
            config.active_title says otherwise.
        config: Configuration options (HolecastConfig instance).
        backend: Override config.backend.
        profile: Override config.profile.
        on_unsupported: Override config.on_unsupported.

    Returns:
        HolecastResult with the created openings and statistics.

    Raises:
        HostLookupError: A model, the 3D view or the opening family is missing.
        UnsupportedGeometryError: Curved centerline with on_unsupported='fail'.
        CollaboratorFailure: The host could not place or size an opening.
    """
    overrides = {name: value for name, value in
                 (('backend', backend), ('profile', profile), ('on_unsupported', on_unsupported))
                 if value is not None}
    config = dataclasses.replace(config or HolecastConfig(), **overrides)

    if config.on_unsupported not in ('fail', 'skip'):
        raise ValueError(f"Unknown on_unsupported policy: {config.on_unsupported}. Use 'fail' or 'skip'.")

    previous_backend = get_raycast_backend()
    set_raycast_backend(config.backend)
    try:
        with profiling_session(config.profile) as timings:
            result = _run_batch(documents, config)
    except HolecastError as e:
        logger.error("Opening placement failed: %s", e)
        raise
    finally:
        set_raycast_backend(previous_backend)

    result.timings = timings if config.profile else None

    logger.info("Created %d openings (%d skipped elements)",
                result.stats['opening_count'], result.stats['skipped_count'])
    return result


def _run_batch(documents: Sequence[HostDocument], config: HolecastConfig) -> HolecastResult:
    with perf_marker("discover"):
        document = _get_active_document(documents, config)
        hvac = find_document(documents, config.hvac_title_token)
        plumbing = find_document(documents, config.plumbing_title_token)
        view = find_3d_view(document)
        symbol = find_family_symbol(document, config.opening_family_name)

    logger.info("Placing openings in '%s' (view '%s') for %d ducts from '%s' and %d pipes from '%s'",
                document.title, view.name, len(hvac.ducts), hvac.title,
                len(plumbing.pipes), plumbing.title)

    if not symbol.is_active:
        with document.transaction(config.activation_transaction_name):
            symbol.activate()

    with perf_marker("build_surface_index"):
        cast_ray = build_surface_index(document)

    result = HolecastResult(document=document)
    with perf_marker("place_openings"):
        with document.transaction(config.transaction_name):
            result.duct_openings = _place_openings(
                document, hvac.ducts, cast_ray, symbol, config, result.skipped)
            result.pipe_openings = _place_openings(
                document, plumbing.pipes, cast_ray, symbol, config, result.skipped)

    result.stats = {
        'duct_count': len(hvac.ducts),
        'pipe_count': len(plumbing.pipes),
        'opening_count': len(result.openings),
        'skipped_count': len(result.skipped),
    }
    return result
