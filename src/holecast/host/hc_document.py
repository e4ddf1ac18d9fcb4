"""
In-memory host model.

Stands in for the BIM application: documents with walls, levels, ducts,
pipes, 3D views, family symbols and link instances, plus transactions and
opening family instances. The batch engine talks to it only through the
operations a real host adapter would provide:

    find_document(documents, title_token)
    find_3d_view(document)
    find_family_symbol(document, family_name)
    document.transaction(name)            # all-or-nothing context manager
    symbol.activate()
    document.place_instance(point, host_surface_id, size, symbol, ...)

Every mutation made inside a transaction registers an undo step; rolling the
transaction back replays them in reverse, so a failed batch leaves the
document exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, Iterable, List, Optional
from holecast_types import (
    CollaboratorFailure,
    DocumentNotFoundError,
    FamilyNotFoundError,
    Identity,
    ViewNotFoundError,
)
from elements.hc_penetrating_element import Duct, Pipe
from elements.hc_wall import Wall
from mathutils.vec3 import Vec3

logger = logging.getLogger("holecast.host")

GENERIC_MODEL_CATEGORY = "Generic Models"


# ============================================================================
# HOST ELEMENTS
# ============================================================================

@dataclass
class Level:
    id: int
    name: str
    elevation: float = 0.0


@dataclass
class View3D:
    id: int
    name: str
    is_template: bool = False


@dataclass
class Parameter:
    """A named instance parameter. Value stays None until set."""
    name: str
    value: Optional[float] = None

    def set(self, value: float) -> None:
        self.value = float(value)


@dataclass
class FamilySymbol:
    """
    A loadable family type. Instances can only be placed from an active
    symbol; activation is a document change and needs an open transaction.
    """
    id: int
    family_name: str
    name: str = ""
    category: str = GENERIC_MODEL_CATEGORY
    is_active: bool = False
    parameter_names: tuple = ()
    document: Optional['HostDocument'] = field(default=None, repr=False, compare=False)

    def activate(self) -> None:
        if self.is_active:
            return
        if self.document is not None:
            self.document.record_change(f"activate {self.family_name}", self._deactivate)
        self.is_active = True

    def _deactivate(self) -> None:
        self.is_active = False


@dataclass
class OpeningInstance:
    """A placed opening hosted by a wall."""
    id: int
    symbol: FamilySymbol
    point: Vec3
    host_id: Identity
    level: Optional[Level]
    parameters: Dict[str, Parameter] = field(default_factory=dict)

    def lookup_parameter(self, name: str) -> Optional[Parameter]:
        return self.parameters.get(name)

    @property
    def width(self) -> Optional[float]:
        return self._first_value(0)

    @property
    def height(self) -> Optional[float]:
        return self._first_value(1)

    def _first_value(self, index: int) -> Optional[float]:
        names = self.symbol.parameter_names
        if index >= len(names):
            return None
        return self.parameters[names[index]].value


@dataclass
class LinkInstance:
    """A linked model placed into a document, translated by `offset`."""
    id: int
    document: 'HostDocument'
    offset: Vec3 = field(default_factory=Vec3)


# ============================================================================
# TRANSACTIONS
# ============================================================================

class TransactionStatus(Enum):
    NOT_STARTED = auto()
    STARTED = auto()
    COMMITTED = auto()
    ROLLED_BACK = auto()


class Transaction:
    """
    Groups document changes into one unit.

    Usage:
        with document.transaction("Create openings"):
            document.place_instance(...)

    Leaving the block normally commits. If an exception escapes, every change
    is undone and the exception propagates.
    """

    def __init__(self, document: 'HostDocument', name: str):
        self.document = document
        self.name = name
        self.status = TransactionStatus.NOT_STARTED
        self._undo: List[Callable[[], None]] = []

    def start(self) -> None:
        if self.status is not TransactionStatus.NOT_STARTED:
            raise CollaboratorFailure(f"Transaction '{self.name}' was already started")
        if self.document.active_transaction is not None:
            raise CollaboratorFailure(
                f"Cannot start '{self.name}': '{self.document.active_transaction.name}' is still open")
        self.document.active_transaction = self
        self.status = TransactionStatus.STARTED
        logger.debug("Started transaction '%s' on '%s'", self.name, self.document.title)

    def record(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def commit(self) -> None:
        self._finish(TransactionStatus.COMMITTED)
        logger.debug("Committed '%s' (%d changes)", self.name, len(self._undo))
        self._undo.clear()

    def rollback(self) -> None:
        self._finish(TransactionStatus.ROLLED_BACK)
        for undo in reversed(self._undo):
            undo()
        logger.debug("Rolled back '%s' (%d changes)", self.name, len(self._undo))
        self._undo.clear()

    def _finish(self, status: TransactionStatus) -> None:
        if self.status is not TransactionStatus.STARTED:
            raise CollaboratorFailure(f"Transaction '{self.name}' is not open")
        self.status = status
        self.document.active_transaction = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False


# ============================================================================
# DOCUMENT
# ============================================================================

class HostDocument:
    """One open model (architectural, HVAC or plumbing)."""

    def __init__(self, title: str):
        self.title = title
        self.walls: Dict[int, Wall] = {}
        self.levels: Dict[int, Level] = {}
        self.ducts: List[Duct] = []
        self.pipes: List[Pipe] = []
        self.views: List[View3D] = []
        self.family_symbols: List[FamilySymbol] = []
        self.links: Dict[int, LinkInstance] = {}
        self.openings: Dict[int, OpeningInstance] = {}
        self.active_transaction: Optional[Transaction] = None
        self._next_id = 1

    def __repr__(self):
        return f"HostDocument({self.title!r})"

    def new_id(self) -> int:
        element_id = self._next_id
        self._next_id += 1
        return element_id

    # ------------------------------------------------------------------
    # Model building
    # ------------------------------------------------------------------

    def add_level(self, name: str, elevation: float = 0.0) -> Level:
        level = Level(self.new_id(), name, elevation)
        self.levels[level.id] = level
        return level

    def add_wall(self, start, end, thickness: float, height: float, level: Optional[Level] = None) -> Wall:
        wall = Wall(self.new_id(), start, end, thickness, height, level.id if level else None)
        self.walls[wall.id] = wall
        return wall

    def add_duct(self, centerline, diameter: float, system_name: str = "") -> Duct:
        duct = Duct(self.new_id(), centerline, diameter, system_name)
        self.ducts.append(duct)
        return duct

    def add_pipe(self, centerline, diameter: float, system_name: str = "") -> Pipe:
        pipe = Pipe(self.new_id(), centerline, diameter, system_name)
        self.pipes.append(pipe)
        return pipe

    def add_view_3d(self, name: str, is_template: bool = False) -> View3D:
        view = View3D(self.new_id(), name, is_template)
        self.views.append(view)
        return view

    def add_family_symbol(self, family_name: str, name: str = "", parameter_names: Iterable[str] = (),
                          category: str = GENERIC_MODEL_CATEGORY, is_active: bool = False) -> FamilySymbol:
        symbol = FamilySymbol(self.new_id(), family_name, name or family_name, category,
                              is_active, tuple(parameter_names), document=self)
        self.family_symbols.append(symbol)
        return symbol

    def add_link(self, document: 'HostDocument', offset=(0.0, 0.0, 0.0)) -> LinkInstance:
        link = LinkInstance(self.new_id(), document, Vec3(offset))
        self.links[link.id] = link
        return link

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_wall(self, surface_id: Identity) -> Optional[Wall]:
        """Resolve a wall identity, following the link for linked walls."""
        if not surface_id.is_linked():
            return self.walls.get(surface_id.element_id)
        link = self.links.get(surface_id.element_id)
        if link is None:
            return None
        return link.document.walls.get(surface_id.linked_element_id)

    def get_wall_level(self, surface_id: Identity) -> Optional[Level]:
        wall = self.get_wall(surface_id)
        if wall is None or wall.level_id is None:
            return None
        owner = self if not surface_id.is_linked() else self.links[surface_id.element_id].document
        return owner.levels.get(wall.level_id)

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def transaction(self, name: str) -> Transaction:
        return Transaction(self, name)

    @property
    def is_modifiable(self) -> bool:
        return self.active_transaction is not None

    def record_change(self, description: str, undo: Callable[[], None]) -> None:
        """Register the undo step of a change; changes need an open transaction."""
        if self.active_transaction is None:
            raise CollaboratorFailure(f"Cannot {description} in '{self.title}' outside a transaction")
        self.active_transaction.record(undo)

    def place_instance(self, point, host_surface_id: Identity, size: float, symbol: FamilySymbol,
                       width_parameter: str, height_parameter: str) -> OpeningInstance:
        """
        Create an opening on a wall and size it.

        Raises:
            CollaboratorFailure: No open transaction, inactive symbol, unknown
                host wall, or a size parameter missing from the family.
        """
        if not symbol.is_active:
            raise CollaboratorFailure(f"Family symbol '{symbol.family_name}' is not active")
        if self.get_wall(host_surface_id) is None:
            raise CollaboratorFailure(f"Host wall {host_surface_id} not found in '{self.title}'")

        instance = OpeningInstance(
            id=self.new_id(),
            symbol=symbol,
            point=Vec3(point),
            host_id=host_surface_id,
            level=self.get_wall_level(host_surface_id),
            parameters={name: Parameter(name) for name in symbol.parameter_names},
        )
        self.record_change("place an opening", lambda: self.openings.pop(instance.id, None))
        self.openings[instance.id] = instance

        for parameter_name in (width_parameter, height_parameter):
            parameter = instance.lookup_parameter(parameter_name)
            if parameter is None:
                raise CollaboratorFailure(
                    f"Parameter '{parameter_name}' not found on family '{symbol.family_name}'")
            parameter.set(size)

        return instance


# ============================================================================
# LOOKUPS
# ============================================================================

def find_document(documents: Iterable[HostDocument], title_token: str) -> HostDocument:
    """First document whose title contains `title_token`."""
    for document in documents:
        if title_token in document.title:
            return document
    raise DocumentNotFoundError(f"No open model with '{title_token}' in its title")


def find_3d_view(document: HostDocument) -> View3D:
    """First 3D view of the document that is not a view template."""
    for view in document.views:
        if not view.is_template:
            return view
    raise ViewNotFoundError(f"No 3D view found in '{document.title}'")


def find_family_symbol(document: HostDocument, family_name: str,
                       category: str = GENERIC_MODEL_CATEGORY) -> FamilySymbol:
    """First symbol of the named family in the given category."""
    for symbol in document.family_symbols:
        if symbol.family_name == family_name and symbol.category == category:
            return symbol
    raise FamilyNotFoundError(f"Family '{family_name}' not found in '{document.title}'")
