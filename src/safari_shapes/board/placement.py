"""
Moteur de placement : seul point d'écriture sur une `GridModel`.

Valide puis pose (ou retire) une forme sur toute son empreinte. Un refus
laisse la grille strictement inchangée.
"""

from __future__ import annotations

import uuid
from typing import Callable, Optional, Tuple, Union

from safari_shapes.core.errors import CannotPlace, NoShapeAtCell, PlacementFailure
from safari_shapes.core.geometry import footprint_of
from safari_shapes.core.models import PlacedShape, Position, ShapeCategory
from safari_shapes.board.grid import GridModel
from safari_shapes.utils.logger import LogLevel, SafariLogger, get_logger

IdGenerator = Callable[[], str]


def uuid_ids() -> str:
    """Générateur d'identifiants par défaut (uuid4)."""
    return uuid.uuid4().hex


class PlacementEngine:
    """
    Pose et retire des formes sur une grille.

    Le générateur d'identifiants est injectable pour rendre les tests
    déterministes.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None, logger: Optional[SafariLogger] = None):
        self.id_generator = id_generator or uuid_ids
        self.logger = logger or get_logger()

    def check(self, grid: GridModel, category: ShapeCategory, origin: Position) -> Optional[PlacementFailure]:
        """Retourne la raison d'un refus, ou None si le placement est possible."""
        footprint = footprint_of(category.size)
        if not grid.is_within_bounds(origin, footprint):
            return PlacementFailure.OUT_OF_BOUNDS
        if not grid.is_region_empty(origin, footprint):
            return PlacementFailure.OCCUPIED
        return None

    def can_place(self, grid: GridModel, category: ShapeCategory, origin: Position) -> bool:
        return self.check(grid, category, origin) is None

    def place(
        self,
        grid: GridModel,
        category: ShapeCategory,
        origin: Position,
        label: Optional[str] = None,
    ) -> PlacedShape:
        """
        Pose une nouvelle forme ancrée en `origin`.

        Raises:
            CannotPlace: empreinte hors plateau ou cellules occupées.
        """
        failure = self.check(grid, category, origin)
        if failure is not None:
            self.logger.count("rejections")
            self.logger.warning(
                LogLevel.PLACEMENT,
                f"Rejected {label or category} at ({origin.row}, {origin.col})",
                reason=failure.value,
            )
            raise CannotPlace(
                failure,
                f"Cannot place {category} at ({origin.row}, {origin.col}): {CannotPlace.MESSAGES[failure]}",
            )

        shape_id = self.id_generator()
        if grid.get_shape(shape_id) is not None:
            raise ValueError(f"Id generator returned an id already on the board: {shape_id!r}")

        shape = PlacedShape(shape_id=shape_id, category=category, origin=origin, label=label)
        for cell in footprint_of(category.size).cells(origin):
            grid.set_cell(cell, shape)

        self.logger.count("placements")
        self.logger.step(LogLevel.PLACEMENT, f"Placed {shape}", shape_id=shape.shape_id, category=str(category))
        return shape

    def remove(self, grid: GridModel, cell: Union[Position, Tuple[int, int]]) -> PlacedShape:
        """
        Retire la forme couvrant `cell` (n'importe quelle cellule de son empreinte).

        Raises:
            NoShapeAtCell: la cellule est vide.
        """
        row, col = cell.to_tuple() if isinstance(cell, Position) else cell
        shape = grid.cell_at(row, col)
        if shape is None:
            raise NoShapeAtCell(row, col)

        for covered in footprint_of(shape.category.size).cells(shape.origin):
            grid.clear_cell(covered)

        self.logger.count("removals")
        self.logger.step(LogLevel.PLACEMENT, f"Removed {shape}", shape_id=shape.shape_id)
        return shape


__all__ = ["PlacementEngine", "IdGenerator", "uuid_ids"]
