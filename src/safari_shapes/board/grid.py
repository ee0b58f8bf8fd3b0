"""
Modèle de grille : matrice N×N de cellules vides ou occupées.

Les formes posées vivent dans une arène indexée par identifiant ; chaque
cellule ne contient que l'identifiant de la forme qui la couvre (ou None).
La seule écriture passe par `set_cell` / `clear_cell`, appelées par le
moteur de placement.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from safari_shapes.core.errors import Occupied, OutOfBounds
from safari_shapes.core.geometry import footprint_of
from safari_shapes.core.models import Footprint, PlacedShape, Position

DEFAULT_BOARD_SIZE = 5


class GridModel:
    """Plateau carré de taille fixe (arène de formes + index par cellule)."""

    def __init__(self, size: int = DEFAULT_BOARD_SIZE):
        if size < 1:
            raise ValueError("Board size must be >= 1")
        self.size = size
        self._cells = np.full((size, size), None, dtype=object)
        self._shapes: Dict[str, PlacedShape] = {}

    @classmethod
    def empty(cls, size: int = DEFAULT_BOARD_SIZE) -> "GridModel":
        return cls(size)

    # ------------------------------------------------------------------ lecture

    @property
    def shape(self) -> Tuple[int, int]:
        return self._cells.shape

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(f"Cell ({row}, {col}) is outside the {self.size}x{self.size} board", (row, col))

    def shape_id_at(self, row: int, col: int) -> Optional[str]:
        self._check(row, col)
        return self._cells[row, col]

    def cell_at(self, row: int, col: int) -> Optional[PlacedShape]:
        """Retourne la forme couvrant la cellule, ou None si elle est vide."""
        shape_id = self.shape_id_at(row, col)
        return self._shapes[shape_id] if shape_id is not None else None

    def get_shape(self, shape_id: str) -> Optional[PlacedShape]:
        return self._shapes.get(shape_id)

    def is_within_bounds(self, origin: Position, footprint: Footprint) -> bool:
        """Vrai si l'empreinte ancrée en `origin` tient entièrement dans le plateau."""
        return (
            origin.row >= 0
            and origin.col >= 0
            and origin.row + footprint.height <= self.size
            and origin.col + footprint.width <= self.size
        )

    def occupied_in_region(self, origin: Position, footprint: Footprint) -> List[Position]:
        """Liste les cellules déjà occupées dans la région (doit être dans les bornes)."""
        if not self.is_within_bounds(origin, footprint):
            raise OutOfBounds(
                f"Region {footprint.width}x{footprint.height} at ({origin.row}, {origin.col}) exceeds the board",
                origin.to_tuple(),
            )
        return [p for p in footprint.cells(origin) if self._cells[p.row, p.col] is not None]

    def is_region_empty(self, origin: Position, footprint: Footprint) -> bool:
        """Vrai si la région tient dans le plateau et n'y recouvre aucune forme."""
        if not self.is_within_bounds(origin, footprint):
            return False
        return not self.occupied_in_region(origin, footprint)

    def is_origin(self, row: int, col: int) -> bool:
        """Vrai si la cellule est la cellule canonique (origine) de sa forme."""
        shape = self.cell_at(row, col)
        return shape is not None and shape.origin == Position(row, col)

    def origin_cells(self) -> Iterator[Tuple[Position, PlacedShape]]:
        """Parcourt une seule cellule par forme : son origine."""
        for row in range(self.size):
            for col in range(self.size):
                shape = self.cell_at(row, col)
                if shape is not None and shape.origin.row == row and shape.origin.col == col:
                    yield Position(row, col), shape

    def shapes(self) -> List[PlacedShape]:
        """Formes posées, triées par origine (ligne puis colonne)."""
        return sorted(self._shapes.values(), key=lambda s: (s.origin.row, s.origin.col))

    def occupancy_mask(self) -> np.ndarray:
        """Masque booléen des cellules occupées."""
        return np.vectorize(lambda v: v is not None, otypes=[bool])(self._cells)

    def signature_at(self, row: int, col: int):
        shape = self.cell_at(row, col)
        return shape.signature if shape is not None else None

    def signature_matrix(self) -> np.ndarray:
        """Matrice des triplets (silhouette, taille, nom) par cellule, None si vide."""
        signatures = np.full((self.size, self.size), None, dtype=object)
        for row in range(self.size):
            for col in range(self.size):
                signatures[row, col] = self.signature_at(row, col)
        return signatures

    @property
    def is_empty(self) -> bool:
        return not self._shapes

    def __len__(self) -> int:
        return len(self._shapes)

    # ------------------------------------------------------------ écritures

    def set_cell(self, position: Position, shape: PlacedShape) -> None:
        """Écrit la référence de `shape` dans une cellule et l'enregistre dans l'arène."""
        self._check(position.row, position.col)
        current = self._cells[position.row, position.col]
        if current is not None and current != shape.shape_id:
            raise Occupied(
                f"Cell ({position.row}, {position.col}) already holds shape {current}",
                (position.to_tuple(),),
            )
        self._shapes.setdefault(shape.shape_id, shape)
        self._cells[position.row, position.col] = shape.shape_id

    def clear_cell(self, position: Position) -> Optional[str]:
        """Vide une cellule ; la forme quitte l'arène quand plus aucune cellule ne la référence."""
        self._check(position.row, position.col)
        shape_id = self._cells[position.row, position.col]
        self._cells[position.row, position.col] = None
        if shape_id is not None and not any(v == shape_id for v in self._cells.flat):
            del self._shapes[shape_id]
        return shape_id

    # --------------------------------------------------------------- divers

    def copy(self) -> "GridModel":
        clone = GridModel(self.size)
        clone._cells = self._cells.copy()
        clone._shapes = dict(self._shapes)
        return clone

    def check_invariants(self) -> bool:
        """Vérifie que chaque forme couvre exactement son empreinte, origine comprise."""
        for shape in self._shapes.values():
            footprint = footprint_of(shape.category.size)
            expected = set(footprint.cells(shape.origin))
            actual = {
                Position(r, c)
                for r in range(self.size)
                for c in range(self.size)
                if self._cells[r, c] == shape.shape_id
            }
            if actual != expected:
                return False
        return True

    def __str__(self) -> str:
        return f"GridModel({self.size}x{self.size}, shapes={len(self._shapes)})"

    __repr__ = __str__


def empty_grid(size: int = DEFAULT_BOARD_SIZE) -> GridModel:
    """Construit un plateau N×N entièrement vide."""
    return GridModel(size)


__all__ = ["GridModel", "empty_grid", "DEFAULT_BOARD_SIZE"]
