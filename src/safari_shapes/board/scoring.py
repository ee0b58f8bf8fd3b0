"""
Moteur de scoring : fonctions pures d'un instantané de grille.

Chaque forme est comptée une seule fois, via sa cellule d'origine, quelle
que soit la taille de son empreinte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple

from safari_shapes.board.grid import GridModel
from safari_shapes.core.geometry import point_value_of
from safari_shapes.core.models import PaletteEntry, ShapeKind, SizeTier

CategorySignature = Tuple[ShapeKind, SizeTier, Optional[str]]


def score(grid: GridModel) -> int:
    """Somme des points des formes posées, lue sur les seules cellules d'origine."""
    return sum(point_value_of(shape.category.size) for _, shape in grid.origin_cells())


def unique_shape_count(grid: GridModel) -> int:
    """Nombre de formes distinctes sur le plateau."""
    return sum(1 for _ in grid.origin_cells())


def categories_used(grid: GridModel) -> Set[CategorySignature]:
    """Ensemble des triplets (silhouette, taille, nom) présents sur le plateau."""
    return {shape.signature for _, shape in grid.origin_cells()}


def all_categories_used(grid: GridModel, palette: Iterable[PaletteEntry]) -> bool:
    """Vrai si chaque entrée de la palette a été posée au moins une fois."""
    used = categories_used(grid)
    return all(entry.signature in used for entry in palette)


@dataclass
class ScoreProgress:
    """Progression vers un score cible (barre de progression du joueur)."""

    current: int
    target: int

    @property
    def percentage(self) -> float:
        if self.target <= 0:
            return 100.0
        return min(self.current / self.target * 100.0, 100.0)

    @property
    def points_needed(self) -> int:
        return max(self.target - self.current, 0)

    @property
    def reached(self) -> bool:
        return self.current >= self.target


def score_progress(grid: GridModel, target: int) -> ScoreProgress:
    return ScoreProgress(current=score(grid), target=target)


__all__ = [
    "CategorySignature",
    "score",
    "unique_shape_count",
    "categories_used",
    "all_categories_used",
    "ScoreProgress",
    "score_progress",
]
