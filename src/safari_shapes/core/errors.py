"""
Taxonomie d'erreurs du plateau et des manches.

Les erreurs de placement sont récupérables : elles remontent jusqu'à la
machine à états qui les transforme en notification pour le joueur. Seule
`RoundStateError` signale une erreur de programmation.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple


class SafariError(Exception):
    """Base de toutes les erreurs du package."""


class InvalidCategory(SafariError, ValueError):
    """Catégorie ou palier de taille inconnu."""


class OutOfBounds(SafariError, IndexError):
    """Cellule ou empreinte hors du plateau."""

    def __init__(self, message: str, cell: Optional[Tuple[int, int]] = None):
        super().__init__(message)
        self.cell = cell


class Occupied(SafariError):
    """Une ou plusieurs cellules ciblées sont déjà occupées."""

    def __init__(self, message: str, cells: Tuple[Tuple[int, int], ...] = ()):
        super().__init__(message)
        self.cells = cells


class PlacementFailure(Enum):
    """Raison d'un refus de placement."""

    OUT_OF_BOUNDS = "out_of_bounds"
    OCCUPIED = "occupied"


class CannotPlace(SafariError):
    """Placement refusé ; `reason` indique pourquoi (affiché au joueur)."""

    MESSAGES = {
        PlacementFailure.OUT_OF_BOUNDS: "The animal enclosure doesn't fit within the boundaries.",
        PlacementFailure.OCCUPIED: "Some cells are already occupied by another animal.",
    }

    def __init__(self, reason: PlacementFailure, detail: str = ""):
        self.reason = reason
        self.detail = detail
        super().__init__(detail or self.MESSAGES[reason])

    @property
    def user_message(self) -> str:
        return self.MESSAGES[self.reason]


class NoShapeAtCell(SafariError):
    """Retrait demandé sur une cellule vide."""

    def __init__(self, row: int, col: int):
        super().__init__(f"No animal enclosure at cell ({row}, {col})")
        self.row = row
        self.col = col


class LayoutFormatError(SafariError, ValueError):
    """Layout JSON mal formé ou incohérent."""


class ConfigError(SafariError, ValueError):
    """Configuration d'expérience invalide."""


class RoundStateError(RuntimeError):
    """Transition de manche invoquée hors de son état valide (bug appelant)."""


__all__ = [
    "SafariError",
    "InvalidCategory",
    "OutOfBounds",
    "Occupied",
    "PlacementFailure",
    "CannotPlace",
    "NoShapeAtCell",
    "LayoutFormatError",
    "ConfigError",
    "RoundStateError",
]
