"""
Structures de base du plateau Safari Shapes.

Contient les types partagés (catégories de formes, positions, empreintes,
formes posées) utilisés par le moteur de placement, le scoring, le
comparateur de layouts et la machine à états des manches.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from safari_shapes.core.errors import InvalidCategory


class ShapeKind(Enum):
    """Silhouette d'une forme (purement classificatoire)."""

    SQUARE = "square"
    TRIANGLE = "triangle"
    CIRCLE = "circle"
    HEART = "heart"


class SizeTier(Enum):
    """Palier de taille : détermine l'empreinte et la valeur en points."""

    XS = "xs"
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"

    @classmethod
    def ordered(cls) -> list["SizeTier"]:
        """Retourne les paliers du plus petit au plus grand."""
        return [cls.XS, cls.SM, cls.MD, cls.LG, cls.XL]


@dataclass(frozen=True)
class ShapeCategory:
    """Couple immuable (silhouette, palier de taille)."""

    kind: ShapeKind
    size: SizeTier

    @classmethod
    def parse(cls, kind: str, size: str) -> "ShapeCategory":
        """Construit une catégorie à partir de ses noms ('circle', 'md')."""
        try:
            return cls(ShapeKind(kind.strip().lower()), SizeTier(size.strip().lower()))
        except ValueError as exc:
            raise InvalidCategory(f"Unknown shape category: {kind!r}/{size!r}") from exc

    def __str__(self) -> str:
        return f"{self.kind.value}-{self.size.value}"


@dataclass(frozen=True)
class Position:
    """Cellule du plateau en coordonnées (ligne, colonne)."""

    row: int
    col: int

    def to_tuple(self) -> tuple[int, int]:
        return self.row, self.col


@dataclass(frozen=True)
class Footprint:
    """Empreinte rectangulaire d'une forme, en cellules."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Footprint dimensions must be >= 1")

    @property
    def area(self) -> int:
        return self.width * self.height

    def cells(self, origin: Position) -> Iterator[Position]:
        """Parcourt les cellules couvertes quand l'empreinte est ancrée en `origin`."""
        for dr in range(self.height):
            for dc in range(self.width):
                yield Position(origin.row + dr, origin.col + dc)


@dataclass(frozen=True)
class PaletteEntry:
    """Enclos d'animal proposé au joueur : une catégorie et un nom affiché."""

    label: str
    category: ShapeCategory

    @property
    def signature(self) -> Tuple[ShapeKind, SizeTier, Optional[str]]:
        return self.category.kind, self.category.size, self.label


@dataclass(frozen=True)
class PlacedShape:
    """
    Instance d'une forme posée sur le plateau.

    Possédée exclusivement par la grille qui la contient (arène indexée par
    `shape_id`). Les cellules ne stockent que l'identifiant.
    """

    shape_id: str
    category: ShapeCategory
    origin: Position
    label: Optional[str] = None

    @property
    def signature(self) -> Tuple[ShapeKind, SizeTier, Optional[str]]:
        """Triplet (silhouette, taille, nom) comparé par le comparateur de layouts."""
        return self.category.kind, self.category.size, self.label

    def __str__(self) -> str:
        name = self.label or str(self.category)
        return f"{name}@({self.origin.row},{self.origin.col})"


# Palette par défaut : un animal par palier de taille.
DEFAULT_PALETTE: List[PaletteEntry] = [
    PaletteEntry("Mouse", ShapeCategory(ShapeKind.SQUARE, SizeTier.XS)),
    PaletteEntry("Rabbit", ShapeCategory(ShapeKind.TRIANGLE, SizeTier.SM)),
    PaletteEntry("Fox", ShapeCategory(ShapeKind.CIRCLE, SizeTier.MD)),
    PaletteEntry("Leopard", ShapeCategory(ShapeKind.SQUARE, SizeTier.LG)),
    PaletteEntry("Elephant", ShapeCategory(ShapeKind.HEART, SizeTier.XL)),
]


def palette_entry(label: str, palette: Optional[List[PaletteEntry]] = None) -> PaletteEntry:
    """Retourne l'entrée de palette portant ce nom (insensible à la casse)."""
    for entry in palette or DEFAULT_PALETTE:
        if entry.label.lower() == label.strip().lower():
            return entry
    raise InvalidCategory(f"No palette entry named {label!r}")


__all__ = [
    "ShapeKind",
    "SizeTier",
    "ShapeCategory",
    "Position",
    "Footprint",
    "PaletteEntry",
    "PlacedShape",
    "DEFAULT_PALETTE",
    "palette_entry",
]
