"""
Table géométrique : empreinte et valeur en points par palier de taille.
"""

from __future__ import annotations

from typing import Dict

from safari_shapes.core.errors import InvalidCategory
from safari_shapes.core.models import Footprint, SizeTier


class GeometryTable:
    """Lookup statique (empreinte en cellules, points) par palier."""

    FOOTPRINTS: Dict[SizeTier, Footprint] = {
        SizeTier.XS: Footprint(1, 1),
        SizeTier.SM: Footprint(1, 1),
        SizeTier.MD: Footprint(2, 2),
        SizeTier.LG: Footprint(2, 2),
        SizeTier.XL: Footprint(3, 3),
    }

    POINT_VALUES: Dict[SizeTier, int] = {
        SizeTier.XS: 1,
        SizeTier.SM: 3,
        SizeTier.MD: 7,
        SizeTier.LG: 12,
        SizeTier.XL: 20,
    }

    @classmethod
    def footprint_of(cls, size: SizeTier) -> Footprint:
        """
        Retourne l'empreinte (largeur, hauteur) d'un palier.

        Raises:
            InvalidCategory: palier inconnu.
        """
        try:
            return cls.FOOTPRINTS[size]
        except (KeyError, TypeError) as exc:
            raise InvalidCategory(f"Unknown size tier: {size!r}") from exc

    @classmethod
    def point_value_of(cls, size: SizeTier) -> int:
        """Retourne la valeur en points d'un palier."""
        try:
            return cls.POINT_VALUES[size]
        except (KeyError, TypeError) as exc:
            raise InvalidCategory(f"Unknown size tier: {size!r}") from exc


def footprint_of(size: SizeTier) -> Footprint:
    return GeometryTable.footprint_of(size)


def point_value_of(size: SizeTier) -> int:
    return GeometryTable.point_value_of(size)


__all__ = ["GeometryTable", "footprint_of", "point_value_of"]
