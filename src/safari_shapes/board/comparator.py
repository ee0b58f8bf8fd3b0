"""
Comparateur de layouts : égalité exacte et similarité en pourcentage.

Seuls les triplets (silhouette, taille, nom) par cellule sont comparés ;
identifiants internes et origines sont ignorés.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from safari_shapes.board.grid import GridModel


@dataclass
class LayoutComparison:
    """
    Résultat détaillé d'une comparaison cellule à cellule.

    Attributes:
        is_equal: les deux layouts sont identiques cellule à cellule
        similarity: pourcentage de cellules concordantes parmi les cellules
            occupées dans l'un ou l'autre layout (0 si aucune)
        diff_mask: masque booléen des cellules discordantes
        compared_cells: taille de l'union des cellules occupées
        matching_cells: cellules de l'union qui concordent
    """

    is_equal: bool
    similarity: float
    diff_mask: Optional[np.ndarray] = None
    compared_cells: int = 0
    matching_cells: int = 0
    details: Dict[str, Any] = field(default_factory=dict)


def _cell_matches(a: GridModel, b: GridModel) -> np.ndarray:
    sig_a = a.signature_matrix()
    sig_b = b.signature_matrix()
    matches = np.zeros(sig_a.shape, dtype=bool)
    for (row, col), value in np.ndenumerate(sig_a):
        matches[row, col] = value == sig_b[row, col]
    return matches


def compare_layouts(a: GridModel, b: GridModel) -> LayoutComparison:
    """Compare deux plateaux et retourne l'analyse complète."""
    if a.size != b.size:
        return LayoutComparison(
            is_equal=False,
            similarity=0.0,
            details={"error": f"Board size mismatch: {a.size} vs {b.size}"},
        )

    matches = _cell_matches(a, b)
    union = a.occupancy_mask() | b.occupancy_mask()
    compared = int(union.sum())
    matching = int((matches & union).sum())

    # Aucune cellule occupée des deux côtés : rien à mesurer, similarité 0.
    similarity = matching / compared * 100.0 if compared else 0.0

    return LayoutComparison(
        is_equal=bool(matches.all()),
        similarity=similarity,
        diff_mask=~matches,
        compared_cells=compared,
        matching_cells=matching,
        details={
            "only_in_first": int((a.occupancy_mask() & ~b.occupancy_mask()).sum()),
            "only_in_second": int((b.occupancy_mask() & ~a.occupancy_mask()).sum()),
        },
    )


def layouts_equal(a: GridModel, b: GridModel) -> bool:
    """Vrai si chaque cellule est vide des deux côtés ou porte le même triplet."""
    return compare_layouts(a, b).is_equal


def similarity(a: GridModel, b: GridModel) -> float:
    """Pourcentage [0, 100] de concordance sur l'union des cellules occupées."""
    return compare_layouts(a, b).similarity


__all__ = ["LayoutComparison", "compare_layouts", "layouts_equal", "similarity"]
