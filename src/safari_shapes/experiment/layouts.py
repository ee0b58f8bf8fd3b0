"""
Layouts de référence fournis avec l'expérience.

Chaque layout est décrit au format JSON de `layout_io` et reconstruit à la
demande, ce qui garantit qu'il respecte les invariants de placement.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from safari_shapes.board.grid import GridModel
from safari_shapes.board.layout_io import layout_from_dict
from safari_shapes.board.placement import PlacementEngine
from safari_shapes.core.errors import ConfigError


def _shape(label: str, kind: str, size: str, row: int, col: int) -> Dict[str, Any]:
    return {"kind": kind, "size": size, "label": label, "row": row, "col": col}


REFERENCE_LAYOUTS: Dict[str, Dict[str, Any]] = {
    # Petit layout à recopier en première manche (23 points).
    "fox_den": {
        "size": 5,
        "shapes": [
            _shape("Mouse", "square", "xs", 0, 0),
            _shape("Fox", "circle", "md", 1, 1),
            _shape("Leopard", "square", "lg", 3, 3),
            _shape("Rabbit", "triangle", "sm", 4, 0),
        ],
    },
    # Deuxième layout à recopier (43 points, une forme de chaque palier).
    "savanna": {
        "size": 5,
        "shapes": [
            _shape("Mouse", "square", "xs", 0, 0),
            _shape("Rabbit", "triangle", "sm", 0, 1),
            _shape("Fox", "circle", "md", 0, 2),
            _shape("Elephant", "heart", "xl", 2, 0),
            _shape("Leopard", "square", "lg", 2, 3),
        ],
    },
    # Exemple garantissant exactement 50 points.
    "sample_50": {
        "size": 5,
        "shapes": [
            _shape("Elephant", "heart", "xl", 0, 0),
            _shape("Leopard", "square", "lg", 0, 3),
            _shape("Fox", "circle", "md", 2, 3),
            _shape("Fox", "circle", "md", 3, 0),
            _shape("Mouse", "square", "xs", 3, 2),
            _shape("Rabbit", "triangle", "sm", 4, 2),
        ],
    },
}


def build_reference(layout: Any, engine: Optional[PlacementEngine] = None) -> GridModel:
    """
    Construit un plateau de référence depuis un nom connu ou un layout inline.

    Raises:
        ConfigError: nom de layout inconnu.
    """
    if isinstance(layout, str):
        try:
            layout = REFERENCE_LAYOUTS[layout]
        except KeyError as exc:
            raise ConfigError(f"Unknown reference layout: {layout!r}") from exc
    if not isinstance(layout, dict):
        raise ConfigError(f"Reference layout must be a name or a layout dict, got {type(layout).__name__}")
    return layout_from_dict(layout, engine)


def sample_solution(engine: Optional[PlacementEngine] = None) -> GridModel:
    return build_reference("sample_50", engine)


__all__ = ["REFERENCE_LAYOUTS", "build_reference", "sample_solution"]
