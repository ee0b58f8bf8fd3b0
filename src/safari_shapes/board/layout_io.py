"""
Import / export de layouts (JSON) et rendu texte des plateaux.

Format JSON :
    {"size": 5, "shapes": [{"kind": "circle", "size": "md", "label": "Fox", "row": 1, "col": 1}]}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from safari_shapes.board.grid import DEFAULT_BOARD_SIZE, GridModel
from safari_shapes.board.placement import PlacementEngine
from safari_shapes.core.errors import CannotPlace, InvalidCategory, LayoutFormatError
from safari_shapes.core.models import Position, ShapeCategory
from safari_shapes.utils.logger import SafariLogger


def layout_to_dict(grid: GridModel) -> Dict[str, Any]:
    """Sérialise un plateau (une entrée par forme, ancrée sur son origine)."""
    return {
        "size": grid.size,
        "shapes": [
            {
                "kind": shape.category.kind.value,
                "size": shape.category.size.value,
                "label": shape.label,
                "row": shape.origin.row,
                "col": shape.origin.col,
            }
            for shape in grid.shapes()
        ],
    }


def layout_from_dict(data: Dict[str, Any], engine: Optional[PlacementEngine] = None) -> GridModel:
    """
    Reconstruit un plateau en rejouant chaque placement.

    Raises:
        LayoutFormatError: champ manquant, catégorie inconnue ou placement invalide.
    """
    engine = engine or PlacementEngine(logger=SafariLogger())
    try:
        grid = GridModel(int(data.get("size", DEFAULT_BOARD_SIZE)))
    except (TypeError, ValueError) as exc:
        raise LayoutFormatError(f"Invalid board size: {data.get('size')!r}") from exc

    for index, item in enumerate(data.get("shapes", [])):
        try:
            category = ShapeCategory.parse(item["kind"], item["size"])
            origin = Position(int(item["row"]), int(item["col"]))
        except KeyError as exc:
            raise LayoutFormatError(f"Shape #{index} is missing field {exc.args[0]!r}") from exc
        except (InvalidCategory, TypeError, ValueError) as exc:
            raise LayoutFormatError(f"Shape #{index} is invalid: {exc}") from exc

        try:
            engine.place(grid, category, origin, label=item.get("label"))
        except CannotPlace as exc:
            raise LayoutFormatError(f"Shape #{index} cannot be placed: {exc}") from exc

    return grid


def load_layout(path: str, engine: Optional[PlacementEngine] = None) -> GridModel:
    layout_path = Path(path)
    if not layout_path.exists():
        raise FileNotFoundError(f"Layout file not found: {path}")
    with layout_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise LayoutFormatError(f"{path} is not valid JSON: {exc}") from exc
    return layout_from_dict(data, engine)


def save_layout(grid: GridModel, path: str) -> Path:
    layout_path = Path(path)
    layout_path.parent.mkdir(parents=True, exist_ok=True)
    with layout_path.open("w", encoding="utf-8") as f:
        json.dump(layout_to_dict(grid), f, indent=2)
    return layout_path


def render_ascii(grid: GridModel) -> str:
    """
    Rendu texte : initiale du nom (ou de la silhouette) par cellule,
    en majuscule sur l'origine, en minuscule ailleurs, '.' si vide.
    """
    lines = []
    for row in range(grid.size):
        chars = []
        for col in range(grid.size):
            shape = grid.cell_at(row, col)
            if shape is None:
                chars.append(".")
                continue
            initial = (shape.label or shape.category.kind.value)[0]
            chars.append(initial.upper() if grid.is_origin(row, col) else initial.lower())
        lines.append(" ".join(chars))
    return "\n".join(lines)


__all__ = ["layout_to_dict", "layout_from_dict", "load_layout", "save_layout", "render_ascii"]
