"""
Outils de visualisation des plateaux (debug et restitution d'expérience).
"""

from __future__ import annotations

from typing import Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import to_rgb
from matplotlib.patches import Rectangle as MPLRect

from safari_shapes.board.comparator import compare_layouts
from safari_shapes.board.grid import GridModel
from safari_shapes.core.geometry import footprint_of
from safari_shapes.core.models import PlacedShape

ANIMAL_COLORS = {
    "mouse": "#9ca3af",
    "rabbit": "#fbbf24",
    "fox": "#f97316",
    "leopard": "#ca8a04",
    "elephant": "#a855f7",
}
DEFAULT_SHAPE_COLOR = "#10b981"
EMPTY_COLOR = "#f7fee7"


class BoardVisualizer:
    """Visualisation basique des plateaux et de leurs différences."""

    @staticmethod
    def shape_color(shape: PlacedShape) -> str:
        return ANIMAL_COLORS.get((shape.label or "").lower(), DEFAULT_SHAPE_COLOR)

    @staticmethod
    def to_image(grid: GridModel) -> np.ndarray:
        """Image RGB (N, N, 3) : une couleur par cellule selon l'animal."""
        image = np.zeros((grid.size, grid.size, 3), dtype=float)
        for row in range(grid.size):
            for col in range(grid.size):
                shape = grid.cell_at(row, col)
                color = BoardVisualizer.shape_color(shape) if shape else EMPTY_COLOR
                image[row, col] = to_rgb(color)
        return image

    @staticmethod
    def _draw_board(ax: plt.Axes, grid: GridModel, title: str) -> None:
        ax.imshow(BoardVisualizer.to_image(grid), interpolation="nearest")
        ax.set_title(title)
        ax.set_xticks(np.arange(-0.5, grid.size, 1), minor=True)
        ax.set_yticks(np.arange(-0.5, grid.size, 1), minor=True)
        ax.grid(True, which="minor", color="gray", linewidth=0.5, alpha=0.5)

        for shape in grid.shapes():
            BoardVisualizer._add_shape_overlay(ax, shape)

    @staticmethod
    def _add_shape_overlay(ax: plt.Axes, shape: PlacedShape) -> None:
        """Contour de l'empreinte et nom de l'animal sur la cellule d'origine."""
        footprint = footprint_of(shape.category.size)
        rect = MPLRect(
            (shape.origin.col - 0.5, shape.origin.row - 0.5),
            footprint.width,
            footprint.height,
            linewidth=2,
            edgecolor="#78350f",
            facecolor="none",
        )
        ax.add_patch(rect)
        ax.text(
            shape.origin.col,
            shape.origin.row,
            shape.label or shape.category.kind.value,
            color="black",
            fontsize=8,
            ha="center",
            va="center",
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.7),
        )

    @staticmethod
    def plot_board(grid: GridModel, title: str = "Safari Board", figsize: Tuple[int, int] = (6, 6)):
        fig, ax = plt.subplots(figsize=figsize)
        BoardVisualizer._draw_board(ax, grid, title)
        plt.tight_layout()
        return fig, ax

    @staticmethod
    def plot_comparison(
        player: GridModel,
        reference: GridModel,
        title: str = "Player vs Reference",
        figsize: Tuple[int, int] = (15, 5),
    ):
        """Figure à trois panneaux : joueur, référence, cellules discordantes."""
        comparison = compare_layouts(player, reference)
        fig, axs = plt.subplots(1, 3, figsize=figsize)
        fig.suptitle(f"{title} (similarity {comparison.similarity:.0f}%)", fontsize=14)

        BoardVisualizer._draw_board(axs[0], player, "Player")
        BoardVisualizer._draw_board(axs[1], reference, "Reference")

        mask = comparison.diff_mask if comparison.diff_mask is not None else np.ones(player.shape, dtype=bool)
        axs[2].imshow(mask, cmap="Reds", vmin=0, vmax=1, interpolation="nearest")
        axs[2].set_title("Mismatched cells")

        plt.tight_layout()
        return fig, axs


__all__ = ["BoardVisualizer", "ANIMAL_COLORS"]
