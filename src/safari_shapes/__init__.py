"""
Safari Shapes - grid placement experiment
=========================================

Players place animal enclosures (multi-cell shapes) on a square board over a
sequence of rounds; the package provides the placement engine, scoring,
layout comparison and the round state machine.

Flow:
    Player input -> PlacementEngine -> scoring -> RoundStateMachine -> render
"""

from .core.errors import (
    CannotPlace,
    ConfigError,
    InvalidCategory,
    LayoutFormatError,
    NoShapeAtCell,
    Occupied,
    OutOfBounds,
    PlacementFailure,
    RoundStateError,
    SafariError,
)
from .core.geometry import GeometryTable, footprint_of, point_value_of
from .core.models import (
    DEFAULT_PALETTE,
    Footprint,
    PaletteEntry,
    PlacedShape,
    Position,
    ShapeCategory,
    ShapeKind,
    SizeTier,
    palette_entry,
)
from .board.grid import GridModel, empty_grid
from .board.placement import PlacementEngine
from .board.scoring import all_categories_used, categories_used, score, score_progress, unique_shape_count
from .board.comparator import LayoutComparison, compare_layouts, layouts_equal, similarity
from .board.layout_io import layout_from_dict, layout_to_dict, load_layout, render_ascii, save_layout
from .experiment.config import ExperimentConfig
from .experiment.rounds import ExperimentCondition, ObjectiveKind, RoundConfig, RoundObjective
from .experiment.state_machine import RoundPhase, RoundRecord, RoundStateMachine
from .utils.logger import LogLevel, SafariLogger, get_logger, set_logger

__version__ = "0.1.0"

__all__ = [
    # Errors
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

    # Data model
    "ShapeKind",
    "SizeTier",
    "ShapeCategory",
    "Position",
    "Footprint",
    "PaletteEntry",
    "PlacedShape",
    "DEFAULT_PALETTE",
    "palette_entry",
    "GeometryTable",
    "footprint_of",
    "point_value_of",

    # Board engine
    "GridModel",
    "empty_grid",
    "PlacementEngine",
    "score",
    "unique_shape_count",
    "categories_used",
    "all_categories_used",
    "score_progress",
    "LayoutComparison",
    "compare_layouts",
    "layouts_equal",
    "similarity",
    "layout_from_dict",
    "layout_to_dict",
    "load_layout",
    "save_layout",
    "render_ascii",

    # Experiment
    "ExperimentConfig",
    "ExperimentCondition",
    "ObjectiveKind",
    "RoundObjective",
    "RoundConfig",
    "RoundPhase",
    "RoundRecord",
    "RoundStateMachine",

    # Logging
    "SafariLogger",
    "LogLevel",
    "get_logger",
    "set_logger",
]
