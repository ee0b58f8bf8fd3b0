import random

import pytest

from safari_shapes.board.grid import GridModel
from safari_shapes.board.placement import PlacementEngine
from safari_shapes.board.scoring import score
from safari_shapes.core.errors import CannotPlace, NoShapeAtCell, OutOfBounds, PlacementFailure
from safari_shapes.core.geometry import footprint_of
from safari_shapes.core.models import Position, ShapeCategory

XS = ShapeCategory.parse("square", "xs")
SM = ShapeCategory.parse("triangle", "sm")
MD = ShapeCategory.parse("circle", "md")
LG = ShapeCategory.parse("square", "lg")
XL = ShapeCategory.parse("heart", "xl")


def _snapshot(grid: GridModel):
    return [[grid.shape_id_at(r, c) for c in range(grid.size)] for r in range(grid.size)]


def test_place_covers_whole_footprint(engine, grid) -> None:
    shape = engine.place(grid, MD, Position(1, 1), label="Fox")

    assert shape.shape_id == "s1"
    assert shape.origin == Position(1, 1)
    for r, c in [(1, 1), (1, 2), (2, 1), (2, 2)]:
        assert grid.cell_at(r, c) is shape
    assert grid.cell_at(0, 0) is None
    assert grid.cell_at(3, 3) is None


def test_out_of_bounds_rejection_leaves_grid_unchanged(engine, grid) -> None:
    before = _snapshot(grid)
    with pytest.raises(CannotPlace) as exc_info:
        engine.place(grid, XL, Position(3, 3))

    assert exc_info.value.reason is PlacementFailure.OUT_OF_BOUNDS
    assert "boundaries" in exc_info.value.user_message
    assert _snapshot(grid) == before
    assert engine.check(grid, XL, Position(-1, 0)) is PlacementFailure.OUT_OF_BOUNDS


def test_overlap_rejection_leaves_grid_unchanged(engine, grid) -> None:
    engine.place(grid, MD, Position(1, 0))
    before = _snapshot(grid)

    with pytest.raises(CannotPlace) as exc_info:
        engine.place(grid, XL, Position(2, 0))

    assert exc_info.value.reason is PlacementFailure.OCCUPIED
    assert _snapshot(grid) == before
    assert len(grid) == 1


def test_rejections_are_counted(engine, grid, logger) -> None:
    engine.place(grid, XS, Position(0, 0))
    assert not engine.can_place(grid, XS, Position(0, 0))
    with pytest.raises(CannotPlace):
        engine.place(grid, XS, Position(0, 0))

    assert logger.metrics.placements == 1
    assert logger.metrics.rejections == 1


def test_one_of_each_tier_scores_43(engine, grid) -> None:
    engine.place(grid, XS, Position(0, 0))
    engine.place(grid, SM, Position(0, 1))
    engine.place(grid, MD, Position(0, 2))
    engine.place(grid, LG, Position(2, 3))
    engine.place(grid, XL, Position(2, 0))

    assert score(grid) == 43
    assert len(grid) == 5
    assert grid.check_invariants()


def test_remove_from_any_covered_cell(engine, grid) -> None:
    shape = engine.place(grid, LG, Position(2, 2), label="Leopard")
    removed = engine.remove(grid, Position(3, 3))

    assert removed == shape
    assert grid.is_empty
    assert grid.get_shape(shape.shape_id) is None
    assert all(grid.cell_at(r, c) is None for r in range(5) for c in range(5))


def test_place_then_remove_restores_grid(engine, grid) -> None:
    engine.place(grid, XS, Position(4, 4))
    before = _snapshot(grid)

    engine.place(grid, XL, Position(0, 0))
    engine.remove(grid, (1, 1))

    assert _snapshot(grid) == before


def test_remove_empty_cell_raises(engine, grid) -> None:
    with pytest.raises(NoShapeAtCell):
        engine.remove(grid, (2, 2))
    with pytest.raises(OutOfBounds):
        engine.remove(grid, (9, 9))


def test_shape_ids_are_unique_with_default_generator(grid) -> None:
    engine = PlacementEngine()
    a = engine.place(grid, XS, Position(0, 0))
    b = engine.place(grid, XS, Position(0, 1))
    assert a.shape_id != b.shape_id


def test_duplicate_generated_id_is_refused(grid) -> None:
    engine = PlacementEngine(id_generator=lambda: "same")
    engine.place(grid, XS, Position(0, 0))
    with pytest.raises(ValueError):
        engine.place(grid, XS, Position(4, 4))
    assert grid.cell_at(4, 4) is None


def _assert_no_shared_cells(grid: GridModel) -> None:
    owners = {}
    for shape in grid.shapes():
        for cell in footprint_of(shape.category.size).cells(shape.origin):
            assert cell not in owners, f"{cell} covered by {owners[cell]} and {shape}"
            owners[cell] = shape
            assert grid.cell_at(cell.row, cell.col) is shape
    occupied = int(grid.occupancy_mask().sum())
    assert occupied == len(owners)


@pytest.mark.parametrize("seed", [0, 1, 7, 42])
def test_random_placements_never_overlap(engine, grid, seed) -> None:
    rng = random.Random(seed)
    categories = [XS, SM, MD, LG, XL]

    for _ in range(200):
        if not grid.is_empty and rng.random() < 0.3:
            victim = rng.choice(grid.shapes())
            engine.remove(grid, victim.origin)
        else:
            category = rng.choice(categories)
            origin = Position(rng.randrange(-1, 6), rng.randrange(-1, 6))
            try:
                engine.place(grid, category, origin)
            except CannotPlace:
                pass

        assert grid.check_invariants()
        _assert_no_shared_cells(grid)
