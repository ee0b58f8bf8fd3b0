import numpy as np
import pytest

from safari_shapes.board.grid import GridModel, empty_grid
from safari_shapes.core.errors import Occupied, OutOfBounds
from safari_shapes.core.models import Footprint, PlacedShape, Position, ShapeCategory


def test_empty_grid_has_no_shapes() -> None:
    grid = empty_grid(5)
    assert grid.shape == (5, 5)
    assert grid.is_empty
    assert len(grid) == 0
    assert all(grid.cell_at(r, c) is None for r in range(5) for c in range(5))
    assert not grid.occupancy_mask().any()


def test_cell_access_out_of_bounds() -> None:
    grid = GridModel(5)
    with pytest.raises(OutOfBounds):
        grid.cell_at(5, 0)
    with pytest.raises(OutOfBounds):
        grid.cell_at(0, -1)

    with pytest.raises(ValueError):
        GridModel(0)


def test_region_bounds_and_occupancy(engine, grid) -> None:
    engine.place(grid, ShapeCategory.parse("circle", "md"), Position(1, 1), label="Fox")

    assert grid.is_within_bounds(Position(3, 3), Footprint(2, 2))
    assert not grid.is_within_bounds(Position(3, 3), Footprint(3, 3))
    assert grid.occupied_in_region(Position(0, 0), Footprint(2, 2)) == [Position(1, 1)]
    assert grid.is_region_empty(Position(3, 3), Footprint(2, 2))

    with pytest.raises(OutOfBounds):
        grid.occupied_in_region(Position(4, 4), Footprint(2, 2))


def test_multi_cell_shape_has_single_origin(engine, grid) -> None:
    shape = engine.place(grid, ShapeCategory.parse("heart", "xl"), Position(2, 2), label="Elephant")

    covered = [(r, c) for r in range(5) for c in range(5) if grid.cell_at(r, c) is not None]
    assert len(covered) == 9
    assert all(grid.cell_at(r, c) is shape for r, c in covered)

    origins = list(grid.origin_cells())
    assert origins == [(Position(2, 2), shape)]
    assert grid.is_origin(2, 2)
    assert not grid.is_origin(3, 3)
    assert grid.check_invariants()


def test_copy_is_independent(engine, grid) -> None:
    engine.place(grid, ShapeCategory.parse("square", "xs"), Position(0, 0), label="Mouse")
    clone = grid.copy()
    engine.remove(grid, (0, 0))

    assert grid.is_empty
    assert clone.cell_at(0, 0) is not None
    assert clone.check_invariants()


def test_signature_matrix_marks_empty_cells(engine, grid) -> None:
    engine.place(grid, ShapeCategory.parse("triangle", "sm"), Position(4, 4), label="Rabbit")
    signatures = grid.signature_matrix()
    assert signatures[4, 4] == grid.cell_at(4, 4).signature
    assert signatures[0, 0] is None
    assert np.count_nonzero(grid.occupancy_mask()) == 1


def test_set_cell_refuses_foreign_shape(engine, grid) -> None:
    mouse = engine.place(grid, ShapeCategory.parse("square", "xs"), Position(0, 0), label="Mouse")
    intruder = PlacedShape("intruder", ShapeCategory.parse("square", "xs"), Position(0, 0))

    with pytest.raises(Occupied) as exc_info:
        grid.set_cell(Position(0, 0), intruder)

    assert exc_info.value.cells == ((0, 0),)
    assert grid.cell_at(0, 0) is mouse
    assert grid.get_shape("intruder") is None


def test_region_outside_board_is_never_empty(grid) -> None:
    assert not grid.is_region_empty(Position(3, 3), Footprint(3, 3))
    assert not grid.is_region_empty(Position(-1, 0), Footprint(1, 1))
    assert grid.is_region_empty(Position(2, 2), Footprint(3, 3))
