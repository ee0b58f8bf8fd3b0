from safari_shapes.board.scoring import (
    all_categories_used,
    categories_used,
    score,
    score_progress,
    unique_shape_count,
)
from safari_shapes.core.models import DEFAULT_PALETTE, Position, ShapeCategory, palette_entry


def _place(engine, grid, label, row, col):
    entry = palette_entry(label)
    return engine.place(grid, entry.category, Position(row, col), label=entry.label)


def test_empty_board_scores_zero(grid) -> None:
    assert score(grid) == 0
    assert unique_shape_count(grid) == 0
    assert categories_used(grid) == set()


def test_multi_cell_shape_counted_once(engine, grid) -> None:
    _place(engine, grid, "Elephant", 0, 0)
    assert score(grid) == 20
    assert unique_shape_count(grid) == 1


def test_score_is_additive(engine, grid) -> None:
    _place(engine, grid, "Fox", 0, 0)
    first = score(grid)
    _place(engine, grid, "Leopard", 3, 3)
    assert score(grid) == first + 12

    engine.remove(grid, (0, 1))
    assert score(grid) == 12


def test_categories_used_and_palette_coverage(engine, grid) -> None:
    _place(engine, grid, "Mouse", 0, 0)
    _place(engine, grid, "Mouse", 0, 1)
    _place(engine, grid, "Fox", 1, 0)

    used = categories_used(grid)
    assert len(used) == 2
    assert palette_entry("Mouse").signature in used
    assert not all_categories_used(grid, DEFAULT_PALETTE)
    assert all_categories_used(grid, [palette_entry("Mouse"), palette_entry("Fox")])


def test_same_category_different_label_is_distinct(engine, grid) -> None:
    category = ShapeCategory.parse("square", "xs")
    engine.place(grid, category, Position(0, 0), label="Mouse")
    engine.place(grid, category, Position(0, 1), label="Hamster")
    assert len(categories_used(grid)) == 2


def test_score_progress(engine, grid) -> None:
    _place(engine, grid, "Elephant", 0, 0)
    progress = score_progress(grid, 50)
    assert progress.current == 20
    assert progress.points_needed == 30
    assert progress.percentage == 40.0
    assert not progress.reached

    _place(engine, grid, "Leopard", 0, 3)
    _place(engine, grid, "Fox", 3, 3)
    _place(engine, grid, "Fox", 3, 0)
    _place(engine, grid, "Rabbit", 2, 3)
    _place(engine, grid, "Mouse", 2, 4)
    progress = score_progress(grid, 50)
    assert progress.current == 50
    assert progress.reached
    assert progress.percentage == 100.0
    assert progress.points_needed == 0
