from safari_shapes.board.comparator import compare_layouts, layouts_equal, similarity
from safari_shapes.board.grid import GridModel
from safari_shapes.board.placement import PlacementEngine
from safari_shapes.core.models import Position, palette_entry
from safari_shapes.utils.logger import SafariLogger


def _board(*placements, size=5):
    engine = PlacementEngine(logger=SafariLogger())
    grid = GridModel(size)
    for label, row, col in placements:
        entry = palette_entry(label)
        engine.place(grid, entry.category, Position(row, col), label=entry.label)
    return grid


def test_identical_layouts_are_equal_and_fully_similar() -> None:
    a = _board(("Fox", 1, 1), ("Mouse", 0, 0))
    b = _board(("Mouse", 0, 0), ("Fox", 1, 1))

    assert layouts_equal(a, b)
    assert similarity(a, b) == 100.0


def test_copying_the_fox_reference() -> None:
    reference = _board(("Fox", 1, 1))
    player = _board(("Fox", 1, 1))
    assert layouts_equal(player, reference)

    wrong_place = _board(("Fox", 1, 2))
    assert not layouts_equal(wrong_place, reference)
    # union of 6 cells, 2 shared cells
    assert round(similarity(wrong_place, reference), 2) == round(2 / 6 * 100, 2)


def test_empty_boards() -> None:
    empty = _board()
    mouse = _board(("Mouse", 0, 0))

    assert layouts_equal(empty, _board())
    assert similarity(empty, _board()) == 0.0
    assert similarity(empty, mouse) == 0.0
    assert not layouts_equal(empty, mouse)


def test_similarity_is_symmetric_and_bounded() -> None:
    a = _board(("Elephant", 0, 0), ("Mouse", 4, 4))
    b = _board(("Elephant", 0, 0), ("Rabbit", 4, 4), ("Fox", 3, 0))

    ab = similarity(a, b)
    assert ab == similarity(b, a)
    assert 0.0 <= ab <= 100.0
    assert layouts_equal(a, b) is False
    assert layouts_equal(a, b) == layouts_equal(b, a)


def test_label_differences_count_as_mismatch() -> None:
    a = _board(("Mouse", 2, 2))
    b = _board(("Mouse", 2, 2))
    engine = PlacementEngine(logger=SafariLogger())
    c = GridModel(5)
    engine.place(c, palette_entry("Mouse").category, Position(2, 2), label="Hamster")

    assert layouts_equal(a, b)
    assert not layouts_equal(a, c)
    assert similarity(a, c) == 0.0


def test_comparison_details() -> None:
    a = _board(("Mouse", 0, 0), ("Rabbit", 0, 1))
    b = _board(("Mouse", 0, 0), ("Leopard", 3, 3))
    comparison = compare_layouts(a, b)

    assert not comparison.is_equal
    assert comparison.compared_cells == 6
    assert comparison.matching_cells == 1
    assert comparison.details == {"only_in_first": 1, "only_in_second": 4}
    assert comparison.diff_mask[0, 1]
    assert not comparison.diff_mask[0, 0]


def test_size_mismatch_is_never_equal() -> None:
    comparison = compare_layouts(_board(size=5), _board(size=6))
    assert not comparison.is_equal
    assert comparison.similarity == 0.0
    assert "mismatch" in comparison.details["error"]


def test_equality_is_symmetric() -> None:
    pairs = [
        (_board(("Fox", 1, 1)), _board(("Fox", 1, 2))),
        (_board(), _board(("Mouse", 0, 0))),
        (_board(("Mouse", 2, 2)), _board(("Rabbit", 2, 2))),
        (_board(("Elephant", 0, 0)), _board(("Elephant", 0, 0))),
    ]
    for a, b in pairs:
        assert layouts_equal(a, b) == layouts_equal(b, a)
        assert compare_layouts(a, b).compared_cells == compare_layouts(b, a).compared_cells
