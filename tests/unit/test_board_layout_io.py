import pytest

from safari_shapes.board.comparator import layouts_equal
from safari_shapes.board.layout_io import (
    layout_from_dict,
    layout_to_dict,
    load_layout,
    render_ascii,
    save_layout,
)
from safari_shapes.board.scoring import score
from safari_shapes.core.errors import LayoutFormatError
from safari_shapes.core.models import Position, palette_entry
from safari_shapes.utils.logger import SafariLogger, get_logger, set_logger


def _fox_den(engine, grid):
    for label, row, col in [("Mouse", 0, 0), ("Fox", 1, 1), ("Rabbit", 4, 0)]:
        entry = palette_entry(label)
        engine.place(grid, entry.category, Position(row, col), label=entry.label)
    return grid


def test_layout_dict_round_trip(engine, grid) -> None:
    _fox_den(engine, grid)
    data = layout_to_dict(grid)

    assert data["size"] == 5
    assert data["shapes"][0] == {"kind": "square", "size": "xs", "label": "Mouse", "row": 0, "col": 0}
    assert layouts_equal(layout_from_dict(data), grid)


def test_save_and_load(tmp_path, engine, grid) -> None:
    _fox_den(engine, grid)
    path = save_layout(grid, str(tmp_path / "layouts" / "den.json"))

    loaded = load_layout(str(path))
    assert score(loaded) == 11
    assert layouts_equal(loaded, grid)


def test_invalid_layouts_raise_format_error(tmp_path) -> None:
    with pytest.raises(LayoutFormatError):
        layout_from_dict({"size": 5, "shapes": [{"kind": "circle", "size": "md", "row": 0}]})
    with pytest.raises(LayoutFormatError):
        layout_from_dict({"size": 5, "shapes": [{"kind": "hexagon", "size": "md", "row": 0, "col": 0}]})
    with pytest.raises(LayoutFormatError):
        layout_from_dict({"size": 5, "shapes": [{"kind": "heart", "size": "xl", "row": 3, "col": 3}]})
    with pytest.raises(LayoutFormatError):
        layout_from_dict({"size": "big"})

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(LayoutFormatError):
        load_layout(str(broken))
    with pytest.raises(FileNotFoundError):
        load_layout(str(tmp_path / "missing.json"))


def test_overlapping_layout_is_rejected() -> None:
    data = {
        "size": 5,
        "shapes": [
            {"kind": "circle", "size": "md", "label": "Fox", "row": 1, "col": 0},
            {"kind": "heart", "size": "xl", "label": "Elephant", "row": 2, "col": 0},
        ],
    }
    with pytest.raises(LayoutFormatError):
        layout_from_dict(data)


def test_render_ascii(engine, grid) -> None:
    _fox_den(engine, grid)
    assert render_ascii(grid).splitlines() == [
        "M . . . .",
        ". F f . .",
        ". f f . .",
        ". . . . .",
        "R . . . .",
    ]


def test_loading_does_not_touch_global_metrics() -> None:
    set_logger(SafariLogger())
    layout_from_dict({"size": 5, "shapes": [{"kind": "square", "size": "xs", "row": 0, "col": 0}]})
    assert get_logger().metrics.placements == 0
