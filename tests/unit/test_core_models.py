import pytest

from safari_shapes.core.errors import InvalidCategory
from safari_shapes.core.geometry import GeometryTable, footprint_of, point_value_of
from safari_shapes.core.models import (
    DEFAULT_PALETTE,
    Footprint,
    PlacedShape,
    Position,
    ShapeCategory,
    ShapeKind,
    SizeTier,
    palette_entry,
)


def test_footprint_and_points_per_tier() -> None:
    expected = {
        SizeTier.XS: ((1, 1), 1),
        SizeTier.SM: ((1, 1), 3),
        SizeTier.MD: ((2, 2), 7),
        SizeTier.LG: ((2, 2), 12),
        SizeTier.XL: ((3, 3), 20),
    }
    for size, ((width, height), points) in expected.items():
        fp = footprint_of(size)
        assert (fp.width, fp.height) == (width, height)
        assert point_value_of(size) == points


def test_point_values_strictly_increase_with_size() -> None:
    values = [GeometryTable.point_value_of(s) for s in SizeTier.ordered()]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_unknown_tier_raises_invalid_category() -> None:
    with pytest.raises(InvalidCategory):
        footprint_of("huge")
    with pytest.raises(InvalidCategory):
        point_value_of(None)


def test_category_parse_and_str() -> None:
    category = ShapeCategory.parse(" Circle ", "MD")
    assert category == ShapeCategory(ShapeKind.CIRCLE, SizeTier.MD)
    assert str(category) == "circle-md"

    with pytest.raises(InvalidCategory):
        ShapeCategory.parse("hexagon", "md")
    with pytest.raises(InvalidCategory):
        ShapeCategory.parse("circle", "xxl")


def test_footprint_cells_cover_rectangle() -> None:
    cells = list(Footprint(2, 2).cells(Position(1, 3)))
    assert cells == [Position(1, 3), Position(1, 4), Position(2, 3), Position(2, 4)]
    assert Footprint(3, 3).area == 9

    with pytest.raises(ValueError):
        Footprint(0, 1)


def test_placed_shape_signature_ignores_id_and_origin() -> None:
    category = ShapeCategory(ShapeKind.HEART, SizeTier.XL)
    a = PlacedShape("a", category, Position(0, 0), label="Elephant")
    b = PlacedShape("b", category, Position(2, 2), label="Elephant")
    assert a.signature == b.signature
    assert str(a) == "Elephant@(0,0)"


def test_palette_lookup_is_case_insensitive() -> None:
    assert palette_entry("fox").category == ShapeCategory(ShapeKind.CIRCLE, SizeTier.MD)
    assert [e.category.size for e in DEFAULT_PALETTE] == SizeTier.ordered()

    with pytest.raises(InvalidCategory):
        palette_entry("Giraffe")
