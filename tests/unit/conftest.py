import itertools

import pytest

from safari_shapes.board.grid import GridModel
from safari_shapes.board.placement import PlacementEngine
from safari_shapes.utils.logger import SafariLogger


@pytest.fixture
def logger() -> SafariLogger:
    return SafariLogger()


@pytest.fixture
def engine(logger: SafariLogger) -> PlacementEngine:
    counter = itertools.count(1)
    return PlacementEngine(id_generator=lambda: f"s{next(counter)}", logger=logger)


@pytest.fixture
def grid() -> GridModel:
    return GridModel(5)
