import numpy as np
import pytest

from localoutlier import LOFScorer


# Ids 7..10 are the four duplicates at (2, 0).
ELEVEN_POINTS = [
    [0, 0], [0, 1], [1, 0], [1, 1], [1, 2], [2, 1], [2, 2],
    [2, 0], [2, 0], [2, 0], [2, 0],
]


@pytest.fixture
def eleven_points():
    return [list(p) for p in ELEVEN_POINTS]


@pytest.fixture
def scenario(eleven_points):
    return LOFScorer(eleven_points)


@pytest.fixture
def grid_with_outlier():
    """3x3 integer grid centred on the origin (id 4) plus a far point (id 9)."""
    grid = [[x, y] for x in (-1, 0, 1) for y in (-1, 0, 1)]
    return np.array(grid + [[50, 50]], dtype=float)
