"""
Tests for the training distance matrix and query extensions.
"""

import numpy as np
import pytest

from localoutlier import EuclideanDistance, FeatureBounds, TrainingMatrix
from localoutlier.matrix import CHUNK_SIZE


def _matrix(X, n_jobs=None):
    X = np.asarray(X, dtype=float)
    return TrainingMatrix(X, EuclideanDistance(), FeatureBounds.compute(X), n_jobs=n_jobs)


class TestTrainingMatrix:

    def test_symmetric_with_sentinel_diagonal(self, eleven_points):
        D = _matrix(eleven_points).distances
        assert np.all(np.isnan(np.diag(D)))
        off = ~np.eye(len(D), dtype=bool)
        np.testing.assert_array_equal(D[off], D.T[off])
        assert D[0, 3] == np.sqrt(2)

    def test_read_only(self, eleven_points):
        matrix = _matrix(eleven_points)
        with pytest.raises(ValueError):
            matrix.distances[0, 1] = 0.0
        with pytest.raises(ValueError):
            matrix.order[0, 0] = 0

    def test_parallel_build_matches_serial(self):
        rng = np.random.default_rng(11)
        X = rng.normal(size=(CHUNK_SIZE + 40, 3))
        serial = _matrix(X)
        parallel = _matrix(X, n_jobs=2)
        np.testing.assert_array_equal(serial.distances, parallel.distances)
        np.testing.assert_array_equal(serial.order, parallel.order)


class TestQueryExtension:

    def test_extend_leaves_training_block_untouched(self, eleven_points):
        matrix = _matrix(eleven_points)
        before = matrix.distances.copy()
        first = matrix.extend(np.array([10.0, 4.0]))
        second = matrix.extend(np.array([2.0, 0.0]))
        np.testing.assert_array_equal(matrix.distances, before)
        # each extension keeps its own row
        assert first.distance(11, 7) == np.sqrt(80)
        assert second.distance(11, 7) == 0.0

    def test_distance_lookup(self, eleven_points):
        extension = _matrix(eleven_points).extend(np.array([2.0, 0.0]))
        assert extension.query_index == 11
        assert extension.n_instances == 12
        assert extension.distance(0, 11) == extension.distance(11, 0) == 2.0
        assert extension.distance(0, 3) == np.sqrt(2)
        assert np.isnan(extension.distance(11, 11))

    def test_row_has_sentinel_on_own_index(self, eleven_points):
        extension = _matrix(eleven_points).extend(np.array([2.0, 0.0]))
        row = extension.row(11)
        assert row.shape == (12,)
        assert np.isnan(row[11])
        assert np.isnan(extension.row(3)[3])

    def test_neutral_is_infinitely_far(self, eleven_points):
        neutral = _matrix(eleven_points).neutral()
        assert np.all(np.isinf(neutral.distances))
