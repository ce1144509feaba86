"""
Tests for LocalOutlierFactorDetector (record-level adapter).
"""

import numpy as np
import pandas as pd
import pytest

from localoutlier import InvalidInputError, LocalOutlierFactorDetector, LOFScorer


@pytest.fixture
def frame(eleven_points):
    df = pd.DataFrame(eleven_points, columns=['x', 'y'])
    df['host'] = 'node-a'
    return df


@pytest.fixture
def detector(frame):
    det = LocalOutlierFactorDetector(n_neighbors=5, threshold=1.5)
    det.train(frame)
    return det


class TestLocalOutlierFactorDetector:

    def test_not_ready_before_training(self):
        det = LocalOutlierFactorDetector()
        with pytest.raises(RuntimeError):
            det.predict({'x': 0, 'y': 0})
        assert 'ready=False' in repr(det)

    def test_numeric_columns_become_features(self, detector):
        assert detector.feature_order == ['x', 'y']
        assert isinstance(detector.model, LOFScorer)

    def test_inlier(self, detector):
        pred, score, latency = detector.predict({'x': 2, 'y': 0, 'host': 'node-a'})
        assert pred == 1
        assert score == pytest.approx(1.5 - detector.model.score([2, 0], 5))
        assert latency >= 0.0

    def test_outlier(self, detector):
        pred, score, _ = detector.predict({'x': 10, 'y': 4})
        assert pred == -1
        assert score < 0

    def test_score_samples(self, detector):
        queries = pd.DataFrame({'x': [2, 10], 'y': [0, 4]}, index=['a', 'b'])
        scores = detector.score_samples(queries)
        assert list(scores.index) == ['a', 'b']
        assert scores['a'] == detector.model.score([2, 0], 5)
        assert scores['b'] > 2.0

    def test_small_sample_clips_neighbours(self, frame):
        det = LocalOutlierFactorDetector(n_neighbors=20)
        det.train(frame)
        assert det.k_ == 10
        assert det.n_neighbors == 20

    def test_retrain_restores_configured_neighbours(self, frame):
        det = LocalOutlierFactorDetector(n_neighbors=20)
        det.train(frame)
        rng = np.random.default_rng(0)
        larger = pd.DataFrame(rng.normal(size=(30, 2)), columns=['x', 'y'])
        det.train(larger)
        assert det.n_neighbors == 20
        assert det.k_ == 20
        assert det.model.n_instances == 30

    def test_failed_training_leaves_detector_untouched(self):
        bad = pd.DataFrame({'x': [0.0, 1.0, np.nan], 'y': [0.0, 1.0, 2.0]})
        det = LocalOutlierFactorDetector(n_neighbors=5)
        with pytest.raises(InvalidInputError):
            det.train(bad)
        assert det.model is None
        assert det.feature_order is None
        assert det.k_ is None

    def test_explicit_feature_order(self, frame):
        det = LocalOutlierFactorDetector(n_neighbors=3, feature_order=['y'])
        det.train(frame)
        assert det.model.n_features == 1

    def test_save_load(self, detector, tmp_path):
        path = str(tmp_path / 'lof_detector.pkl')
        detector.save(path)
        restored = LocalOutlierFactorDetector()
        restored.load(path)
        assert restored.n_neighbors == 5
        assert restored.k_ == 5
        assert restored.feature_order == ['x', 'y']
        np.testing.assert_array_equal(
            restored.model.training_scores(5), detector.model.training_scores(5)
        )
        assert restored.predict({'x': 10, 'y': 4})[:2] == detector.predict({'x': 10, 'y': 4})[:2]
