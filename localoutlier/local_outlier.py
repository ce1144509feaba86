"""
local_outlier.py
================
LOF behind the BaseDetector contract.

Records arrive as feature dictionaries; the detector keeps a fitted
LOFScorer and turns its raw factor into the (pred, score, latency)
triple the rest of a monitoring pipeline expects:

    score = threshold - lof      (positive → normal)
    pred  = 1 if score > 0 else -1
"""

import logging
import os

import joblib
import numpy as np
import pandas as pd

from .base import BaseDetector
from .distance import Distance
from .errors import InvalidInputError
from .scorer import LOFScorer

logger = logging.getLogger(__name__)


class LocalOutlierFactorDetector(BaseDetector):

    def __init__(self, n_neighbors: int = 20, threshold: float = 1.5,
                 metric=Distance.EUCLIDEAN, feature_order: list = None):
        self.model = None
        self.n_neighbors = n_neighbors
        self.threshold = threshold
        self.metric = metric
        self.feature_order = list(feature_order) if feature_order is not None else None
        # neighbour count actually used by the fitted model
        self.k_ = None

    def train(self, X_train_df, y_train=None):
        features = self.feature_order
        if features is None:
            features = list(X_train_df.select_dtypes(include='number').columns)
        X = X_train_df[features]
        n_train = len(X)
        if n_train < 2:
            raise InvalidInputError("LocalOutlierFactorDetector needs at least two training rows.")
        k = self.n_neighbors
        if k >= n_train:
            k = n_train - 1
            logger.warning(
                "Reduced n_neighbors from %d to %d due to small sample", self.n_neighbors, k
            )
        model = LOFScorer(X, metric=self.metric)
        self.model = model
        self.feature_order = features
        self.k_ = k

    def predict(self, features_dict: dict) -> tuple:
        self.health_check()
        x = np.array([features_dict[f] for f in self.feature_order], dtype=np.float64)
        lof, latency = self._timed_predict(self.model.score, x, self.k_)
        score = self.threshold - lof
        pred = 1 if score > 0 else -1
        return pred, float(score), latency

    def score_samples(self, X_df) -> pd.Series:
        """Raw LOF of every row of *X_df*, indexed like the frame."""
        self.health_check()
        scores = self.model.score_many(X_df[self.feature_order], self.k_)
        return pd.Series(scores, index=X_df.index, name='lof')

    def save(self, path: str) -> None:
        self.health_check()
        joblib.dump({
            'model': self.model,
            'n_neighbors': self.n_neighbors,
            'k': self.k_,
            'threshold': self.threshold,
            'feature_order': self.feature_order,
        }, path)

    def load(self, path: str) -> None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Model file not found: {path}")
        data = joblib.load(path)
        self.model = data['model']
        self.n_neighbors = data['n_neighbors']
        self.k_ = data['k']
        self.threshold = data['threshold']
        self.feature_order = data['feature_order']
        self.metric = self.model.metric
