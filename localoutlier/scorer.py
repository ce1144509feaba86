"""
scorer.py
=========
LOFScorer – Local Outlier Factor against a fixed training set.

Construction validates the data, computes FeatureBounds and the full
training distance matrix once. Every call afterwards works on its own
QueryExtension / NeighborRanker / DensityEngine and leaves the scorer
untouched, so one scorer may be shared between threads.

Conventions
-----------
• LOF ≈ 1 : density comparable to the neighbours (inlier)
• LOF ≫ 1 : density deficit relative to the neighbours (outlier)
• LOF = 0 : the point's own LRD is undefined (it coincides with all of
            its neighbours)
• neighbours are reported nearest first; equal distances keep training
  input order
"""

import logging
import os
import time

import joblib
import numpy as np
from joblib import Parallel, delayed

from .bounds import DEFAULT_ZERO_SPAN, FeatureBounds, check_zero_span
from .density import DensityEngine
from .distance import Distance, get_metric
from .errors import ConfigurationError, InvalidInputError
from .matrix import TrainingMatrix
from .ranking import NeighborRanker
from .validation import check_instances, check_k, check_query

logger = logging.getLogger(__name__)

DEFAULT_METRIC = Distance.EUCLIDEAN
DEFAULT_N_JOBS = None


def outlier_factor(density: DensityEngine, k: int, i: int) -> float:
    """Mean of lrd(o) / lrd(i) over the tie-extended neighbours o of i."""
    ranker = density.ranker
    neighbors = ranker.neighbors(k, i)
    lrd_i = density.local_reachability_density(k, i)
    if lrd_i == 0:
        return 0.0
    total = sum(density.local_reachability_density(k, int(o)) for o in neighbors)
    return total / lrd_i / len(neighbors)


class LOFScorer:
    """
    Parameters
    ----------
    instances : 2-D array-like or DataFrame of training instances
    metric    : Distance member, metric name, or DistanceMetric instance
    zero_span : 'ignore' | 'clamp' | 'raise' – constant-attribute policy
                for the normalised metric (default 'ignore'). A metric
                instance brings its own policy; a different value here is
                a ConfigurationError.
    n_jobs    : joblib worker count for the training matrix build
    """

    def __init__(self, instances, metric=DEFAULT_METRIC,
                 zero_span: str = None, n_jobs=DEFAULT_N_JOBS):
        start = time.perf_counter()
        X, feature_names = check_instances(instances)
        X.flags.writeable = False
        self.instances = X
        self.feature_names = feature_names
        self.metric = get_metric(
            metric, zero_span=check_zero_span(zero_span or DEFAULT_ZERO_SPAN)
        )
        own_policy = getattr(self.metric, 'zero_span', None)
        if zero_span is not None and own_policy is not None and own_policy != zero_span:
            raise ConfigurationError(
                f"zero_span={zero_span!r} conflicts with {self.metric!r}."
            )
        self.zero_span = own_policy or zero_span or DEFAULT_ZERO_SPAN
        self.bounds = FeatureBounds.compute(X)

        if self.bounds.constant.any() and self.metric.needs_bounds:
            logger.warning(
                "Constant attributes %s under %r",
                np.flatnonzero(self.bounds.constant).tolist(), self.metric,
            )

        self.matrix = TrainingMatrix(X, self.metric, self.bounds, n_jobs=n_jobs)
        logger.info(
            "LOFScorer ready: %d instances, %d features, %r (%.1f ms)",
            self.n_instances, self.n_features, self.metric,
            (time.perf_counter() - start) * 1000,
        )

    # ------------------------------------------------------------------ #
    #  Shape                                                               #
    # ------------------------------------------------------------------ #

    @property
    def n_instances(self) -> int:
        return self.instances.shape[0]

    @property
    def n_features(self) -> int:
        return self.instances.shape[1]

    # ------------------------------------------------------------------ #
    #  Scoring                                                             #
    # ------------------------------------------------------------------ #

    def _session(self, query=None):
        if query is None:
            extension = self.matrix.neutral()
        else:
            extension = self.matrix.extend(check_query(query, self.n_features))
        ranker = NeighborRanker(extension)
        return extension, DensityEngine(ranker)

    def score(self, query, k: int) -> float:
        """LOF of a single query instance against the training set."""
        k = check_k(k, self.n_instances)
        extension, density = self._session(query)
        lof = outlier_factor(density, k, extension.query_index)
        logger.debug(
            "score k=%d neighbours=%d lof=%.6f",
            k, density.ranker.resolve_k(k, extension.query_index), lof,
        )
        return lof

    def score_many(self, queries, k: int, n_jobs=DEFAULT_N_JOBS) -> np.ndarray:
        """
        LOF of every row of *queries*, in order.

        Each query gets its own extension, so rows are scored independently
        (in threads when n_jobs is not 1).
        """
        check_k(k, self.n_instances)
        if queries is not None and hasattr(queries, '__len__') and len(queries) == 0:
            return np.empty(0, dtype=np.float64)
        Q, _ = check_instances(queries, role='query')
        if Q.shape[1] != self.n_features:
            raise InvalidInputError(
                f"Queries have {Q.shape[1]} attributes, training data has {self.n_features}."
            )
        if n_jobs in (None, 1):
            scores = [self.score(q, k) for q in Q]
        else:
            scores = Parallel(n_jobs=n_jobs, prefer='threads')(
                delayed(self.score)(q, k) for q in Q
            )
        return np.asarray(scores, dtype=np.float64)

    def training_scores(self, k: int) -> np.ndarray:
        """LOF of every training instance, in input order."""
        k = check_k(k, self.n_instances)
        _, density = self._session()
        scores = np.array(
            [outlier_factor(density, k, i) for i in range(self.n_instances)],
            dtype=np.float64,
        )
        logger.debug("training scores k=%d max=%.6f", k, scores.max())
        return scores

    # ------------------------------------------------------------------ #
    #  Neighbours                                                          #
    # ------------------------------------------------------------------ #

    def neighbor_indices(self, query, k: int) -> np.ndarray:
        """Training ids of the query's tie-extended k nearest neighbours, nearest first."""
        k = check_k(k, self.n_instances)
        extension, density = self._session(query)
        return density.ranker.neighbors(k, extension.query_index).copy()

    def neighbors(self, query, k: int) -> list:
        """Copies of the neighbouring training instances, same order as neighbor_indices."""
        return [self.instances[j].copy() for j in self.neighbor_indices(query, k)]

    # ------------------------------------------------------------------ #
    #  Persistence                                                         #
    # ------------------------------------------------------------------ #

    def save(self, path: str) -> None:
        joblib.dump(self, path)

    @classmethod
    def load(cls, path: str) -> 'LOFScorer':
        if not os.path.exists(path):
            raise FileNotFoundError(f"Model file not found: {path}")
        obj = joblib.load(path)
        if not isinstance(obj, cls):
            raise TypeError(f"{path} does not contain a {cls.__name__}, got {type(obj).__name__}.")
        return obj

    def __setstate__(self, state):
        self.__dict__.update(state)
        self.instances.flags.writeable = False

    def __repr__(self):
        return (
            f"<LOFScorer instances={self.n_instances} "
            f"features={self.n_features} metric={self.metric!r}>"
        )
