"""
matrix.py
=========
Dense distance table.

  • TrainingMatrix  – n × n distances among training instances, computed
                      once, read-only afterwards, plus each row's
                      neighbour order.
  • QueryExtension  – the (n+1)-th row/column for one query. Built fresh
                      on every call and never written back, so scorers
                      can serve concurrent queries.

Ids 0..n-1 are training instances in input order; id n is the query.
"""

import logging

import numpy as np
from joblib import Parallel, delayed

from .ranking import rank_rows

logger = logging.getLogger(__name__)

# Diagonal marker. Ranking drops the own index explicitly; the value only
# has to be something that is never a real distance.
SENTINEL = np.nan

# Rows per task when the build runs in parallel.
CHUNK_SIZE = 256


def _freeze(*arrays):
    for arr in arrays:
        arr.flags.writeable = False


class TrainingMatrix:

    def __init__(self, instances: np.ndarray, metric, bounds, n_jobs=None):
        self.instances = instances
        self.metric = metric
        self.bounds = bounds
        n = instances.shape[0]

        if n_jobs in (None, 1) or n <= CHUNK_SIZE:
            distances = metric.pairwise(instances, instances, bounds)
        else:
            # rows are independent: each block only reads the immutable inputs
            blocks = Parallel(n_jobs=n_jobs)(
                delayed(metric.pairwise)(instances[start:start + CHUNK_SIZE], instances, bounds)
                for start in range(0, n, CHUNK_SIZE)
            )
            distances = np.vstack(blocks)
        np.fill_diagonal(distances, SENTINEL)

        self.distances = distances
        self.order, self.sorted_distances = rank_rows(distances)
        _freeze(self.distances, self.order, self.sorted_distances)
        logger.debug("Built %dx%d training distance matrix", n, n)

    @property
    def n_instances(self) -> int:
        return self.distances.shape[0]

    def extend(self, query: np.ndarray) -> 'QueryExtension':
        """Distances from every training instance to *query*."""
        distances = self.metric.pairwise(query.reshape(1, -1), self.instances, self.bounds)[0]
        return QueryExtension(self, distances, query)

    def neutral(self) -> 'QueryExtension':
        """
        A synthetic query infinitely far from everything. It ranks last in
        every training row, so training instances are scored against each
        other only.
        """
        return QueryExtension(self, np.full(self.n_instances, np.inf))

    def __setstate__(self, state):
        self.__dict__.update(state)
        _freeze(self.distances, self.order, self.sorted_distances)


class QueryExtension:
    """One query's row/column of the extended (n+1) × (n+1) table."""

    def __init__(self, training: TrainingMatrix, distances: np.ndarray, query=None):
        self.training = training
        self.distances = distances
        self.query = query
        _freeze(self.distances)

    @property
    def is_neutral(self) -> bool:
        """True for the synthetic slot built by TrainingMatrix.neutral()."""
        return self.query is None

    @property
    def query_index(self) -> int:
        return self.training.n_instances

    @property
    def n_instances(self) -> int:
        return self.training.n_instances + 1

    def distance(self, i: int, j: int) -> float:
        if i == j:
            return SENTINEL
        q = self.query_index
        if i == q:
            return float(self.distances[j])
        if j == q:
            return float(self.distances[i])
        return float(self.training.distances[i, j])

    def row(self, i: int) -> np.ndarray:
        """Full extended row of instance i (a copy), sentinel on the diagonal."""
        q = self.query_index
        if i == q:
            return np.append(self.distances, SENTINEL)
        return np.append(self.training.distances[i], self.distances[i])
