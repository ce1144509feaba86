"""
ranking.py
==========
Neighbour ordering with tie-inclusive k.

Every row is ordered by ascending distance with ties broken by ascending
instance id, and the row's own id is removed explicitly (the diagonal
sentinel is never compared by value). ``resolve_k`` widens k while the
k-th and (k+1)-th distances are exactly equal; there is no tolerance, so
two distances that differ in the last bit are NOT a tie.
"""

import numpy as np


def rank_row(row: np.ndarray, own_index: int):
    """(ids, distances) of one full distance row, own entry excluded."""
    ids = np.argsort(row, kind='stable')
    ids = ids[ids != own_index]
    return ids, row[ids]


def rank_rows(distances: np.ndarray):
    """Vectorised rank_row over a square matrix; row i excludes column i."""
    n = distances.shape[0]
    ids = np.argsort(distances, axis=1, kind='stable')
    keep = ids != np.arange(n)[:, None]
    ids = ids[keep].reshape(n, n - 1)
    return ids, np.take_along_axis(distances, ids, axis=1)


def resolve_k(k: int, sorted_distances: np.ndarray) -> int:
    """Effective neighbour count for an ascending distance row."""
    count = min(k, len(sorted_distances))
    while count < len(sorted_distances) and sorted_distances[count - 1] == sorted_distances[count]:
        count += 1
    return count


class NeighborRanker:
    """
    Neighbour order for every instance of one QueryExtension.

    Training rows reuse the order precomputed by the TrainingMatrix; the
    query id is merged in with a binary search. It is the largest id, so
    it lands after any training instance at the same distance, exactly
    where a stable sort of the whole extended row would put it.

    Results are cached on the ranker, which lives for a single call.
    """

    def __init__(self, extension):
        self.extension = extension
        self._ranked = {}

    def rank(self, i: int):
        """(ids, distances) of instance i's neighbours, nearest first."""
        cached = self._ranked.get(i)
        if cached is not None:
            return cached
        ext = self.extension
        query = ext.query_index
        if i == query:
            ids = np.argsort(ext.distances, kind='stable')
            dists = ext.distances[ids]
        elif ext.is_neutral:
            # the synthetic query always ranks last, never within reach of k
            ids = ext.training.order[i]
            dists = ext.training.sorted_distances[i]
        else:
            training = ext.training
            base_ids = training.order[i]
            base_dists = training.sorted_distances[i]
            d = ext.distances[i]
            pos = int(np.searchsorted(base_dists, d, side='right'))
            ids = np.insert(base_ids, pos, query)
            dists = np.insert(base_dists, pos, d)
        self._ranked[i] = (ids, dists)
        return ids, dists

    def resolve_k(self, k: int, i: int) -> int:
        _, dists = self.rank(i)
        return resolve_k(k, dists)

    def neighbors(self, k: int, i: int) -> np.ndarray:
        ids, dists = self.rank(i)
        return ids[:resolve_k(k, dists)]

    def k_distance(self, k: int, i: int) -> float:
        """Distance from i to its k-th nearest neighbour (tie-extended)."""
        _, dists = self.rank(i)
        return float(dists[resolve_k(k, dists) - 1])
