"""
density.py
==========
Reachability distance and local reachability density (LRD).

    reach(i, j) = max(d(i, j), k-distance(j))
    lrd(i)      = |N_k(i)| / Σ_{o ∈ N_k(i)} reach(i, o)

An LRD of 0 means the density is undefined: every neighbour coincides
with i and all reach distances are 0. It is returned, not raised.
"""

import numpy as np


class DensityEngine:
    """Call-local density computations over one NeighborRanker."""

    def __init__(self, ranker):
        self.ranker = ranker
        self._lrd = {}

    def reach_distance(self, k: int, i: int, j: int) -> float:
        d = self.ranker.extension.distance(i, j)
        return max(d, self.ranker.k_distance(k, j))

    def local_reachability_density(self, k: int, i: int) -> float:
        key = (k, i)
        if key in self._lrd:
            return self._lrd[key]
        ranker = self.ranker
        ids, dists = ranker.rank(i)
        num_nn = ranker.resolve_k(k, i)
        k_dists = np.fromiter(
            (ranker.k_distance(k, int(o)) for o in ids[:num_nn]),
            dtype=np.float64, count=num_nn,
        )
        total = float(np.maximum(dists[:num_nn], k_dists).sum())
        lrd = 0.0 if total == 0 else num_nn / total
        self._lrd[key] = lrd
        return lrd
