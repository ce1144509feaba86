"""
demo.py
=======
Walkthrough of the LOF engine:

  1. eleven 2-D points with four duplicates at (2, 0) – training scores,
     a few query scores and the neighbours of (2, 0)
  2. timing run on a random integer grid
"""

import time

import numpy as np

from localoutlier import LOFScorer

# ===== CONFIGURATION =====
K = 5
BIG_TRAIN = 2000        # training instances for the timing run
BIG_TEST = 100          # query instances for the timing run
RANDOM_STATE = 42
N_JOBS = None           # joblib workers for the matrix build / batch scoring
# =========================

data = [
    [0, 0], [0, 1], [1, 0], [1, 1], [1, 2], [2, 1], [2, 2],
    [2, 0], [2, 0], [2, 0], [2, 0],
]
model = LOFScorer(data)

print("LOF values on training examples")
for point, score in zip(data, model.training_scores(K)):
    print(f"  {point}\t{score:.6f}")

print("\nTest examples")
for query in ([2, 0], [0, 0], [10, 4]):
    print(f"  {query}\t{model.score(query, K):.6f}")

print("\nNeighbors of [2, 0]")
for n in model.neighbors([2, 0], K):
    print(f"  {n.tolist()}")

print("\nRunning for a big dataset")
rng = np.random.default_rng(RANDOM_STATE)
big_train = rng.integers(0, 5, size=(BIG_TRAIN, 2))
big_test = rng.integers(0, 8, size=(BIG_TEST, 2))

t0 = time.perf_counter()
big_model = LOFScorer(big_train, n_jobs=N_JOBS)
big_model.training_scores(K)
print(f"Training time: {time.perf_counter() - t0:.2f} sec")

t0 = time.perf_counter()
big_model.score_many(big_test, K, n_jobs=N_JOBS)
print(f"Testing time: {time.perf_counter() - t0:.2f} sec")
