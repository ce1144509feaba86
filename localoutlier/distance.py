"""
distance.py
===========
Pairwise distance between fixed-length numeric vectors.

Two variants, each with its own isolated formula:

  • EuclideanDistance            – L2 norm of the raw differences
  • NormalizedManhattanDistance  – Σ |a_i - b_i| / (max_i - min_i)

Both are vectorised through scipy's cdist; the scalar ``distance`` goes
through the same call so a single pair and a full row always agree to
the last bit.
"""

import abc
import enum

import numpy as np
from scipy.spatial.distance import cdist

from .bounds import DEFAULT_ZERO_SPAN, FeatureBounds, check_zero_span
from .errors import ConfigurationError, InvalidInputError


class Distance(enum.Enum):
    EUCLIDEAN = 'euclidean'
    ABS_RELATIVE = 'abs_relative'


_ALIASES = {
    'euclidean': Distance.EUCLIDEAN,
    'euclidian': Distance.EUCLIDEAN,
    'l2': Distance.EUCLIDEAN,
    'abs_relative': Distance.ABS_RELATIVE,
    'normalized_manhattan': Distance.ABS_RELATIVE,
    'normalised_manhattan': Distance.ABS_RELATIVE,
}


class DistanceMetric(abc.ABC):
    """
    Contract
    --------
    • pairwise(XA, XB, bounds) – (len(XA), len(XB)) matrix of distances
    • distance(a, b, bounds)   – one non-negative float

    Implementations must be deterministic and symmetric.
    """

    kind: Distance = None
    needs_bounds: bool = False

    @abc.abstractmethod
    def pairwise(self, XA: np.ndarray, XB: np.ndarray, bounds: FeatureBounds = None) -> np.ndarray:
        """Distances between every row of XA and every row of XB."""

    def distance(self, a, b, bounds: FeatureBounds = None) -> float:
        a = np.asarray(a, dtype=np.float64).reshape(1, -1)
        b = np.asarray(b, dtype=np.float64).reshape(1, -1)
        if a.shape != b.shape:
            raise InvalidInputError(
                f"Cannot compare instances of length {a.shape[1]} and {b.shape[1]}."
            )
        return float(self.pairwise(a, b, bounds)[0, 0])

    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __hash__(self):
        return hash((type(self), tuple(sorted(self.__dict__.items()))))

    def __repr__(self):
        return f"<{self.__class__.__name__}>"


class EuclideanDistance(DistanceMetric):
    kind = Distance.EUCLIDEAN

    def pairwise(self, XA, XB, bounds=None):
        return cdist(XA, XB, 'euclidean')


class NormalizedManhattanDistance(DistanceMetric):
    kind = Distance.ABS_RELATIVE
    needs_bounds = True

    def __init__(self, zero_span: str = DEFAULT_ZERO_SPAN):
        self.zero_span = check_zero_span(zero_span)

    def pairwise(self, XA, XB, bounds=None):
        if bounds is None:
            raise ConfigurationError(
                "Normalized Manhattan distance needs the training FeatureBounds."
            )
        weights = bounds.inverse_span(self.zero_span)
        # weighted Minkowski with p=1: Σ w_i |a_i - b_i|
        return cdist(XA, XB, 'minkowski', p=1, w=weights)

    def __repr__(self):
        return f"<NormalizedManhattanDistance zero_span={self.zero_span!r}>"


_METRICS = {
    Distance.EUCLIDEAN: EuclideanDistance,
    Distance.ABS_RELATIVE: NormalizedManhattanDistance,
}


def get_metric(metric=Distance.EUCLIDEAN, zero_span: str = DEFAULT_ZERO_SPAN) -> DistanceMetric:
    """
    Resolve a metric selector.

    Accepts a DistanceMetric instance (returned as is), a Distance member,
    or its name / alias as a string. Anything else is a ConfigurationError.
    """
    if isinstance(metric, DistanceMetric):
        return metric
    kind = metric
    if isinstance(metric, str):
        kind = _ALIASES.get(metric.strip().lower())
    if not isinstance(kind, Distance):
        raise ConfigurationError(
            f"Unsupported distance metric {metric!r}; "
            f"expected one of {sorted(_ALIASES)}."
        )
    cls = _METRICS[kind]
    if cls.needs_bounds:
        return cls(zero_span=zero_span)
    return cls()
