"""
bounds.py
=========
Per-attribute minimum / maximum over the training set.

The normalised Manhattan metric divides every attribute difference by the
attribute's training span. A constant attribute has span 0; what happens
then is decided by the zero-span policy:

  • 'ignore' – the attribute contributes 0 to the distance (default)
  • 'clamp'  – the span is taken as 1
  • 'raise'  – NumericDegeneracyError
"""

import logging

import numpy as np

from .errors import ConfigurationError, InvalidInputError, NumericDegeneracyError
from .validation import check_instances

logger = logging.getLogger(__name__)

ZERO_SPAN_POLICIES = ('ignore', 'clamp', 'raise')
DEFAULT_ZERO_SPAN = 'ignore'


def check_zero_span(policy: str) -> str:
    if policy not in ZERO_SPAN_POLICIES:
        raise ConfigurationError(
            f"Unknown zero-span policy {policy!r}; expected one of {ZERO_SPAN_POLICIES}."
        )
    return policy


class FeatureBounds:
    """Immutable min/max pair for each attribute."""

    def __init__(self, minimum, maximum):
        minimum = np.array(minimum, dtype=np.float64)
        maximum = np.array(maximum, dtype=np.float64)
        if minimum.ndim != 1 or minimum.shape != maximum.shape:
            raise InvalidInputError(
                f"Bounds must be two 1-D arrays of equal length, "
                f"got {minimum.shape} and {maximum.shape}."
            )
        if np.any(minimum > maximum):
            raise InvalidInputError("Bounds have minimum greater than maximum.")
        minimum.flags.writeable = False
        maximum.flags.writeable = False
        self.minimum = minimum
        self.maximum = maximum

    @classmethod
    def compute(cls, instances) -> 'FeatureBounds':
        """Bounds of a training collection; fails on empty or ragged input."""
        if isinstance(instances, np.ndarray) and instances.ndim == 2 and instances.dtype == np.float64:
            X = instances
        else:
            X, _ = check_instances(instances)
        if X.shape[0] == 0:
            raise InvalidInputError("At least one training instance is required.")
        return cls(X.min(axis=0), X.max(axis=0))

    @property
    def n_features(self) -> int:
        return self.minimum.shape[0]

    @property
    def span(self) -> np.ndarray:
        return self.maximum - self.minimum

    @property
    def constant(self) -> np.ndarray:
        """Boolean mask of zero-span attributes."""
        return self.maximum == self.minimum

    def inverse_span(self, zero_span: str = DEFAULT_ZERO_SPAN) -> np.ndarray:
        """Per-attribute weights 1 / (max - min) under the given policy."""
        check_zero_span(zero_span)
        span = self.span
        constant = self.constant
        if constant.any():
            if zero_span == 'raise':
                raise NumericDegeneracyError(
                    f"Attributes {np.flatnonzero(constant).tolist()} have zero range "
                    "in the training data."
                )
            span = np.where(constant, 1.0, span)
        weights = 1.0 / span
        if zero_span == 'ignore':
            weights[constant] = 0.0
        return weights

    def __setstate__(self, state):
        self.__dict__.update(state)
        self.minimum.flags.writeable = False
        self.maximum.flags.writeable = False

    def __eq__(self, other):
        if not isinstance(other, FeatureBounds):
            return NotImplemented
        return (np.array_equal(self.minimum, other.minimum)
                and np.array_equal(self.maximum, other.maximum))

    def __repr__(self):
        return f"<FeatureBounds n_features={self.n_features} constant={int(self.constant.sum())}>"
