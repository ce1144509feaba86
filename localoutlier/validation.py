"""
validation.py
=============
Input coercion shared by the scorer and the detector adapter.

Training data may arrive as a list of sequences, a numpy array or a
pandas DataFrame; everything leaves here as a C-contiguous float64 matrix.
"""

import numbers

import numpy as np
import pandas as pd
from sklearn.utils import check_array

from .errors import ConfigurationError, InsufficientDataError, InvalidInputError


def check_instances(data, role: str = 'training'):
    """
    Validate a collection of instances; *role* names it in error messages.

    Returns
    -------
    (X, feature_names) where X has shape (n_instances, n_features) and
    feature_names is the DataFrame's column labels (None otherwise).
    """
    if data is None:
        raise InvalidInputError(f"{role.capitalize()} data is required.")
    feature_names = None
    if isinstance(data, pd.DataFrame):
        feature_names = [str(c) for c in data.columns]

    try:
        n = len(data)
    except TypeError:
        raise InvalidInputError(
            f"{role.capitalize()} data must be a collection of instances, got {type(data).__name__}."
        ) from None
    if n == 0:
        raise InvalidInputError(f"At least one {role} instance is required.")

    if not isinstance(data, (np.ndarray, pd.DataFrame)):
        try:
            widths = {len(row) for row in data}
        except TypeError:
            raise InvalidInputError(
                "Each instance must be a sequence of attribute values."
            ) from None
        if len(widths) > 1:
            raise InvalidInputError(
                f"Instances have mismatched dimensionality: {sorted(widths)}."
            )

    try:
        X = check_array(data, dtype=np.float64, ensure_2d=True, order='C', copy=True)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid {role} data: {exc}") from exc
    return X, feature_names


def check_query(query, n_features: int) -> np.ndarray:
    """Validate one query instance against the training dimensionality."""
    try:
        q = np.asarray(query, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Query is not numeric: {exc}") from exc
    if q.ndim != 1:
        raise InvalidInputError(
            f"Query must be a single instance (1-D), got shape {q.shape}."
        )
    if q.shape[0] != n_features:
        raise InvalidInputError(
            f"Query has {q.shape[0]} attributes, training data has {n_features}."
        )
    if not np.all(np.isfinite(q)):
        raise InvalidInputError("Query contains NaN or infinite values.")
    return q


def check_k(k, n_train: int) -> int:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise ConfigurationError(f"k must be an integer, got {k!r}.")
    if k < 1:
        raise ConfigurationError(f"k must be at least 1, got {k}.")
    if k >= n_train:
        raise InsufficientDataError(
            f"k={k} needs more than {k} training instances, only {n_train} available."
        )
    return int(k)
