"""
errors.py
=========
Exception taxonomy for the LOF engine.

Configuration mistakes (bad k, unknown metric) are fixable by the caller;
input problems (empty data, shape mismatch) need upstream data cleaning.
Both derive from ValueError so existing ``except ValueError`` handlers
keep working.
"""


class LOFError(Exception):
    """Base class for every error raised by the package."""


class ConfigurationError(LOFError, ValueError):
    """Invalid neighbour count, distance metric or policy selector."""


class InvalidInputError(LOFError, ValueError):
    """Empty training set, dimensionality mismatch or non-numeric values."""


class NumericDegeneracyError(InvalidInputError):
    """Zero-width attribute range under a normalised metric."""


class InsufficientDataError(InvalidInputError, ConfigurationError):
    """
    Not enough training instances for the requested neighbourhood size.

    Sits under both branches: it is an input-data problem (too few rows)
    and a configuration one (k too large).
    """
