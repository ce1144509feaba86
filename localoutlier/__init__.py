from .errors import (
    LOFError, ConfigurationError, InvalidInputError,
    NumericDegeneracyError, InsufficientDataError,
)
from .bounds import FeatureBounds
from .distance import (
    Distance, DistanceMetric, EuclideanDistance,
    NormalizedManhattanDistance, get_metric,
)
from .matrix import TrainingMatrix, QueryExtension
from .ranking import NeighborRanker
from .density import DensityEngine
from .scorer import LOFScorer
from .base import BaseDetector
from .local_outlier import LocalOutlierFactorDetector

__all__ = [
    'LOFError', 'ConfigurationError', 'InvalidInputError',
    'NumericDegeneracyError', 'InsufficientDataError',
    'FeatureBounds',
    'Distance', 'DistanceMetric', 'EuclideanDistance',
    'NormalizedManhattanDistance', 'get_metric',
    'TrainingMatrix', 'QueryExtension',
    'NeighborRanker', 'DensityEngine',
    'LOFScorer',
    'BaseDetector', 'LocalOutlierFactorDetector',
]
