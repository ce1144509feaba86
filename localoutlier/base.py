import abc
import time


class BaseDetector(abc.ABC):
    """
    Abstract base for record-level anomaly detectors.

    Contract
    --------
    • train()   – fit (or load) the model on a DataFrame
    • predict() – return (pred, score, latency_ms) for one record
                  pred   : -1 = anomaly, 1 = normal
                  score  : higher → more normal, 0 is the decision boundary
                  latency: wall-clock inference time in milliseconds
    • save()    – persist the model to disk
    • load()    – restore the model from disk
    • health_check() – raise RuntimeError if the model is not ready
    """

    # ------------------------------------------------------------------ #
    #  Required interface                                                  #
    # ------------------------------------------------------------------ #

    @abc.abstractmethod
    def train(self, X_train_df, y_train=None):
        """
        Train on a DataFrame whose columns include the detector's features.
        y_train is accepted for interface symmetry; unsupervised detectors ignore it.
        """

    @abc.abstractmethod
    def predict(self, features_dict: dict) -> tuple:
        """
        Predict on a single record.

        Parameters
        ----------
        features_dict : mapping of feature name → numeric value.

        Returns
        -------
        (pred, score, latency_ms)
        """

    @abc.abstractmethod
    def save(self, path: str) -> None:
        """Persist the trained model to *path*."""

    @abc.abstractmethod
    def load(self, path: str) -> None:
        """Restore a trained model from *path*."""

    # ------------------------------------------------------------------ #
    #  Shared helpers                                                      #
    # ------------------------------------------------------------------ #

    def health_check(self) -> None:
        if getattr(self, 'model', None) is None:
            raise RuntimeError(
                f"{self.__class__.__name__} has no trained model. "
                "Call train() or load() first."
            )

    def _timed_predict(self, fn, *args, **kwargs):
        """Call *fn* and return (result, latency_ms)."""
        start = time.perf_counter()
        result = fn(*args, **kwargs)
        latency = (time.perf_counter() - start) * 1000
        return result, latency

    def __repr__(self):
        ready = getattr(self, 'model', None) is not None
        return f"<{self.__class__.__name__} ready={ready}>"
