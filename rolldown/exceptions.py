"""Error taxonomy shared by the NumPy and PyTorch backends."""

from typing import Optional

import numpy as np


class RolldownError(Exception):
    """Base class for all rolldown errors."""


class DimensionError(RolldownError, ValueError):
    """Inputs have inconsistent shapes, or a matrix is not square."""


class EvaluationError(RolldownError, RuntimeError):
    """The flow could not be evaluated at a probe point.

    ``point`` holds a copy of the offending probe so the failure can be
    reproduced by calling the flow directly.
    """

    def __init__(self, message: str, point: Optional[np.ndarray] = None):
        super().__init__(message)
        self.point = None if point is None else np.array(point, dtype=float, copy=True)


class DegenerateRatioError(RolldownError, ZeroDivisionError):
    """Both the symmetric and skew norms are zero, so the relative error is 0/0."""


__all__ = [
    "RolldownError",
    "DimensionError",
    "EvaluationError",
    "DegenerateRatioError",
]
