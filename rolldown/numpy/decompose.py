import numpy as np
from typing import Tuple

from ..exceptions import DimensionError


def _check_square(M: np.ndarray) -> np.ndarray:
    M = np.asarray(M, dtype=float)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise DimensionError(f"matrix must be square; got shape {M.shape}.")
    return M


def symmetric_part(M: np.ndarray) -> np.ndarray:
    """Return ``(M + M.T) / 2``."""
    M = _check_square(M)
    return 0.5 * (M + M.T)


def skew_part(M: np.ndarray) -> np.ndarray:
    """Return ``(M - M.T) / 2``."""
    M = _check_square(M)
    return 0.5 * (M - M.T)


def decompose(M: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split a square matrix into its symmetric and skew-symmetric parts.

    The two parts add back up to ``M``.
    """
    M = _check_square(M)
    return 0.5 * (M + M.T), 0.5 * (M - M.T)


__all__ = [
    "symmetric_part",
    "skew_part",
    "decompose",
]
