"""Matrix norms and the skew-to-total relative error."""

import enum
import logging
import math

import numpy as np
import scipy.linalg
from typing import Callable, Dict, Union

from ..exceptions import DegenerateRatioError, DimensionError

logger = logging.getLogger(__name__)


class NormType(str, enum.Enum):
    FROBENIUS = "frobenius"
    ONE = "one"
    INFINITY = "infinity"
    SPECTRAL = "spectral"
    MAX = "max"


def _frobenius(M: np.ndarray) -> float:
    return float(scipy.linalg.norm(M, "fro", check_finite=False))


def _one(M: np.ndarray) -> float:
    # max absolute column sum
    return float(scipy.linalg.norm(M, 1, check_finite=False))


def _infinity(M: np.ndarray) -> float:
    # max absolute row sum
    return float(scipy.linalg.norm(M, np.inf, check_finite=False))


def _spectral(M: np.ndarray) -> float:
    return float(scipy.linalg.norm(M, 2, check_finite=False))


def _max(M: np.ndarray) -> float:
    return float(np.max(np.abs(M)))


_NORMS: Dict[NormType, Callable[[np.ndarray], float]] = {
    NormType.FROBENIUS: _frobenius,
    NormType.ONE: _one,
    NormType.INFINITY: _infinity,
    NormType.SPECTRAL: _spectral,
    NormType.MAX: _max,
}

# Single-letter codes accepted for compatibility with R's ``norm(type=)``.
_ALIASES: Dict[str, NormType] = {
    "f": NormType.FROBENIUS,
    "fro": NormType.FROBENIUS,
    "o": NormType.ONE,
    "1": NormType.ONE,
    "i": NormType.INFINITY,
    "inf": NormType.INFINITY,
    "2": NormType.SPECTRAL,
    "m": NormType.MAX,
}
_ALIASES.update({kind.value: kind for kind in NormType})

_DEGENERATE_POLICIES = ("zero", "nan", "raise")


def resolve_norm(kind: Union[str, NormType]) -> NormType:
    """Map a norm selector (canonical name, enum member or alias) to ``NormType``."""
    if isinstance(kind, NormType):
        return kind
    try:
        return _ALIASES[str(kind).lower()]
    except KeyError as exc:
        available = ", ".join(sorted(_ALIASES))
        raise ValueError(f"Unknown norm_type '{kind}'. Available: {available}.") from exc


def matrix_norm(M: np.ndarray, kind: Union[str, NormType] = NormType.FROBENIUS) -> float:
    M = np.asarray(M, dtype=float)
    if M.ndim != 2:
        raise DimensionError(f"matrix_norm expects a 2-D array; got shape {M.shape}.")
    return _NORMS[resolve_norm(kind)](M)


def check_degenerate_policy(on_degenerate: str) -> str:
    if on_degenerate not in _DEGENERATE_POLICIES:
        raise ValueError(
            f"Unknown on_degenerate '{on_degenerate}'. "
            f"Available: {', '.join(_DEGENERATE_POLICIES)}."
        )
    return on_degenerate


def relative_error(
    J_symm: np.ndarray,
    J_skew: np.ndarray,
    norm_type: Union[str, NormType] = NormType.FROBENIUS,
    *,
    on_degenerate: str = "zero",
) -> float:
    """Return ``|J_skew| / (|J_skew| + |J_symm|)`` in the chosen norm.

    When both norms vanish the ratio is 0/0 and ``on_degenerate`` decides:
    ``"zero"`` returns 0.0, ``"nan"`` returns NaN (both log a warning),
    ``"raise"`` raises ``DegenerateRatioError``.
    """
    kind = resolve_norm(norm_type)
    check_degenerate_policy(on_degenerate)
    J_symm = np.asarray(J_symm, dtype=float)
    J_skew = np.asarray(J_skew, dtype=float)
    if J_symm.shape != J_skew.shape:
        raise DimensionError(
            f"J_symm has shape {J_symm.shape} but J_skew has shape {J_skew.shape}."
        )

    skew = matrix_norm(J_skew, kind)
    symm = matrix_norm(J_symm, kind)
    logger.debug("%s norms: skew=%g symm=%g", kind.value, skew, symm)

    total = skew + symm
    if total == 0.0:
        if on_degenerate == "raise":
            raise DegenerateRatioError(
                "Jacobian is zero: relative error is 0/0 in every norm."
            )
        logger.warning(
            "Jacobian is zero; reporting relative error as %s (on_degenerate=%r).",
            on_degenerate, on_degenerate,
        )
        return 0.0 if on_degenerate == "zero" else math.nan

    return skew / total


__all__ = [
    "NormType",
    "resolve_norm",
    "matrix_norm",
    "relative_error",
]
