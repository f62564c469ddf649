import logging

import numpy as np
from typing import Any, Callable, Dict, Optional, Union

from ..exceptions import DimensionError, EvaluationError
from .schemes import DifferenceScheme, resolve_scheme

logger = logging.getLogger(__name__)


def make_probe(
    flow: Callable, n: Optional[int], *, scalar: bool = False
) -> Callable[[np.ndarray], np.ndarray]:
    """Wrap ``flow`` so every evaluation returns a finite ``(n,)`` float array.

    With ``scalar=True`` (only meaningful for ``n == 1``) the flow is called
    with a Python float instead of a length-1 array. Any failure is raised
    as ``EvaluationError`` carrying the probe point. ``n=None`` skips the
    shape check, leaving it to the caller.
    """

    def probe(x: np.ndarray) -> np.ndarray:
        arg = float(x[0]) if scalar else x.copy()
        try:
            value = flow(arg)
        except Exception as exc:
            raise EvaluationError(f"flow raised {type(exc).__name__} at {x!r}: {exc}", x) from exc

        try:
            out = np.atleast_1d(np.asarray(value, dtype=float))
        except (TypeError, ValueError) as exc:
            raise EvaluationError(f"flow returned a non-numeric value at {x!r}.", x) from exc

        if n is not None and out.shape != (n,):
            raise EvaluationError(
                f"flow returned shape {out.shape} at {x!r}; expected {(n,)}.", x
            )
        if not np.all(np.isfinite(out)):
            raise EvaluationError(f"flow returned non-finite values {out!r} at {x!r}.", x)
        return out

    return probe


def estimate_jacobian(
    flow: Callable,
    x0: Any,
    *,
    scheme: Union[str, DifferenceScheme, None] = None,
    scheme_options: Optional[Dict[str, Any]] = None,
) -> np.ndarray:
    """Numerically estimate the Jacobian of ``flow`` at ``x0``.

    ``x0`` may be a scalar (the flow is then called with floats) or a
    one-dimensional array. Returns an ``(n, n)`` array with
    ``J[i, j] = d f_i / d x_j``.
    """
    if not callable(flow):
        raise TypeError("flow must be callable.")
    x0_arr, scalar = as_point(x0, "x0")
    f0 = evaluate_reference(flow, x0_arr, scalar=scalar)
    probe = make_probe(flow, x0_arr.size, scalar=scalar)
    return jacobian_from_probe(probe, x0_arr, f0, scheme=scheme, scheme_options=scheme_options)


def evaluate_reference(flow: Callable, x0: np.ndarray, *, scalar: bool = False) -> np.ndarray:
    """Evaluate ``flow(x0)`` and check it maps R^n to R^n."""
    f0 = make_probe(flow, None, scalar=scalar)(x0)
    if f0.shape != x0.shape:
        raise DimensionError(
            f"flow maps a point of dimension {x0.size} to one of shape {f0.shape}; "
            "the flow must map R^n to R^n."
        )
    return f0


def jacobian_from_probe(
    probe: Callable[[np.ndarray], np.ndarray],
    x0: np.ndarray,
    f0: np.ndarray,
    *,
    scheme: Union[str, DifferenceScheme, None] = None,
    scheme_options: Optional[Dict[str, Any]] = None,
) -> np.ndarray:
    method = resolve_scheme(scheme)
    n = x0.size
    logger.debug("Estimating %dx%d Jacobian with scheme %s", n, n, getattr(method, "__name__", method))

    J = np.asarray(method(probe, x0, f0, **(scheme_options or {})), dtype=float)
    if J.shape != (n, n):
        raise DimensionError(
            f"scheme returned a Jacobian of shape {J.shape}; expected {(n, n)}."
        )
    return J


def as_point(value: Any, name: str):
    """Return ``(array, was_scalar)`` for a scalar or 1-D point."""
    try:
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"{name} must be a real scalar or vector.") from exc
    if arr.ndim > 1:
        raise DimensionError(f"{name} must be a scalar or one-dimensional; got shape {arr.shape}.")
    if arr.size < 1:
        raise DimensionError(f"{name} must contain at least one coordinate.")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must be finite; got {arr!r}.")
    return np.atleast_1d(arr).copy(), arr.ndim == 0


__all__ = [
    "estimate_jacobian",
    "make_probe",
    "evaluate_reference",
    "jacobian_from_probe",
    "as_point",
]
