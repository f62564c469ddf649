"""Finite-difference schemes for the Jacobian estimator.

Every scheme has the signature ``scheme(probe, x0, f0, **options)`` where
``probe`` evaluates the flow at a point and returns an ``(n,)`` float
array, ``x0`` is the expansion point and ``f0 = probe(x0)``. It returns
the ``(n, n)`` Jacobian with ``J[i, j] = d f_i / d x_j``.
"""

import numpy as np
from typing import Callable, Dict, Union

DifferenceScheme = Callable[..., np.ndarray]

_EPS = np.finfo(float).eps


def richardson(
    probe: Callable[[np.ndarray], np.ndarray],
    x0: np.ndarray,
    f0: np.ndarray,
    *,
    eps: float = 1e-4,
    d: float = 1e-4,
    zero_tol: float = np.sqrt(_EPS / 7e-7),
    r: int = 4,
    v: float = 2.0,
) -> np.ndarray:
    """Central differences refined by Richardson extrapolation.

    Column ``j`` starts from step ``d * |x0[j]|`` (``eps`` when
    ``|x0[j]| < zero_tol``) and divides it by ``v`` ``r - 1`` times.
    The ``r`` central estimates are then combined, eliminating the
    ``h**2, h**4, ...`` error terms one level at a time with weights
    ``v**(2 * m)``.
    """
    if r < 1:
        raise ValueError("r must be at least 1.")
    if v <= 1.0:
        raise ValueError("v must be greater than 1.")

    n = x0.size
    h0 = np.abs(d * x0) + eps * (np.abs(x0) < zero_tol)
    J = np.empty((n, n), dtype=float)

    for j in range(n):
        A = np.empty((r, n), dtype=float)
        h = h0[j]
        for k in range(r):
            step = np.zeros(n, dtype=float)
            step[j] = h
            A[k] = (probe(x0 + step) - probe(x0 - step)) / (2.0 * h)
            h /= v

        for m in range(1, r):
            w = v ** (2 * m)
            A[: r - m] = (A[1 : r - m + 1] * w - A[: r - m]) / (w - 1.0)
        J[:, j] = A[0]

    return J


def central(
    probe: Callable[[np.ndarray], np.ndarray],
    x0: np.ndarray,
    f0: np.ndarray,
    *,
    step: float = _EPS ** (1.0 / 3.0),
) -> np.ndarray:
    """Second-order central differences, one stencil per coordinate."""
    n = x0.size
    J = np.empty((n, n), dtype=float)
    for j in range(n):
        h = step * max(1.0, abs(x0[j]))
        e = np.zeros(n, dtype=float)
        e[j] = h
        J[:, j] = (probe(x0 + e) - probe(x0 - e)) / (2.0 * h)
    return J


def forward(
    probe: Callable[[np.ndarray], np.ndarray],
    x0: np.ndarray,
    f0: np.ndarray,
    *,
    step: float = np.sqrt(_EPS),
) -> np.ndarray:
    """First-order forward differences reusing ``f0``."""
    n = x0.size
    J = np.empty((n, n), dtype=float)
    for j in range(n):
        h = step * max(1.0, abs(x0[j]))
        e = np.zeros(n, dtype=float)
        e[j] = h
        J[:, j] = (probe(x0 + e) - f0) / h
    return J


_SCHEMES: Dict[str, DifferenceScheme] = {
    "richardson": richardson,
    "central": central,
    "forward": forward,
}

DEFAULT_SCHEME = "richardson"


def register_scheme(name: str, scheme: DifferenceScheme, *, overwrite: bool = False) -> None:
    """Make ``scheme`` available under ``name`` for ``resolve_scheme``."""
    if not callable(scheme):
        raise TypeError("scheme must be callable.")
    key = name.lower()
    if key in _SCHEMES and not overwrite:
        raise ValueError(f"Scheme '{name}' is already registered.")
    _SCHEMES[key] = scheme


def resolve_scheme(scheme: Union[str, DifferenceScheme, None]) -> DifferenceScheme:
    if scheme is None:
        return _SCHEMES[DEFAULT_SCHEME]
    if callable(scheme):
        return scheme
    try:
        return _SCHEMES[scheme.lower()]
    except (KeyError, AttributeError) as exc:
        available = ", ".join(sorted(_SCHEMES))
        raise ValueError(
            f"Unknown scheme '{scheme}'. Available: {available}."
        ) from exc


__all__ = [
    "DifferenceScheme",
    "DEFAULT_SCHEME",
    "richardson",
    "central",
    "forward",
    "register_scheme",
    "resolve_scheme",
]
