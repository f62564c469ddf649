import numpy as np

from ..exceptions import DimensionError


def potential_difference(f0: np.ndarray, J_symm: np.ndarray, d: np.ndarray) -> float:
    """Second-order Taylor estimate of ``V(x0 + d) - V(x0)``.

    ``f0`` is the flow at ``x0`` and ``J_symm`` the symmetric part of its
    Jacobian there. Only the symmetric part can come from the Hessian of a
    potential, so the skew part does not enter.
    """
    f0 = np.atleast_1d(np.asarray(f0, dtype=float))
    d = np.atleast_1d(np.asarray(d, dtype=float))
    J_symm = np.asarray(J_symm, dtype=float)

    if f0.ndim != 1 or d.ndim != 1:
        raise DimensionError("f0 and d must be one-dimensional.")
    n = d.size
    if f0.size != n:
        raise DimensionError(f"f0 has {f0.size} entries but d has {n}.")
    if J_symm.shape != (n, n):
        raise DimensionError(f"J_symm has shape {J_symm.shape}; expected {(n, n)}.")

    linear = -(f0 @ d)
    quadratic = -0.5 * (d @ J_symm @ d)
    return float(linear + quadratic)


__all__ = ["potential_difference"]
