import logging

import numpy as np
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..exceptions import DimensionError
from ..result import DeltaV
from .decompose import decompose
from .jacobian import as_point, evaluate_reference, jacobian_from_probe, make_probe
from .norms import NormType, check_degenerate_policy, relative_error, resolve_norm
from .potential import potential_difference
from .schemes import DifferenceScheme, resolve_scheme

logger = logging.getLogger(__name__)


def compute_potential_difference(
    flow: Callable,
    x: Any,
    x0: Any,
    norm_type: Union[str, NormType] = "frobenius",
    *,
    scheme: Union[str, DifferenceScheme, None] = None,
    scheme_options: Optional[Dict[str, Any]] = None,
    on_degenerate: str = "zero",
) -> DeltaV:
    """
    Approximate the potential difference ``V(x) - V(x0)`` of ``flow``.

    The Jacobian of ``flow`` at ``x0`` is estimated numerically and split
    into symmetric and skew parts. The symmetric part gives a second-order
    Taylor estimate of the potential difference; the relative size of the
    skew part (in ``norm_type``) is returned as the error estimate.
    ``x`` and ``x0`` may be scalars for one-dimensional flows, in which case
    ``flow`` is called with floats.
    Returns ``DeltaV(dV, err)``.
    """
    x_arr, x0_arr, scalar = _validate_inputs(flow, x, x0)
    kind = resolve_norm(norm_type)
    check_degenerate_policy(on_degenerate)
    method = resolve_scheme(scheme)

    f0 = evaluate_reference(flow, x0_arr, scalar=scalar)
    probe = make_probe(flow, x0_arr.size, scalar=scalar)
    J0 = jacobian_from_probe(probe, x0_arr, f0, scheme=method, scheme_options=scheme_options)

    J_symm, J_skew = decompose(J0)
    dV = potential_difference(f0, J_symm, x_arr - x0_arr)
    err = relative_error(J_symm, J_skew, kind, on_degenerate=on_degenerate)

    logger.debug("dV=%g err=%g (n=%d, norm=%s)", dV, err, x0_arr.size, kind.value)
    return DeltaV(dV, err)


delta_v = compute_potential_difference


def _validate_inputs(flow: Callable, x: Any, x0: Any) -> Tuple[np.ndarray, np.ndarray, bool]:
    if not callable(flow):
        raise TypeError("flow must be callable.")

    x_arr, x_scalar = as_point(x, "x")
    x0_arr, x0_scalar = as_point(x0, "x0")
    if x_arr.shape != x0_arr.shape:
        raise DimensionError(
            f"x has {x_arr.size} coordinates but x0 has {x0_arr.size}."
        )

    return x_arr, x0_arr, x0_scalar and x_scalar


__all__ = [
    "compute_potential_difference",
    "delta_v",
]
