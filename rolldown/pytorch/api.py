import logging

import torch
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..exceptions import DimensionError
from ..result import DeltaV
from ..numpy.norms import NormType, check_degenerate_policy, resolve_norm
from .jacobian import (
    DifferenceScheme,
    as_point,
    evaluate_reference,
    jacobian_from_probe,
    make_probe,
    resolve_scheme,
)
from .linalg import decompose, potential_difference, relative_error

Tensor = torch.Tensor

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
    Torch version of ``rolldown.numpy.compute_potential_difference``.
    ``scheme="autograd"`` uses the exact Jacobian of a torch-written flow.
    Returns ``DeltaV(dV, err)`` holding 0-d tensors.
    """
    x_t, x0_t, scalar = _validate_inputs(flow, x, x0)
    kind = resolve_norm(norm_type)
    check_degenerate_policy(on_degenerate)
    method = resolve_scheme(scheme)

    f0 = evaluate_reference(flow, x0_t, scalar=scalar)
    probe = make_probe(flow, x0_t.numel(), scalar=scalar)
    J0 = jacobian_from_probe(probe, x0_t, f0, scheme=method, scheme_options=scheme_options)

    J_symm, J_skew = decompose(J0)
    dV = potential_difference(f0, J_symm, x_t - x0_t)
    err = relative_error(J_symm, J_skew, kind, on_degenerate=on_degenerate)

    logger.debug("dV=%g err=%g (n=%d, norm=%s)", float(dV), float(err), x0_t.numel(), kind.value)
    return DeltaV(dV, err)


delta_v = compute_potential_difference


def _validate_inputs(flow: Callable, x: Any, x0: Any) -> Tuple[Tensor, Tensor, bool]:
    if not callable(flow):
        raise TypeError("flow must be callable.")

    x_t, x_scalar = as_point(x, "x")
    x0_t, x0_scalar = as_point(x0, "x0")
    if x_t.shape != x0_t.shape:
        raise DimensionError(
            f"x has {x_t.numel()} coordinates but x0 has {x0_t.numel()}."
        )
    if x_t.dtype != x0_t.dtype or x_t.device != x0_t.device:
        x_t = x_t.to(dtype=x0_t.dtype, device=x0_t.device)

    return x_t, x0_t, x0_scalar and x_scalar


__all__ = [
    "compute_potential_difference",
    "delta_v",
]
