import logging
import math

import torch
from typing import Callable, Dict, Tuple, Union

from ..exceptions import DegenerateRatioError, DimensionError
from ..numpy.norms import NormType, check_degenerate_policy, resolve_norm

Tensor = torch.Tensor

logger = logging.getLogger(__name__)


def _check_square(M: Tensor) -> Tensor:
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise DimensionError(f"matrix must be square; got shape {tuple(M.shape)}.")
    return M


def symmetric_part(M: Tensor) -> Tensor:
    M = _check_square(M)
    return 0.5 * (M + M.T)


def skew_part(M: Tensor) -> Tensor:
    M = _check_square(M)
    return 0.5 * (M - M.T)


def decompose(M: Tensor) -> Tuple[Tensor, Tensor]:
    """Split a square matrix into its symmetric and skew-symmetric parts."""
    M = _check_square(M)
    return 0.5 * (M + M.T), 0.5 * (M - M.T)


def potential_difference(f0: Tensor, J_symm: Tensor, d: Tensor) -> Tensor:
    """Second-order Taylor estimate of ``V(x0 + d) - V(x0)`` as a 0-d tensor."""
    f0 = torch.atleast_1d(f0)
    d = torch.atleast_1d(d)
    if f0.ndim != 1 or d.ndim != 1:
        raise DimensionError("f0 and d must be one-dimensional.")
    n = d.numel()
    if f0.numel() != n:
        raise DimensionError(f"f0 has {f0.numel()} entries but d has {n}.")
    if tuple(J_symm.shape) != (n, n):
        raise DimensionError(f"J_symm has shape {tuple(J_symm.shape)}; expected {(n, n)}.")
    return -(f0 @ d) - 0.5 * (d @ J_symm @ d)


_NORMS: Dict[NormType, Callable[[Tensor], Tensor]] = {
    NormType.FROBENIUS: lambda M: torch.linalg.matrix_norm(M, ord="fro"),
    NormType.ONE: lambda M: torch.linalg.matrix_norm(M, ord=1),
    NormType.INFINITY: lambda M: torch.linalg.matrix_norm(M, ord=math.inf),
    NormType.SPECTRAL: lambda M: torch.linalg.matrix_norm(M, ord=2),
    NormType.MAX: lambda M: M.abs().max(),
}


def matrix_norm(M: Tensor, kind: Union[str, NormType] = NormType.FROBENIUS) -> Tensor:
    if M.ndim != 2:
        raise DimensionError(f"matrix_norm expects a 2-D tensor; got shape {tuple(M.shape)}.")
    return _NORMS[resolve_norm(kind)](M)


def relative_error(
    J_symm: Tensor,
    J_skew: Tensor,
    norm_type: Union[str, NormType] = NormType.FROBENIUS,
    *,
    on_degenerate: str = "zero",
) -> Tensor:
    """Torch counterpart of ``rolldown.numpy.norms.relative_error``."""
    kind = resolve_norm(norm_type)
    check_degenerate_policy(on_degenerate)
    if J_symm.shape != J_skew.shape:
        raise DimensionError(
            f"J_symm has shape {tuple(J_symm.shape)} but J_skew has shape {tuple(J_skew.shape)}."
        )

    skew = matrix_norm(J_skew, kind)
    symm = matrix_norm(J_symm, kind)
    total = skew + symm
    if bool(total == 0):
        if on_degenerate == "raise":
            raise DegenerateRatioError(
                "Jacobian is zero: relative error is 0/0 in every norm."
            )
        logger.warning(
            "Jacobian is zero; reporting relative error as %s (on_degenerate=%r).",
            on_degenerate, on_degenerate,
        )
        fill = 0.0 if on_degenerate == "zero" else math.nan
        return torch.full((), fill, dtype=total.dtype, device=total.device)

    return skew / total


__all__ = [
    "symmetric_part",
    "skew_part",
    "decompose",
    "potential_difference",
    "matrix_norm",
    "relative_error",
]
