"""PyTorch-backed implementations of rolldown routines."""

from .api import compute_potential_difference, delta_v
from .jacobian import estimate_jacobian, resolve_scheme, register_scheme
from .linalg import (
    decompose,
    symmetric_part,
    skew_part,
    potential_difference,
    matrix_norm,
    relative_error,
)

__all__ = [
    "compute_potential_difference",
    "delta_v",
    "estimate_jacobian",
    "resolve_scheme",
    "register_scheme",
    "decompose",
    "symmetric_part",
    "skew_part",
    "potential_difference",
    "matrix_norm",
    "relative_error",
]
