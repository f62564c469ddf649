"""NumPy-backed implementations of rolldown routines."""

from .api import compute_potential_difference, delta_v
from .decompose import decompose, symmetric_part, skew_part
from .jacobian import estimate_jacobian
from .norms import NormType, matrix_norm, relative_error, resolve_norm
from .potential import potential_difference
from .schemes import resolve_scheme, register_scheme, DifferenceScheme

__all__ = [
    "compute_potential_difference",
    "delta_v",
    "decompose",
    "symmetric_part",
    "skew_part",
    "estimate_jacobian",
    "NormType",
    "matrix_norm",
    "relative_error",
    "resolve_norm",
    "potential_difference",
    "resolve_scheme",
    "register_scheme",
    "DifferenceScheme",
]
