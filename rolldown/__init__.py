"""rolldown: local potential differences of non-gradient flows.

Public API mirrors the NumPy backend for convenience. The PyTorch backend
(if ``torch`` is installed) is exposed as ``rolldown.pytorch``.
"""

import logging

from . import numpy as numpy_backend
from .exceptions import (
    RolldownError,
    DimensionError,
    EvaluationError,
    DegenerateRatioError,
)
from .result import DeltaV
from .numpy import (
    compute_potential_difference,
    delta_v,
    decompose,
    symmetric_part,
    skew_part,
    estimate_jacobian,
    NormType,
    matrix_norm,
    relative_error,
    resolve_norm,
    potential_difference,
    resolve_scheme,
    register_scheme,
    DifferenceScheme,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

numpy = numpy_backend

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
    "DeltaV",
    "RolldownError",
    "DimensionError",
    "EvaluationError",
    "DegenerateRatioError",
    "numpy",
]

try:
    from . import pytorch as torch_backend
except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
    if exc.name == "torch":
        pytorch = None
    else:
        raise
else:
    pytorch = torch_backend
    __all__.append("pytorch")

__version__ = "0.1.0"
