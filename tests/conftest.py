"""Shared flows for the rolldown test suite.

`saddle_flow` is the gradient flow of V = x1**2 * x2 + x2 (symmetric
Jacobian everywhere) and `rotation_flow` a rigid rotation (skew Jacobian
everywhere). The repository root goes on `sys.path` so the suite runs
without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


@pytest.fixture
def saddle_flow():
    """Gradient flow of V = x1**2 * x2 + x2, Jacobian [[-2*x2, -2*x1], [-2*x1, 0]]."""

    def f(x):
        return np.array([-2.0 * x[0] * x[1], -x[0] ** 2 - 1.0])

    return f


@pytest.fixture
def rotation_flow():
    def f(x):
        return np.array([-x[1], x[0]])

    return f
