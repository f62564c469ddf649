import math

import numpy as np
import pytest

from rolldown import DimensionError, EvaluationError
from rolldown.numpy import estimate_jacobian, register_scheme, resolve_scheme
from rolldown.numpy import schemes


def test_jacobian_scalar_flow_matches_derivative():
    J = estimate_jacobian(np.cos, np.array([1.0]))
    assert J.shape == (1, 1)
    assert np.allclose(J, -np.sin(1.0), atol=1e-10)


def test_jacobian_accepts_plain_scalar_flow():
    # math.cos only accepts floats, so scalar inputs must reach the flow as floats
    J = estimate_jacobian(math.cos, 1.0)
    assert np.allclose(J, [[-math.sin(1.0)]], atol=1e-10)


@pytest.mark.parametrize(
    "scheme, atol",
    [("richardson", 1e-9), ("central", 1e-6), ("forward", 1e-5)],
)
def test_jacobian_two_dimensional_example(saddle_flow, scheme, atol):
    J = estimate_jacobian(saddle_flow, np.array([1.0, 2.0]), scheme=scheme)
    expected = np.array([[-4.0, -2.0], [-2.0, 0.0]])
    assert J.shape == (2, 2)
    assert np.allclose(J, expected, atol=atol)


def test_jacobian_at_origin_uses_absolute_step(rotation_flow):
    J = estimate_jacobian(rotation_flow, np.zeros(2))
    assert np.allclose(J, [[0.0, -1.0], [1.0, 0.0]], atol=1e-12)


def test_jacobian_nonlinear_three_dimensional():
    def lorenz(x, sigma=10.0, rho=28.0, beta=8.0 / 3.0):
        return np.array([
            sigma * (x[1] - x[0]),
            x[0] * (rho - x[2]) - x[1],
            x[0] * x[1] - beta * x[2],
        ])

    x0 = np.array([1.0, -2.0, 20.0])
    expected = np.array([
        [-10.0, 10.0, 0.0],
        [28.0 - x0[2], -1.0, -x0[0]],
        [x0[1], x0[0], -8.0 / 3.0],
    ])
    J = estimate_jacobian(lorenz, x0)
    assert np.allclose(J, expected, atol=1e-8)


def test_jacobian_scheme_options_are_forwarded(saddle_flow):
    J = estimate_jacobian(
        saddle_flow, np.array([1.0, 2.0]), scheme="central", scheme_options={"step": 1e-3}
    )
    assert np.allclose(J, [[-4.0, -2.0], [-2.0, 0.0]], atol=1e-6)


def test_flow_exception_becomes_evaluation_error():
    def f(x):
        if x[0] > 1.0:
            raise ArithmeticError("boom")
        return x.copy()

    with pytest.raises(EvaluationError) as excinfo:
        estimate_jacobian(f, np.array([1.0]))
    assert excinfo.value.point is not None
    assert excinfo.value.point[0] > 1.0
    assert isinstance(excinfo.value.__cause__, ArithmeticError)


def test_inconsistent_probe_dimension_is_evaluation_error():
    x0 = np.array([1.0, 2.0])

    def f(x):
        if np.array_equal(x, x0):
            return x.copy()
        return x[:1]

    with pytest.raises(EvaluationError):
        estimate_jacobian(f, x0)


def test_wrong_dimension_at_reference_is_dimension_error():
    with pytest.raises(DimensionError):
        estimate_jacobian(lambda x: np.array([x[0], x[1], 0.0]), np.array([1.0, 2.0]))


@pytest.mark.parametrize("bad", ["abc", np.nan, [1.0, np.inf]])
def test_non_numeric_or_non_finite_output_is_evaluation_error(bad):
    with pytest.raises(EvaluationError):
        estimate_jacobian(lambda x: bad, np.array([1.0, 2.0]))


def test_rejects_matrix_point_and_non_callable():
    with pytest.raises(DimensionError):
        estimate_jacobian(lambda x: x, np.ones((2, 2)))
    with pytest.raises(TypeError):
        estimate_jacobian("not a flow", np.ones(2))


def test_resolve_scheme_defaults_and_unknown():
    assert resolve_scheme(None) is schemes.richardson
    assert resolve_scheme("CENTRAL") is schemes.central
    with pytest.raises(ValueError, match="Available"):
        resolve_scheme("spline")


def test_register_custom_scheme(saddle_flow):
    calls = []

    def exact(probe, x0, f0):
        calls.append(x0.copy())
        return np.array([[-2.0 * x0[1], -2.0 * x0[0]], [-2.0 * x0[0], 0.0]])

    register_scheme("exact_saddle", exact)
    try:
        J = estimate_jacobian(saddle_flow, np.array([1.0, 2.0]), scheme="exact_saddle")
        assert np.array_equal(J, [[-4.0, -2.0], [-2.0, 0.0]])
        assert len(calls) == 1
        with pytest.raises(ValueError, match="already registered"):
            register_scheme("exact_saddle", exact)
    finally:
        schemes._SCHEMES.pop("exact_saddle", None)


def test_scheme_returning_wrong_shape_is_rejected(saddle_flow):
    with pytest.raises(DimensionError):
        estimate_jacobian(saddle_flow, np.array([1.0, 2.0]), scheme=lambda p, x0, f0: np.eye(3))


@pytest.mark.parametrize("v", [2.0, 3.0, 1.5])
def test_richardson_step_ratio(v):
    x0 = np.array([0.7, -1.2])

    def f(x):
        return np.array([np.exp(x[0]) * x[1], np.sin(x[0] * x[1])])

    expected = np.array([
        [np.exp(x0[0]) * x0[1], np.exp(x0[0])],
        [x0[1] * np.cos(x0[0] * x0[1]), x0[0] * np.cos(x0[0] * x0[1])],
    ])
    J = estimate_jacobian(f, x0, scheme_options={"v": v})
    assert np.allclose(J, expected, atol=1e-8)
