import logging

import torch
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..exceptions import DimensionError, EvaluationError

Tensor = torch.Tensor
DifferenceScheme = Callable[..., Tensor]

logger = logging.getLogger(__name__)


def _detached(x: Tensor):
    return x.detach().cpu().numpy()


def make_probe(flow: Callable, n: Optional[int], *, scalar: bool = False) -> Callable[[Tensor], Tensor]:
    """Torch counterpart of ``rolldown.numpy.jacobian.make_probe``.

    In scalar mode the flow receives a 0-d tensor so autograd still sees it.
    """

    def probe(x: Tensor) -> Tensor:
        arg = x[0] if scalar else x.clone()
        try:
            value = flow(arg)
        except Exception as exc:
            raise EvaluationError(
                f"flow raised {type(exc).__name__} at {_detached(x)!r}: {exc}", _detached(x)
            ) from exc

        try:
            out = torch.atleast_1d(torch.as_tensor(value, dtype=x.dtype, device=x.device))
        except (TypeError, ValueError, RuntimeError) as exc:
            raise EvaluationError(
                f"flow returned a non-numeric value at {_detached(x)!r}.", _detached(x)
            ) from exc

        if n is not None and tuple(out.shape) != (n,):
            raise EvaluationError(
                f"flow returned shape {tuple(out.shape)} at {_detached(x)!r}; expected {(n,)}.",
                _detached(x),
            )
        if not bool(torch.isfinite(out).all()):
            raise EvaluationError(
                f"flow returned non-finite values at {_detached(x)!r}.", _detached(x)
            )
        return out

    return probe


def richardson(
    probe: Callable[[Tensor], Tensor],
    x0: Tensor,
    f0: Tensor,
    *,
    eps: float = 1e-4,
    d: float = 1e-4,
    zero_tol: Optional[float] = None,
    r: int = 4,
    v: float = 2.0,
) -> Tensor:
    if r < 1:
        raise ValueError("r must be at least 1.")
    if v <= 1.0:
        raise ValueError("v must be greater than 1.")
    if zero_tol is None:
        zero_tol = (torch.finfo(x0.dtype).eps / 7e-7) ** 0.5

    n = x0.numel()
    h0 = (d * x0).abs() + eps * (x0.abs() < zero_tol).to(x0.dtype)
    J = torch.empty((n, n), dtype=x0.dtype, device=x0.device)
    eye = torch.eye(n, dtype=x0.dtype, device=x0.device)

    for j in range(n):
        h = h0[j]
        estimates = []
        for _ in range(r):
            step = eye[j] * h
            estimates.append((probe(x0 + step) - probe(x0 - step)) / (2.0 * h))
            h = h / v
        A = torch.stack(estimates)
        for m in range(1, r):
            w = v ** (2 * m)
            A = (A[1:] * w - A[:-1]) / (w - 1.0)
        J[:, j] = A[0]
    return J


def central(
    probe: Callable[[Tensor], Tensor],
    x0: Tensor,
    f0: Tensor,
    *,
    step: Optional[float] = None,
) -> Tensor:
    if step is None:
        step = torch.finfo(x0.dtype).eps ** (1.0 / 3.0)
    n = x0.numel()
    h = step * x0.abs().clamp(min=1.0)
    eye = torch.eye(n, dtype=x0.dtype, device=x0.device)
    columns = [(probe(x0 + eye[j] * h[j]) - probe(x0 - eye[j] * h[j])) / (2.0 * h[j]) for j in range(n)]
    return torch.stack(columns, dim=1)


def forward(
    probe: Callable[[Tensor], Tensor],
    x0: Tensor,
    f0: Tensor,
    *,
    step: Optional[float] = None,
) -> Tensor:
    if step is None:
        step = torch.finfo(x0.dtype).eps ** 0.5
    n = x0.numel()
    h = step * x0.abs().clamp(min=1.0)
    eye = torch.eye(n, dtype=x0.dtype, device=x0.device)
    columns = [(probe(x0 + eye[j] * h[j]) - f0) / h[j] for j in range(n)]
    return torch.stack(columns, dim=1)


def autograd(
    probe: Callable[[Tensor], Tensor],
    x0: Tensor,
    f0: Tensor,
) -> Tensor:
    """Exact Jacobian by reverse-mode differentiation (flow must be written in torch).

    A flow whose output is detached from its input (built from Python
    floats, a list of tensors, ``math`` calls) raises ``EvaluationError``
    instead of yielding a zero Jacobian. So does a constant flow.
    """
    try:
        return torch.autograd.functional.jacobian(probe, x0, strict=True)
    except EvaluationError:
        raise
    except RuntimeError as exc:
        raise EvaluationError(
            f"flow output is not differentiable by autograd at {_detached(x0)!r}: {exc}",
            _detached(x0),
        ) from exc


_SCHEMES: Dict[str, DifferenceScheme] = {
    "richardson": richardson,
    "central": central,
    "forward": forward,
    "autograd": autograd,
}

DEFAULT_SCHEME = "richardson"


def register_scheme(name: str, scheme: DifferenceScheme, *, overwrite: bool = False) -> None:
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


def as_point(value: Any, name: str) -> Tuple[Tensor, bool]:
    try:
        if isinstance(value, torch.Tensor):
            t = value.detach()
        else:
            # Python and NumPy inputs default to double precision
            t = torch.as_tensor(value, dtype=torch.float64)
    except (TypeError, ValueError, RuntimeError) as exc:
        raise TypeError(f"{name} must be a real scalar or vector.") from exc
    if not t.is_floating_point():
        t = t.to(torch.float64)
    if t.ndim > 1:
        raise DimensionError(f"{name} must be a scalar or one-dimensional; got shape {tuple(t.shape)}.")
    if t.numel() < 1:
        raise DimensionError(f"{name} must contain at least one coordinate.")
    if not bool(torch.isfinite(t).all()):
        raise ValueError(f"{name} must be finite; got {_detached(t)!r}.")
    return torch.atleast_1d(t).clone(), t.ndim == 0


def evaluate_reference(flow: Callable, x0: Tensor, *, scalar: bool = False) -> Tensor:
    f0 = make_probe(flow, None, scalar=scalar)(x0)
    if f0.shape != x0.shape:
        raise DimensionError(
            f"flow maps a point of dimension {x0.numel()} to one of shape {tuple(f0.shape)}; "
            "the flow must map R^n to R^n."
        )
    return f0


def jacobian_from_probe(
    probe: Callable[[Tensor], Tensor],
    x0: Tensor,
    f0: Tensor,
    *,
    scheme: Union[str, DifferenceScheme, None] = None,
    scheme_options: Optional[Dict[str, Any]] = None,
) -> Tensor:
    method = resolve_scheme(scheme)
    n = x0.numel()
    logger.debug("Estimating %dx%d Jacobian with scheme %s", n, n, getattr(method, "__name__", method))

    J = method(probe, x0, f0, **(scheme_options or {}))
    if tuple(J.shape) != (n, n):
        raise DimensionError(
            f"scheme returned a Jacobian of shape {tuple(J.shape)}; expected {(n, n)}."
        )
    return J


def estimate_jacobian(
    flow: Callable,
    x0: Any,
    *,
    scheme: Union[str, DifferenceScheme, None] = None,
    scheme_options: Optional[Dict[str, Any]] = None,
) -> Tensor:
    if not callable(flow):
        raise TypeError("flow must be callable.")
    x0_t, scalar = as_point(x0, "x0")
    f0 = evaluate_reference(flow, x0_t, scalar=scalar)
    probe = make_probe(flow, x0_t.numel(), scalar=scalar)
    return jacobian_from_probe(probe, x0_t, f0, scheme=scheme, scheme_options=scheme_options)


__all__ = [
    "estimate_jacobian",
    "make_probe",
    "evaluate_reference",
    "jacobian_from_probe",
    "as_point",
    "register_scheme",
    "resolve_scheme",
    "DifferenceScheme",
]
