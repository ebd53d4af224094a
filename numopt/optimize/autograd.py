"""Exact derivatives for PyTorch-differentiable objectives.

Wraps a function written with ``torch`` operations so that it plugs into
:class:`~numopt.optimize.core.Problem` with gradient and Hessian obtained by
automatic differentiation instead of finite differences. Points cross the
boundary as NumPy arrays; evaluation happens in ``float64`` on the CPU.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import torch
from torch.autograd.functional import hessian as _torch_hessian
from torch.autograd.functional import jacobian as _torch_jacobian

from .core import Problem
from .finite_diff import Array

TorchObjective = Callable[[torch.Tensor], torch.Tensor]


def _to_tensor(x: Array) -> torch.Tensor:
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"x must be a 1D vector, got shape {x.shape}")
    return torch.as_tensor(x, dtype=torch.float64)


def _scalar(out: torch.Tensor) -> torch.Tensor:
    if out.numel() != 1:
        raise ValueError(f"objective must return a scalar, got shape {tuple(out.shape)}")
    return out.reshape(())


def torch_value(fun: TorchObjective) -> Callable[[Array], float]:
    """NumPy-facing objective evaluating ``fun`` without building a graph."""

    def value(x: Array) -> float:
        with torch.no_grad():
            return float(_scalar(fun(_to_tensor(x))).item())

    return value


def torch_gradient(fun: TorchObjective) -> Callable[[Array], Array]:
    """NumPy-facing gradient of ``fun`` computed by reverse-mode autograd."""

    def gradient(x: Array) -> Array:
        grad = _torch_jacobian(lambda t: _scalar(fun(t)), _to_tensor(x))
        return grad.detach().cpu().numpy()

    return gradient


def torch_hessian(fun: TorchObjective) -> Callable[[Array], Array]:
    """NumPy-facing Hessian of ``fun`` computed by double differentiation."""

    def hessian(x: Array) -> Array:
        hess = _torch_hessian(lambda t: _scalar(fun(t)), _to_tensor(x))
        return hess.detach().cpu().numpy()

    return hessian


def autograd_problem(
    fun: TorchObjective, dim: Optional[int] = None, hessian: bool = True
) -> Problem:
    """
    Build a :class:`Problem` whose derivatives come from ``torch.autograd``.

    Parameters
    ----------
    fun:
        Function of a 1D ``float64`` tensor returning a scalar tensor.
    dim:
        Optional problem dimension.
    hessian:
        If False, the Hessian is left to the finite-difference fallback.

    Returns
    -------
    Problem
        Problem with analytic gradient (and Hessian unless disabled).
    """
    return Problem(
        fun=torch_value(fun),
        grad=torch_gradient(fun),
        hess=torch_hessian(fun) if hessian else None,
        dim=dim,
    )


__all__ = [
    "TorchObjective",
    "autograd_problem",
    "torch_gradient",
    "torch_hessian",
    "torch_value",
]
