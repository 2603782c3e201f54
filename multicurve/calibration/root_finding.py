"""Vector root finders (Newton and Broyden) with least-squares steps."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

from multicurve.errors import ConfigurationError, ConvergenceError

logger = logging.getLogger(__name__)

VectorFunc = Callable[[np.ndarray], np.ndarray]
JacobianFunc = Callable[[np.ndarray, np.ndarray], np.ndarray]

# Backtracking halvings tried before a step is accepted as is
_MAX_HALVINGS = 8


@dataclass
class RootResult:
    root: np.ndarray
    iterations: int
    converged: bool
    method: str
    residual: float


def _step(jac: np.ndarray, value: np.ndarray) -> np.ndarray:
    # lstsq covers over- and under-determined systems (functional or node-date curves)
    return -np.linalg.lstsq(jac, value, rcond=None)[0]


def _line_search(func: VectorFunc, x: np.ndarray, value: np.ndarray, step: np.ndarray):
    norm = np.linalg.norm(value)
    scale = 1.0
    for _ in range(_MAX_HALVINGS):
        x_new = x + scale * step
        value_new = func(x_new)
        if np.all(np.isfinite(value_new)) and np.linalg.norm(value_new) < norm:
            return x_new, value_new
        scale *= 0.5
    x_new = x + step
    return x_new, func(x_new)


def _solve(
    func: VectorFunc,
    x0: np.ndarray,
    jacobian: JacobianFunc,
    *,
    abs_tol: float,
    rel_tol: float,
    max_steps: int,
    method: str,
    update: bool,
) -> RootResult:
    x = np.asarray(x0, dtype=float).copy()
    value = func(x)
    jac = jacobian(x, value)
    for iteration in range(1, max_steps + 1):
        residual = float(np.max(np.abs(value))) if len(value) else 0.0
        logger.debug("%s iter %s: max residual=%s", method, iteration, residual)
        if residual <= abs_tol:
            return RootResult(x, iteration, True, method, residual)
        step = _step(jac, value)
        x_new, value_new = _line_search(func, x, value, step)
        dx = x_new - x
        if np.max(np.abs(dx)) <= rel_tol * (1.0 + np.max(np.abs(x))):
            residual = float(np.max(np.abs(value_new)))
            return RootResult(x_new, iteration, True, method, residual)
        if update:
            # Broyden rank-one update; refresh fully when the step did not help
            if np.linalg.norm(value_new) < np.linalg.norm(value):
                jac = jac + np.outer(value_new - value - jac @ dx, dx) / float(dx @ dx)
            else:
                jac = jacobian(x_new, value_new)
        else:
            jac = jacobian(x_new, value_new)
        x, value = x_new, value_new
    residual = float(np.max(np.abs(value))) if len(value) else 0.0
    return RootResult(x, max_steps, False, method, residual)


def newton(func: VectorFunc, x0, jacobian: JacobianFunc, *, abs_tol=1e-12, rel_tol=1e-12, max_steps=100) -> RootResult:
    """Newton iteration with the full Jacobian recomputed at every step."""
    return _solve(func, x0, jacobian, abs_tol=abs_tol, rel_tol=rel_tol,
                  max_steps=max_steps, method="newton", update=False)


def broyden(func: VectorFunc, x0, jacobian: JacobianFunc, *, abs_tol=1e-12, rel_tol=1e-12, max_steps=100) -> RootResult:
    """Broyden iteration starting from the full Jacobian at ``x0``."""
    return _solve(func, x0, jacobian, abs_tol=abs_tol, rel_tol=rel_tol,
                  max_steps=max_steps, method="broyden", update=True)


ROOT_FINDERS: Dict[str, Callable[..., RootResult]] = {
    "NEWTON": newton,
    "BROYDEN": broyden,
}


def get_root_finder(name: str) -> Callable[..., RootResult]:
    try:
        return ROOT_FINDERS[name.upper()]
    except (KeyError, AttributeError):
        raise ConfigurationError(
            f"Unknown root finder: {name}. Available: {sorted(ROOT_FINDERS)}"
        ) from None


def solve_or_raise(finder: Callable[..., RootResult], func, x0, jacobian, **kwargs) -> RootResult:
    result = finder(func, x0, jacobian, **kwargs)
    if not result.converged:
        raise ConvergenceError(
            f"Root finder did not converge in {result.iterations} steps "
            f"(max residual {result.residual:.3e})"
        )
    return result
