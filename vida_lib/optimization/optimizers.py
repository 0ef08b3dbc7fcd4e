"""Black-box optimizer adapters.

This module wraps scipy.optimize behind the small interface the extraction
driver needs: minimize an objective over a box, starting from a point, and
report the optimum. Any object with a matching minimize() method can be
passed to vida() instead.

The module provides the following classes:
    OptimizerSolution: Data class describing a finished solve.
    Optimizer: Protocol defining the optimizer interface.
    ScipyMinimizer: Local optimization with scipy.optimize.minimize.
    DifferentialEvolution: Global optimization with
        scipy.optimize.differential_evolution.
    ChainedOptimizer: Runs several optimizers in sequence.

Example usage:
    Polishing a global search::

        from vida_lib.optimization.optimizers import (
            ChainedOptimizer, DifferentialEvolution, ScipyMinimizer
        )

        optimizer = ChainedOptimizer([
            DifferentialEvolution(maxiter=50),
            ScipyMinimizer('Nelder-Mead'),
        ])
        solution = optimizer.minimize(objective, x0, lower, upper)
        print(f"Best value: {solution.fun}")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np
from scipy.optimize import Bounds, differential_evolution, minimize

from ..config import (
    DE_MAX_ITERATIONS,
    DE_POPULATION_SIZE,
    DE_TOLERANCE,
    NM_F_TOLERANCE,
    NM_MAX_ITERATIONS,
    NM_X_TOLERANCE,
)

logger = logging.getLogger(__name__)

# scipy.optimize.minimize methods that accept box bounds
BOUNDED_METHODS = {'nelder-mead', 'powell', 'l-bfgs-b', 'tnc', 'slsqp',
                   'trust-constr', 'cobyla', 'cobyqa'}

# scipy.optimize.minimize methods that use a gradient (and so a jac scheme)
GRADIENT_METHODS = {'cg', 'bfgs', 'l-bfgs-b', 'tnc', 'slsqp', 'trust-constr'}

DEFAULT_METHOD_OPTIONS = {
    'nelder-mead': {
        'maxiter': NM_MAX_ITERATIONS,
        'xatol': NM_X_TOLERANCE,
        'fatol': NM_F_TOLERANCE,
        'adaptive': True,
    },
}


@dataclass
class OptimizerSolution:
    """Result of a black-box minimization.

    Attributes:
        x: Best point found, in the optimizer's coordinates.
        fun: Objective value at x.
        converged: Whether the optimizer met its stopping criteria.
        n_evaluations: Number of objective evaluations.
        message: Optimizer status message.
    """
    x: np.ndarray
    fun: float
    converged: bool = False
    n_evaluations: int = 0
    message: str = ''


class Optimizer(Protocol):
    """Protocol for black-box optimizers.

    Implementations must not swallow their own failures: exceptions
    propagate to the caller, and a solve that stops without converging is
    reported through OptimizerSolution.converged.
    """

    def minimize(
        self,
        objective: Callable[[np.ndarray], float],
        x0: np.ndarray,
        lower: np.ndarray,
        upper: np.ndarray,
        jac: str | None = None,
        **options,
    ) -> OptimizerSolution:
        """Minimize objective over the box [lower, upper].

        Args:
            objective: Function of a vector returning a float.
            x0: Starting vector.
            lower: Box lower bounds.
            upper: Box upper bounds.
            jac: Optional finite-difference scheme for gradient methods.
            **options: Optimizer-specific settings.

        Returns:
            OptimizerSolution for the best point found.
        """
        ...


@dataclass
class ScipyMinimizer:
    """Local optimization with scipy.optimize.minimize.

    Box bounds are passed to every method that supports them. The jac
    scheme is only forwarded to gradient-based methods; derivative-free
    methods ignore it.

    Attributes:
        method: Any scipy.optimize.minimize method name. Default is
            'Nelder-Mead'.
        options: Method options. Merged over the package defaults for the
            method; options given to minimize() take precedence.

    Example:
        >>> opt = ScipyMinimizer('L-BFGS-B', options={'maxiter': 500})
        >>> solution = opt.minimize(objective, x0, lower, upper, jac='2-point')
    """
    method: str = 'Nelder-Mead'
    options: dict = field(default_factory=dict)

    def minimize(self, objective, x0, lower, upper, jac=None, **options) -> OptimizerSolution:
        key = self.method.lower()
        merged = {**DEFAULT_METHOD_OPTIONS.get(key, {}), **self.options, **options}
        kwargs = {'method': self.method, 'options': merged}
        if key in BOUNDED_METHODS:
            kwargs['bounds'] = Bounds(lower, upper)
        if jac is not None and key in GRADIENT_METHODS:
            kwargs['jac'] = jac

        result = minimize(objective, np.asarray(x0, dtype=float), **kwargs)
        return OptimizerSolution(
            x=np.asarray(result.x, dtype=float),
            fun=float(result.fun),
            converged=bool(result.success),
            n_evaluations=int(getattr(result, 'nfev', 0)),
            message=str(getattr(result, 'message', '')),
        )


@dataclass
class DifferentialEvolution:
    """Global optimization with scipy.optimize.differential_evolution.

    The box bounds define the population domain and the starting vector is
    seeded into the initial population. Derivative free, so jac is ignored.

    Attributes:
        maxiter: Maximum number of generations.
        popsize: Population size multiplier.
        tol: Relative convergence tolerance.
        polish: Polish the best member with L-BFGS-B at the end.
        seed: Seed for the population. None draws fresh entropy.
    """
    maxiter: int = DE_MAX_ITERATIONS
    popsize: int = DE_POPULATION_SIZE
    tol: float = DE_TOLERANCE
    polish: bool = False
    seed: int | None = None

    def minimize(self, objective, x0, lower, upper, jac=None, **options) -> OptimizerSolution:
        settings = {'maxiter': self.maxiter, 'popsize': self.popsize,
                    'tol': self.tol, 'polish': self.polish, 'seed': self.seed}
        settings.update(options)
        result = differential_evolution(
            objective,
            bounds=list(zip(lower, upper)),
            x0=np.clip(np.asarray(x0, dtype=float), lower, upper),
            **settings,
        )
        return OptimizerSolution(
            x=np.asarray(result.x, dtype=float),
            fun=float(result.fun),
            converged=bool(result.success),
            n_evaluations=int(result.nfev),
            message=str(result.message),
        )


@dataclass
class ChainedOptimizer:
    """Runs optimizers in sequence, each starting from the best point so far.

    The pipeline typically progresses from a global search to a local
    polish. The best solution across all stages is returned; its
    n_evaluations is the total over all stages.

    Attributes:
        optimizers: Optimizers to run in order.
    """
    optimizers: list = field(default_factory=list)

    def minimize(self, objective, x0, lower, upper, jac=None, **options) -> OptimizerSolution:
        if not self.optimizers:
            raise ValueError("ChainedOptimizer has no stages")

        best = None
        current = np.asarray(x0, dtype=float)
        total_evaluations = 0

        for optimizer in self.optimizers:
            solution = optimizer.minimize(objective, current, lower, upper, jac=jac, **options)
            total_evaluations += solution.n_evaluations
            logger.debug("%s: fun=%.6g converged=%s",
                         type(optimizer).__name__, solution.fun, solution.converged)

            if best is None or solution.fun <= best.fun:
                best = solution
                current = solution.x

        best.n_evaluations = total_evaluations
        return best

    def add_optimizer(self, optimizer) -> ChainedOptimizer:
        """Append a stage (fluent interface)."""
        self.optimizers.append(optimizer)
        return self


def create_default_optimizer(seed: int | None = None) -> ChainedOptimizer:
    """Create the default global-then-local optimizer.

    Stages:
        1. DifferentialEvolution: Global search of the whole box
        2. ScipyMinimizer('Nelder-Mead'): Local polish of the best member

    Args:
        seed: Optional seed for the differential evolution population.

    Returns:
        Configured ChainedOptimizer.
    """
    return ChainedOptimizer([
        DifferentialEvolution(seed=seed),
        ScipyMinimizer('Nelder-Mead'),
    ])
