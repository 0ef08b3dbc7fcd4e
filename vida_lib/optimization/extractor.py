"""Template extraction driver.

This module runs the full extraction: it builds the objective for a
problem, picks a starting point, hands both to an optimizer and maps the
optimum back into named parameters and a fitted template.

Every call re-derives the transform and objective from the problem, so
calls share no mutable state and may run concurrently as long as the
divergence and optimizer allow it. threaded_vida() uses this to run
independent random restarts on a thread pool.

Example usage:
    Single extraction::

        from vida_lib.optimization import VIDAProblem, ScipyMinimizer, vida

        result = vida(problem, ScipyMinimizer('Nelder-Mead'), rng=rng)
        params, template, value = result

    Multi-start extraction::

        results = threaded_vida(problem, ScipyMinimizer(), n_starts=8, seed=1)
        best = results[0]
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..config import DEFAULT_MAX_WORKERS
from ..templates.base import ImageTemplate
from .objective import build_objective
from .problem import VIDAProblem
from .sampler import initial_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one extraction run.

    Iterating yields (params, template, divergence), so the result can be
    unpacked like a triple.

    Attributes:
        params: Optimal parameters, same structure as the problem bounds.
        template: Template built from params by the problem's family.
        divergence: Objective value at the optimum.
        converged: Whether the optimizer reported convergence.
        n_evaluations: Objective evaluations used by the optimizer.
    """
    params: Any
    template: ImageTemplate
    divergence: float
    converged: bool = False
    n_evaluations: int = 0

    def __iter__(self):
        return iter((self.params, self.template, self.divergence))


def vida(problem: VIDAProblem, optimizer, *, rng: np.random.Generator | None = None,
         init_params=None, unit_cube: bool = True, **solver_options) -> ExtractionResult:
    """Find the template in the problem's family that best matches the image.

    Args:
        problem: Problem to solve.
        optimizer: Object implementing the Optimizer protocol.
        rng: Random generator for the starting point. Not forwarded to the
            optimizer. Defaults to a freshly seeded generator.
        init_params: Optional starting point with the bounds' structure.
            If given, the rng is not used. In flat coordinates a value on
            a bound starts from just inside it (see initial_point).
        unit_cube: If True optimize over the unit hypercube, otherwise over
            R^n through a logistic transform.
        **solver_options: Forwarded to optimizer.minimize().

    Returns:
        ExtractionResult for the optimum found.

    Raises:
        Any exception raised by the optimizer or divergence, unchanged.
    """
    if rng is None:
        rng = np.random.default_rng()

    objective, transform, (lower, upper) = build_objective(problem, unit_cube)
    x0 = initial_point(rng, transform, init_params)
    logger.debug("Starting extraction: dimension=%d unit_cube=%s optimizer=%s",
                 transform.dimension, unit_cube, type(optimizer).__name__)

    solution = optimizer.minimize(objective, x0, lower, upper,
                                  jac=problem.autodiff, **solver_options)
    if not solution.converged:
        logger.warning("Optimizer %s did not converge: %s",
                       type(optimizer).__name__, solution.message)

    params = transform.transform(solution.x)
    logger.debug("Extraction finished: divergence=%.6g evaluations=%d",
                 solution.fun, solution.n_evaluations)
    return ExtractionResult(
        params=params,
        template=problem.family(params),
        divergence=solution.fun,
        converged=solution.converged,
        n_evaluations=solution.n_evaluations,
    )


def threaded_vida(problem: VIDAProblem, optimizer, n_starts: int, *, seed=None,
                  max_workers: int | None = DEFAULT_MAX_WORKERS, unit_cube: bool = True,
                  **solver_options) -> list[ExtractionResult]:
    """Run independent random-start extractions on a thread pool.

    Each run draws its starting point from its own generator, spawned from
    one SeedSequence, so a fixed seed reproduces the same set of starts
    regardless of scheduling.

    Args:
        problem: Problem to solve.
        optimizer: Optimizer shared by all runs; must be safe to call
            from several threads.
        n_starts: Number of independent runs.
        seed: Seed for the SeedSequence. None draws fresh entropy.
        max_workers: Thread pool size. None lets the executor decide.
        unit_cube: Coordinate system, as in vida().
        **solver_options: Forwarded to optimizer.minimize().

    Returns:
        List of ExtractionResult sorted by divergence, best first.

    Raises:
        Any exception raised by a run. No partial results are returned.
    """
    if n_starts < 1:
        raise ValueError(f"n_starts must be at least 1, got {n_starts}")

    generators = [np.random.default_rng(s) for s in np.random.SeedSequence(seed).spawn(n_starts)]
    results = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(vida, problem, optimizer, rng=rng,
                            unit_cube=unit_cube, **solver_options)
            for rng in generators
        ]
        for future in as_completed(futures):
            results.append(future.result())

    results.sort(key=lambda r: r.divergence)
    logger.info("Multi-start extraction complete: %d runs, best divergence=%.6g",
                len(results), results[0].divergence)
    return results
