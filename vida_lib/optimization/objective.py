"""Objective function construction for template extraction."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import numpy as np

from .problem import VIDAProblem
from .transforms import SpaceTransform, box_bounds, build_transform


@dataclass(frozen=True, eq=False)
class Objective:
    """Divergence of the family template at a transformed-space point.

    Points outside the box [lower, upper], and points with NaN
    coordinates, score +inf whatever the optimizer's own bound handling
    does.

    Attributes:
        transform: Maps transformed vectors to parameter points.
        divergence: Scores a template against the target image.
        family: Builds a template from a parameter point.
        lower: Box lower bounds in transformed space.
        upper: Box upper bounds in transformed space.
    """
    transform: SpaceTransform
    divergence: Callable
    family: Callable[[Any], Any]
    lower: np.ndarray
    upper: np.ndarray

    def __call__(self, x) -> float:
        for xi, lo, hi in zip(x, self.lower, self.upper):
            if not lo <= xi <= hi:
                return math.inf
        return float(self.divergence(self.family(self.transform.transform(x))))


def build_objective(problem: VIDAProblem, unit_cube: bool = True):
    """Build the objective, transform and box bounds for a problem.

    Args:
        problem: Problem to optimize.
        unit_cube: If True optimize over [0, 1]^n, otherwise over R^n
            restricted to the FLAT_BOUND box.

    Returns:
        Tuple of (objective, transform, (lower, upper)).
    """
    transform = build_transform(problem.prior(), unit_cube)
    lower, upper = box_bounds(transform)
    objective = Objective(transform, problem.divergence, problem.family, lower, upper)
    return objective, transform, (lower, upper)
