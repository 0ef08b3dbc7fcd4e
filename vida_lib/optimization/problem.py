"""Template extraction problem definition."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..templates.base import ImageTemplate
from .distributions import distributionize

# scipy finite-difference schemes accepted as the autodiff setting
AUTODIFF_SCHEMES = ('2-point', '3-point')


@dataclass(frozen=True)
class VIDAProblem:
    """Everything needed to extract the optimal template from an image.

    The bounds define the parameter space: their structure (scalar, tuple,
    namedtuple, mapping or array) is exactly the structure the family
    function receives. Bounds are validated when the problem is built, so a
    malformed search space never reaches the optimizer.

    Attributes:
        divergence: Callable scoring a template against the target image,
            lower is better. Usually a vida_lib.divergences.Divergence.
        family: Function mapping a parameter point to a template.
        lower: Lower bounds of the parameter space.
        upper: Upper bounds, same structure as lower.
        autodiff: None for derivative-free solves, or a finite-difference
            scheme ('2-point', '3-point') passed to gradient-based solvers.

    Raises:
        ShapeMismatchError: If lower and upper differ in structure.
        InvalidBoundsError: If a lower bound exceeds its upper bound.

    Example:
        >>> f = lambda p: GaussDisk.from_physical(p.r0, p.sigma, 0.0, 0.0)
        >>> prob = VIDAProblem(Bhattacharyya(img, grid), f,
        ...                    param_record(r0=1.0, sigma=0.1),
        ...                    param_record(r0=10.0, sigma=2.0))
    """
    divergence: Callable[[ImageTemplate], float]
    family: Callable[[Any], ImageTemplate]
    lower: Any
    upper: Any
    autodiff: str | None = None

    def __post_init__(self):
        if self.autodiff is not None and self.autodiff not in AUTODIFF_SCHEMES:
            raise ValueError(
                f"Unknown autodiff scheme {self.autodiff!r}, expected one of {AUTODIFF_SCHEMES}"
            )
        distributionize(self.lower, self.upper)

    def prior(self):
        """Uniform prior tree over the bounds."""
        return distributionize(self.lower, self.upper)
