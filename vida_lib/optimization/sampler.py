"""Starting points for template extraction."""

from __future__ import annotations

import numpy as np

from ..config import FLAT_START_BOUND
from .transforms import FlatTransform, HypercubeTransform, SpaceTransform


def initial_point(rng: np.random.Generator, transform: SpaceTransform,
                  init_params=None) -> np.ndarray:
    """Starting vector in the transform's coordinate system.

    A user supplied starting point is mapped deterministically; the rng is
    only used when no starting point is given. Random draws follow the
    coordinate system: uniform on the unit cube, standard normal on R^n.

    In flat coordinates the start is clipped to +/-FLAT_START_BOUND. A
    parameter on its bound inverts to +/-inf there, and far out the
    logistic map is too flat for the optimizer to move.

    Args:
        rng: Random generator for random starts.
        transform: Coordinate system of the optimization.
        init_params: Optional parameter point with the bounds' structure.

    Returns:
        Float vector of length transform.dimension.
    """
    if init_params is not None:
        x0 = transform.inverse(init_params)
    elif isinstance(transform, HypercubeTransform):
        x0 = rng.random(transform.dimension)
    elif isinstance(transform, FlatTransform):
        x0 = rng.standard_normal(transform.dimension)
    else:
        raise TypeError(f"No sampling rule for {type(transform).__name__}")

    if isinstance(transform, FlatTransform):
        x0 = np.clip(x0, -FLAT_START_BOUND, FLAT_START_BOUND)
    return x0
