"""Template extraction by divergence minimization.

This module turns a bounded, named parameter space and a template family
into an optimization problem and solves it with a black-box optimizer.

The module exports the following names:

Problem definition:
    VIDAProblem: Divergence, template family and parameter bounds.
    param_record: Build namedtuple parameter points.
    ShapeMismatchError, InvalidBoundsError: Bound validation errors.

Parameter spaces:
    distributionize: Uniform prior tree over the bounds.
    HypercubeTransform, FlatTransform: Prior tree <-> vector bijections.
    build_transform, box_bounds: Coordinate system construction.

Objective and starting points:
    Objective, build_objective: Box-checked divergence objective.
    initial_point: Deterministic or random starting vector.

Optimizers:
    Optimizer, OptimizerSolution: Optimizer protocol and result.
    ScipyMinimizer, DifferentialEvolution, ChainedOptimizer: scipy adapters.
    create_default_optimizer: Global search followed by local polish.

Drivers:
    vida: Single extraction run.
    threaded_vida: Independent random restarts on a thread pool.
    ExtractionResult: Fitted parameters, template and divergence.

Example usage::

    from vida_lib.optimization import VIDAProblem, ScipyMinimizer, param_record, vida

    problem = VIDAProblem(div, lambda p: Constant(p.scale),
                          param_record(scale=0.1), param_record(scale=10.0))
    params, template, value = vida(problem, ScipyMinimizer())
"""

from .distributions import (
    InvalidBoundsError,
    ProductUniform,
    ShapeMismatchError,
    Uniform,
    distributionize,
    param_record,
)
from .extractor import ExtractionResult, threaded_vida, vida
from .objective import Objective, build_objective
from .optimizers import (
    ChainedOptimizer,
    DifferentialEvolution,
    Optimizer,
    OptimizerSolution,
    ScipyMinimizer,
    create_default_optimizer,
)
from .problem import VIDAProblem
from .sampler import initial_point
from .transforms import (
    FlatTransform,
    HypercubeTransform,
    SpaceTransform,
    box_bounds,
    build_transform,
)

__all__ = [
    'VIDAProblem', 'param_record',
    'ShapeMismatchError', 'InvalidBoundsError',
    'Uniform', 'ProductUniform', 'distributionize',
    'SpaceTransform', 'HypercubeTransform', 'FlatTransform',
    'build_transform', 'box_bounds',
    'Objective', 'build_objective', 'initial_point',
    'Optimizer', 'OptimizerSolution',
    'ScipyMinimizer', 'DifferentialEvolution', 'ChainedOptimizer',
    'create_default_optimizer',
    'ExtractionResult', 'vida', 'threaded_vida',
]
