"""Feature template extraction for 2D images.

Fits closed-form intensity templates (spirals, disks, constant backgrounds)
to an observed image by minimizing a divergence between the rendered
template and the image.

The package is organized into the following modules:
    domain: Points and the geometric modifiers (Stretch, Rotate, Shift)
        that place templates in the image plane.
    templates: Analytic intensity templates and their composition.
    utils: Pixel grids and template rendering.
    divergences: Template-to-image divergences bound to a target image.
    optimization: Parameter spaces, objectives, optimizer adapters and
        the extraction drivers.
    config: Shared constants and logging setup.

Example usage:
    Fitting a disk::

        import numpy as np
        from vida_lib import (
            Bhattacharyya, GaussDisk, ImageGrid, ScipyMinimizer,
            VIDAProblem, param_record, vida,
        )

        grid = ImageGrid(fov_x=20.0, fov_y=20.0, nx=64, ny=64)
        div = Bhattacharyya(image, grid)
        family = lambda p: GaussDisk.from_physical(p.r0, p.sigma, p.x0, p.y0)
        problem = VIDAProblem(
            div, family,
            param_record(r0=1.0, sigma=0.1, x0=-5.0, y0=-5.0),
            param_record(r0=8.0, sigma=2.0, x0=5.0, y0=5.0),
        )
        result = vida(problem, ScipyMinimizer(), rng=np.random.default_rng(1))
        print(result.params, result.divergence)

Attributes:
    __version__ (str): Package version string.
    __all__ (list): List of public symbols exported by this package.
"""

from .divergences import Bhattacharyya, Divergence, KullbackLeibler, LeastSquares, Renyi
from .domain import Point, Rotate, Shift, Stretch
from .optimization import (
    ChainedOptimizer,
    DifferentialEvolution,
    ExtractionResult,
    ScipyMinimizer,
    ShapeMismatchError,
    VIDAProblem,
    param_record,
    threaded_vida,
    vida,
)
from .templates import TEMPLATES, Constant, GaussDisk, ImageTemplate, LogSpiral, modify
from .utils import ImageGrid, render

__all__ = [
    # Domain objects
    'Point', 'Stretch', 'Rotate', 'Shift',
    # Templates
    'ImageTemplate', 'Constant', 'GaussDisk', 'LogSpiral', 'modify', 'TEMPLATES',
    # Rendering and divergences
    'ImageGrid', 'render',
    'Divergence', 'LeastSquares', 'Bhattacharyya', 'KullbackLeibler', 'Renyi',
    # Extraction
    'VIDAProblem', 'param_record', 'ShapeMismatchError',
    'ScipyMinimizer', 'DifferentialEvolution', 'ChainedOptimizer',
    'ExtractionResult', 'vida', 'threaded_vida',
]

__version__ = '0.1.0'
