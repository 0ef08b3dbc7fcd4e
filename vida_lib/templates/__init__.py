"""Analytic intensity templates.

The module exports the following names:
    ImageTemplate: Abstract base class for all templates.
    ModifiedTemplate, modify: Geometric composition of templates.
    Constant, GaussDisk, LogSpiral: Concrete templates.
    TEMPLATES: Registry mapping template names to classes.
"""

from .base import ImageTemplate, ModifiedTemplate, modify
from .shapes import TEMPLATES, Constant, GaussDisk, LogSpiral

__all__ = [
    'ImageTemplate', 'ModifiedTemplate', 'modify',
    'Constant', 'GaussDisk', 'LogSpiral',
    'TEMPLATES',
]
