"""Utility functions for template extraction.

The module exports the following names:
    ImageGrid: Pixel grid description.
    render: Evaluate a template on an ImageGrid.
    covers: Check grid coverage of a template's radial extent.
"""

from .rendering import ImageGrid, covers, render

__all__ = [
    'ImageGrid', 'render', 'covers',
]
