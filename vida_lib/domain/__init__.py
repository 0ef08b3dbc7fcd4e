"""Domain objects for template extraction.

This module provides the geometric value objects used throughout the
package: the query point type and the ordered coordinate modifiers that
place a template in the image plane.

The module exports the following names:
    Point: Immutable 2D point.
    Modifier: Base class for coordinate modifiers.
    Stretch, Rotate, Shift: Concrete modifiers.
    ringphase: Position angle convention shared by ring-like templates.

Example usage::

    from vida_lib.domain import Point, Shift, Stretch

    p = Point(1.0, 2.0)
    x, y = Shift(1.0, 0.0).apply_inverse(p.x, p.y)
"""

from .geometry import Modifier, Point, Rotate, Shift, Stretch, ringphase

__all__ = [
    'Point', 'Modifier', 'Stretch', 'Rotate', 'Shift', 'ringphase',
]
