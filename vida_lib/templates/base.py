"""Template base class and geometric composition.

Every template is an immutable, closed-form intensity function defined in a
local frame: centred on the origin with unit length scale. Templates are
placed in the image plane by wrapping them with an ordered list of
modifiers (see vida_lib.domain.geometry).

The module provides the following names:
    ImageTemplate: Abstract base class for all templates.
    ModifiedTemplate: A base template wrapped with ordered modifiers.
    modify: Compose a template with modifiers.

Example usage::

    from vida_lib.domain import Point, Shift, Stretch
    from vida_lib.templates import GaussDisk, modify

    disk = modify(GaussDisk(0.1), Stretch(5.0), Shift(2.0, -1.0))
    disk.intensity_point(Point(2.0, -1.0))   # 1.0, the disk centre
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from ..domain.geometry import Modifier, Point


class ImageTemplate(ABC):
    """Base class for analytic intensity templates.

    Subclasses implement the vectorised intensity and the radial extent.
    The per-point contract is derived from the vectorised one so that both
    always agree.

    Subclasses must implement:
        - intensity_map(): Intensity at arrays (or scalars) of coordinates
        - radial_extent(): Radius beyond which intensity is negligible

    Templates must stay side-effect free: an optimizer constructs and
    discards one per objective evaluation.
    """

    @abstractmethod
    def intensity_map(self, x, y) -> np.ndarray:
        """Evaluate intensity at coordinate arrays.

        Args:
            x: Scalar or array of x coordinates.
            y: Scalar or array of y coordinates, broadcastable with x.

        Returns:
            np.ndarray of non-negative intensities with the broadcast shape.
        """

    @abstractmethod
    def radial_extent(self) -> float:
        """Characteristic radius beyond which intensity is negligible."""

    def intensity_point(self, point: Point) -> float:
        """Intensity at a single point.

        Args:
            point: Query point in the template's frame.

        Returns:
            Non-negative intensity as a Python float.
        """
        return float(self.intensity_map(point.x, point.y))

    def footprint(self) -> tuple[Point, float]:
        """Disk (centre, radius) outside which intensity is negligible.

        Unlike radial_extent(), which is measured from the origin, the
        footprint follows the template when it is shifted away from it.
        """
        return Point(0.0, 0.0), self.radial_extent()


@dataclass(frozen=True)
class ModifiedTemplate(ImageTemplate):
    """A template placed in the image by an ordered tuple of modifiers.

    Modifiers are stored in the order they act on the image. Evaluation
    walks them in reverse, undoing each one, so the base template always
    sees coordinates in its own local frame.

    Attributes:
        base: The unmodified template.
        modifiers: Modifiers in application order.
    """
    base: ImageTemplate
    modifiers: tuple[Modifier, ...] = ()

    def intensity_map(self, x, y) -> np.ndarray:
        for modifier in reversed(self.modifiers):
            x, y = modifier.apply_inverse(x, y)
        return self.base.intensity_map(x, y)

    def radial_extent(self) -> float:
        extent = self.base.radial_extent()
        for modifier in self.modifiers:
            extent = modifier.transform_extent(extent)
        return extent

    def footprint(self) -> tuple[Point, float]:
        centre, radius = self.base.footprint()
        for modifier in self.modifiers:
            centre, radius = modifier.transform_footprint(centre, radius)
        return centre, radius


def modify(template: ImageTemplate, *modifiers: Modifier) -> ModifiedTemplate:
    """Compose a template with modifiers, applied left to right.

    Modifying an already modified template appends to its modifier list,
    so ``modify(modify(t, a), b)`` equals ``modify(t, a, b)``.

    Args:
        template: Template to place.
        *modifiers: Modifiers in the order they act on the image.

    Returns:
        ModifiedTemplate wrapping the base template.

    Example:
        >>> spiral = modify(LogSpiral(0.5, 0.05, 2.0), Stretch(10.0), Rotate(0.3))
    """
    if isinstance(template, ModifiedTemplate):
        return ModifiedTemplate(template.base, template.modifiers + tuple(modifiers))
    return ModifiedTemplate(template, tuple(modifiers))
