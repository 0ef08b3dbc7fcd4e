"""Geometric value objects and coordinate modifiers for templates."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Point:
    """Immutable 2D point."""
    x: float
    y: float


def ringphase(x, y):
    """Position angle of (x, y), measured from +y towards -x.

    Works on scalars and numpy arrays. The result lies in (-pi, pi] and is
    0 along the positive y axis.
    """
    return np.arctan2(-x, y)


class Modifier(ABC):
    """A geometric modification applied to a template's image.

    Modifiers describe how the image is moved. Template evaluation needs the
    opposite direction, so each modifier maps a query point back into the
    frame it was applied to.
    """

    @abstractmethod
    def apply_inverse(self, x, y):
        """Map image-frame coordinates back to the pre-modifier frame.

        Args:
            x: Scalar or array of x coordinates.
            y: Scalar or array of y coordinates, same shape as x.

        Returns:
            Tuple (x, y) in the frame before this modifier was applied.
        """

    @abstractmethod
    def transform_extent(self, extent: float) -> float:
        """Radial extent after this modifier is applied."""

    @abstractmethod
    def transform_footprint(self, centre: Point, radius: float) -> tuple[Point, float]:
        """Footprint disk (centre, radius) after this modifier is applied."""


@dataclass(frozen=True)
class Stretch(Modifier):
    """Scale the image by sx along x and sy along y (sy defaults to sx)."""
    sx: float
    sy: float | None = None

    @property
    def scale_y(self) -> float:
        return self.sx if self.sy is None else self.sy

    def apply_inverse(self, x, y):
        return x / self.sx, y / self.scale_y

    def transform_extent(self, extent: float) -> float:
        return extent * max(abs(self.sx), abs(self.scale_y))

    def transform_footprint(self, centre, radius):
        return (Point(centre.x * self.sx, centre.y * self.scale_y),
                radius * max(abs(self.sx), abs(self.scale_y)))


@dataclass(frozen=True)
class Rotate(Modifier):
    """Rotate the image counter-clockwise by angle radians."""
    angle: float

    def apply_inverse(self, x, y):
        c, s = math.cos(self.angle), math.sin(self.angle)
        return c * x + s * y, -s * x + c * y

    def transform_extent(self, extent: float) -> float:
        return extent

    def transform_footprint(self, centre, radius):
        c, s = math.cos(self.angle), math.sin(self.angle)
        return Point(c * centre.x - s * centre.y, s * centre.x + c * centre.y), radius


@dataclass(frozen=True)
class Shift(Modifier):
    """Translate the image by (dx, dy)."""
    dx: float
    dy: float

    def apply_inverse(self, x, y):
        return x - self.dx, y - self.dy

    def transform_extent(self, extent: float) -> float:
        return extent + math.hypot(self.dx, self.dy)

    def transform_footprint(self, centre, radius):
        return Point(centre.x + self.dx, centre.y + self.dy), radius
