"""Concrete intensity templates.

This module provides the closed set of analytic templates used to describe
image features. Each template is defined in a local, origin-centred frame
with unit length scale. The from_physical() constructors place a template
in image units, pre-dividing local length-scale parameters by the stretch
factor before composing.

The module supports the following templates:
    - constant: Flat background that soaks up diffuse flux
    - gauss_disk: Flat-top disk with a Gaussian-tapered edge
    - log_spiral: Single-armed logarithmic spiral segment

Typical usage example:
    >>> from vida_lib.templates import TEMPLATES, GaussDisk
    >>> disk = GaussDisk.from_physical(r0=5.0, sigma=0.5, x0=0.0, y0=0.0)
    >>> disk.radial_extent()
    6.5
    >>> TEMPLATES['constant'](2.0).intensity_map(0.0, 0.0)
    array(0.25)

Notes:
    Degenerate parameters are not validated. LogSpiral expects kappa in the
    open interval (0, 1); at kappa -> 1 the arm becomes a circle and the
    winding number is undefined.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..config import SPIRAL_ANCHOR_ANGLE
from ..domain.geometry import Rotate, Shift, Stretch, ringphase
from .base import ImageTemplate, ModifiedTemplate, modify

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Constant(ImageTemplate):
    """Constant-flux template.

    Useful for soaking up low levels of flux that would otherwise bias the
    fit of the other features. Intensity is 1/scale**2 everywhere.
    """
    scale: float

    def intensity_map(self, x, y) -> np.ndarray:
        shape = np.broadcast(x, y).shape
        return np.full(shape, 1.0 / self.scale ** 2)

    def radial_extent(self) -> float:
        return 1.0


@dataclass(frozen=True)
class GaussDisk(ImageTemplate):
    """Unit disk with a Gaussian-tapered edge.

    Intensity is 1 inside radius 1 and falls off as a Gaussian of width
    alpha outside it.
    """
    alpha: float

    def intensity_map(self, x, y) -> np.ndarray:
        r = np.hypot(x, y)
        edge = np.exp(-(r - 1.0) ** 2 / (2.0 * self.alpha ** 2))
        return np.where(r < 1.0, 1.0, edge)

    def radial_extent(self) -> float:
        return 1.0 + 3.0 * self.alpha

    @classmethod
    def from_physical(cls, r0: float, sigma: float, x0: float, y0: float) -> ModifiedTemplate:
        """Disk of radius r0 and edge width sigma centred on (x0, y0)."""
        return modify(cls(sigma / r0), Stretch(r0), Shift(x0, y0))


@dataclass(frozen=True)
class LogSpiral(ImageTemplate):
    """Logarithmic spiral arm segment.

    The arm is anchored at radius 1 and winding angle SPIRAL_ANCHOR_ANGLE
    and extends inward over an angular range set by delta_phi. Intensity
    is a separable Gaussian in radial distance from the nearest arm
    crossing and in angular distance from the anchor.

    Attributes:
        kappa: Unit curvature in (0, 1); the pitch is k = sqrt(1-kappa^2)/kappa.
        sigma: Gaussian thickness of the arm.
        delta_phi: Angular extent of the arm.
    """
    kappa: float
    sigma: float
    delta_phi: float

    def intensity_map(self, x, y) -> np.ndarray:
        k = math.sqrt(1.0 - self.kappa * self.kappa) / self.kappa
        # log of the scale a = exp(-k * anchor), kept in log space to avoid overflow
        log_a = -k * SPIRAL_ANCHOR_ANGLE

        r = np.hypot(x, y)
        alpha = ringphase(x, y)

        # log(0) at the origin drives every term to +/-inf and the result to 0
        with np.errstate(divide='ignore', invalid='ignore'):
            n = ((np.log(r) - log_a) / k - alpha) / TWO_PI
            n_ceil = np.ceil(n)
            n_floor = np.floor(n)
            r_ceil = np.exp(log_a + k * (alpha + n_ceil * TWO_PI))
            r_floor = np.exp(log_a + k * (alpha + n_floor * TWO_PI))
            d_ceil = np.abs(r_ceil - r)
            d_floor = np.abs(r_floor - r)

            use_ceil = d_ceil < d_floor
            nn = np.where(use_ceil, n_ceil, n_floor)
            dist = np.where(use_ceil, d_ceil, d_floor)

            dtheta = SPIRAL_ANCHOR_ANGLE - (alpha + nn * TWO_PI)
            half_extent = self.delta_phi / 2.0
            return np.exp(-dist ** 2 / (2.0 * self.sigma ** 2)
                          - dtheta ** 2 / (2.0 * half_extent ** 2))

    def radial_extent(self) -> float:
        return math.exp(self.kappa * self.delta_phi)

    @classmethod
    def from_physical(cls, r0: float, kappa: float, sigma: float, delta_phi: float,
                      xi: float, x0: float, y0: float) -> ModifiedTemplate:
        """Spiral with anchor radius r0, arm width sigma, rotated by xi, centred on (x0, y0)."""
        return modify(cls(kappa, sigma / r0, delta_phi), Stretch(r0), Rotate(xi), Shift(x0, y0))


TEMPLATES: dict[str, type[ImageTemplate]] = {
    'constant': Constant,
    'gauss_disk': GaussDisk,
    'log_spiral': LogSpiral,
}
