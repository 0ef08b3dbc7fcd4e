"""Divergences between a rendered template and a target image.

A divergence is bound to one target image and its pixel grid when it is
constructed. Calling it with a template renders the template on the same
grid and returns a non-negative score; lower means a better match. The
optimization layer only relies on ``divergence(template) -> float``, so any
callable with that signature can stand in for these classes.

Key classes:
    - Divergence: Base class handling image binding and rendering
    - LeastSquares: Mean squared difference of raw intensities
    - Bhattacharyya: Bhattacharyya distance of flux-normalized images
    - KullbackLeibler: KL divergence of the image from the template
    - Renyi: Renyi divergence of order alpha

Typical usage:
    from vida_lib.divergences import Bhattacharyya
    from vida_lib.templates import GaussDisk

    div = Bhattacharyya(image, grid)
    score = div(GaussDisk.from_physical(3.0, 0.5, 0.0, 0.0))

Notes:
    The normalized divergences treat both images as probability
    distributions over pixels. A template that renders to zero total flux
    has no such interpretation and scores +inf.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np

from .config import DIVERGENCE_FLOOR
from .templates.base import ImageTemplate
from .utils.rendering import ImageGrid, render


def _normalized(image: np.ndarray) -> np.ndarray | None:
    """Clip negatives and scale to unit total flux; None if there is no flux."""
    clipped = np.clip(image, 0.0, None)
    total = clipped.sum()
    if not np.isfinite(total) or total <= 0:
        return None
    return clipped / total


class Divergence(ABC):
    """Base class for template-to-image divergences.

    Subclasses must implement compare(), which scores a rendered template
    against the stored target image.

    Attributes:
        image: Target image as a float array of shape grid.shape.
        grid: Pixel grid the image is sampled on.

    Example:
        >>> class MaxAbs(Divergence):
        ...     def compare(self, rendered):
        ...         return float(np.max(np.abs(rendered - self.image)))
    """

    def __init__(self, image: np.ndarray, grid: ImageGrid):
        """Bind the divergence to a target image.

        Args:
            image: 2D array of pixel intensities.
            grid: Pixel grid matching the image shape.

        Raises:
            ValueError: If the image is not 2D or does not match the grid.
        """
        image = np.asarray(image, dtype=float)
        if image.ndim != 2:
            raise ValueError(f"Target image must be 2D, got {image.ndim} dimensions")
        if image.shape != grid.shape:
            raise ValueError(
                f"Image shape {image.shape} does not match grid shape {grid.shape}"
            )
        self.image = image
        self.grid = grid

    def __call__(self, template: ImageTemplate) -> float:
        """Render the template on the grid and score it against the image."""
        return self.compare(render(template, self.grid))

    @abstractmethod
    def compare(self, rendered: np.ndarray) -> float:
        """Score a rendered template (lower is better).

        Args:
            rendered: Template intensities on the grid, shape grid.shape.

        Returns:
            Divergence value as a float.
        """


class LeastSquares(Divergence):
    """Mean squared difference of raw intensities.

    Unlike the other divergences this one is sensitive to absolute flux,
    so template amplitude parameters are identifiable.
    """

    def compare(self, rendered: np.ndarray) -> float:
        return float(np.mean((rendered - self.image) ** 2))


class _NormalizedDivergence(Divergence):
    """Divergence between flux-normalized images."""

    def __init__(self, image: np.ndarray, grid: ImageGrid):
        super().__init__(image, grid)
        target = _normalized(self.image)
        if target is None:
            raise ValueError("Target image has no positive flux")
        self.target = target

    def compare(self, rendered: np.ndarray) -> float:
        model = _normalized(rendered)
        if model is None:
            return math.inf
        return self._compare_normalized(model)

    @abstractmethod
    def _compare_normalized(self, model: np.ndarray) -> float:
        """Score a unit-flux model image against self.target."""


class Bhattacharyya(_NormalizedDivergence):
    """Bhattacharyya distance -log(sum(sqrt(p * q)))."""

    def _compare_normalized(self, model: np.ndarray) -> float:
        overlap = float(np.sum(np.sqrt(self.target * model)))
        if overlap <= 0:
            return math.inf
        return -math.log(overlap)


class KullbackLeibler(_NormalizedDivergence):
    """KL divergence sum(p * log(p / q)) of the image p from the template q."""

    def _compare_normalized(self, model: np.ndarray) -> float:
        support = self.target > 0
        p = self.target[support]
        q = np.maximum(model[support], DIVERGENCE_FLOOR)
        return float(np.sum(p * np.log(p / q)))


class Renyi(_NormalizedDivergence):
    """Renyi divergence of order alpha.

    D_alpha = log(sum(p**alpha * q**(1 - alpha))) / (alpha - 1). Tends to
    the KL divergence as alpha -> 1 and to twice the Bhattacharyya distance
    at alpha = 0.5.
    """

    def __init__(self, image: np.ndarray, grid: ImageGrid, alpha: float = 0.75):
        """Bind the divergence to a target image.

        Args:
            image: 2D array of pixel intensities.
            grid: Pixel grid matching the image shape.
            alpha: Order of the divergence, positive and not equal to 1.
        """
        if alpha <= 0 or alpha == 1:
            raise ValueError(f"Renyi order must be positive and != 1, got {alpha}")
        super().__init__(image, grid)
        self.alpha = alpha

    def _compare_normalized(self, model: np.ndarray) -> float:
        support = self.target > 0
        p = self.target[support]
        q = np.maximum(model[support], DIVERGENCE_FLOOR)
        total = float(np.sum(p ** self.alpha * q ** (1.0 - self.alpha)))
        if total <= 0:
            return math.inf
        return math.log(total) / (self.alpha - 1.0)


DIVERGENCES: dict[str, type[Divergence]] = {
    'least_squares': LeastSquares,
    'bhattacharyya': Bhattacharyya,
    'kl': KullbackLeibler,
    'renyi': Renyi,
}
