"""Bijections between structured parameter spaces and flat vectors.

A space transform flattens a prior tree (see distributions.py) into a real
vector the optimizer can work with, and rebuilds the named parameter
structure from such a vector. Two coordinate systems are provided:

    HypercubeTransform: each parameter maps linearly onto [0, 1].
    FlatTransform: each parameter maps onto the real line through a
        scaled logistic function.

Both walk the prior tree in the same deterministic order (record/tuple
order, then array C order), so vector index i always refers to the same
parameter.

Example usage::

    from vida_lib.optimization.transforms import build_transform, box_bounds

    t = build_transform(prior, unit_cube=True)
    x = t.inverse(params)
    assert t.transform(x) == params
    lower, upper = box_bounds(t)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

import numpy as np
from scipy.special import expit, logit

from ..config import CUBE_LOWER, CUBE_UPPER, FLAT_BOUND
from .distributions import ProductUniform, Uniform, _is_record


def _leaves(prior) -> list:
    """Prior leaves in vector order."""
    if isinstance(prior, (Uniform, ProductUniform)):
        return [prior]
    if isinstance(prior, Mapping):
        return [leaf for value in prior.values() for leaf in _leaves(value)]
    if isinstance(prior, tuple):
        return [leaf for value in prior for leaf in _leaves(value)]
    raise TypeError(f"Not a prior structure: {type(prior).__name__}")


class SpaceTransform(ABC):
    """Base class for prior-tree <-> vector bijections.

    Subclasses define the per-leaf coordinate map; the base class handles
    walking the structure.

    Attributes:
        prior: Prior tree describing the parameter space.
    """

    lower_bound: float
    upper_bound: float

    def __init__(self, prior):
        self.prior = prior
        self._dimension = sum(leaf.size for leaf in _leaves(prior))

    @property
    def dimension(self) -> int:
        """Length of the flat parameter vector."""
        return self._dimension

    @abstractmethod
    def _to_params(self, leaf, values: np.ndarray) -> np.ndarray:
        """Map transformed coordinates of one leaf to parameter values."""

    @abstractmethod
    def _to_coords(self, leaf, values: np.ndarray) -> np.ndarray:
        """Map parameter values of one leaf to transformed coordinates."""

    def transform(self, x):
        """Rebuild the parameter structure from a transformed vector.

        Args:
            x: Sequence of length dimension.

        Returns:
            Parameters with the same structure as the bounds.
        """
        x = np.asarray(x, dtype=float)
        if x.shape != (self.dimension,):
            raise ValueError(f"Expected a vector of length {self.dimension}, got shape {x.shape}")
        params, offset = self._build(self.prior, x, 0)
        return params

    def _build(self, prior, x: np.ndarray, offset: int):
        if isinstance(prior, Uniform):
            value = self._to_params(prior, x[offset:offset + 1])
            return float(value[0]), offset + 1
        if isinstance(prior, ProductUniform):
            chunk = x[offset:offset + prior.size].reshape(prior.shape)
            return self._to_params(prior, chunk), offset + prior.size
        if _is_record(prior):
            values = []
            for value in prior:
                built, offset = self._build(value, x, offset)
                values.append(built)
            return type(prior)._make(values), offset
        if isinstance(prior, Mapping):
            built_map = {}
            for key, value in prior.items():
                built_map[key], offset = self._build(value, x, offset)
            return built_map, offset
        values = []
        for value in prior:
            built, offset = self._build(value, x, offset)
            values.append(built)
        return tuple(values), offset

    def inverse(self, params) -> np.ndarray:
        """Flatten a parameter structure into transformed coordinates.

        Args:
            params: Parameters with the same structure as the bounds.

        Returns:
            Float vector of length dimension.
        """
        chunks = []
        self._flatten(self.prior, params, chunks)
        if not chunks:
            return np.zeros(0)
        return np.concatenate(chunks)

    def _flatten(self, prior, params, chunks: list) -> None:
        if isinstance(prior, (Uniform, ProductUniform)):
            values = np.asarray(params, dtype=float)
            if values.shape != prior.shape:
                raise ValueError(f"Expected parameter shape {prior.shape}, got {values.shape}")
            chunks.append(np.atleast_1d(self._to_coords(prior, values)).ravel())
        elif isinstance(prior, Mapping):
            for key, value in prior.items():
                self._flatten(value, params[key], chunks)
        elif _is_record(prior) and not isinstance(params, tuple):
            for name, value in zip(prior._fields, prior):
                self._flatten(value, getattr(params, name), chunks)
        else:
            for value, param in zip(prior, params, strict=True):
                self._flatten(value, param, chunks)


class HypercubeTransform(SpaceTransform):
    """Linear map of every parameter onto the unit interval."""

    lower_bound = CUBE_LOWER
    upper_bound = CUBE_UPPER

    def _to_params(self, leaf, values: np.ndarray) -> np.ndarray:
        return leaf.lower + values * (np.asarray(leaf.upper) - leaf.lower)

    def _to_coords(self, leaf, values: np.ndarray) -> np.ndarray:
        width = np.asarray(leaf.upper, dtype=float) - leaf.lower
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.where(width > 0, (values - leaf.lower) / width, 0.5)


class FlatTransform(SpaceTransform):
    """Scaled logistic map of every parameter onto the real line."""

    lower_bound = -FLAT_BOUND
    upper_bound = FLAT_BOUND

    def _to_params(self, leaf, values: np.ndarray) -> np.ndarray:
        return leaf.lower + (np.asarray(leaf.upper) - leaf.lower) * expit(values)

    def _to_coords(self, leaf, values: np.ndarray) -> np.ndarray:
        width = np.asarray(leaf.upper, dtype=float) - leaf.lower
        with np.errstate(divide='ignore', invalid='ignore'):
            return np.where(width > 0, logit((values - leaf.lower) / width), 0.0)


def build_transform(prior, unit_cube: bool = True) -> SpaceTransform:
    """Pick the coordinate system for a prior tree.

    Args:
        prior: Prior tree from distributionize().
        unit_cube: If True map onto [0, 1]^n, otherwise onto R^n.

    Returns:
        HypercubeTransform or FlatTransform.
    """
    if unit_cube:
        return HypercubeTransform(prior)
    return FlatTransform(prior)


def box_bounds(transform: SpaceTransform) -> tuple[np.ndarray, np.ndarray]:
    """Numeric box bounds in the transform's coordinate system."""
    return (np.full(transform.dimension, transform.lower_bound),
            np.full(transform.dimension, transform.upper_bound))
