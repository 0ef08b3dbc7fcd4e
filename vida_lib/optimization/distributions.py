"""Bounded priors over structured parameter spaces.

This module turns a pair of same-shaped bound structures into a matching
structure of uniform distributions. Bounds may be scalars, tuples, named
records (namedtuples or mappings), arrays, or any nesting of these. The
resulting tree is what the space transforms flatten into a vector.

The module provides the following names:
    Uniform: Scalar uniform prior.
    ProductUniform: Independent uniform priors over an array.
    distributionize: Build the prior tree from lower/upper bounds.
    param_record: Build a namedtuple parameter point from keywords.
    ShapeMismatchError, InvalidBoundsError: Bound validation errors.

Example usage::

    from vida_lib.optimization.distributions import distributionize, param_record

    lower = param_record(r0=1.0, sigma=0.1)
    upper = param_record(r0=10.0, sigma=2.0)
    prior = distributionize(lower, upper)
    prior.r0          # Uniform(lower=1.0, upper=10.0)
"""

from __future__ import annotations

import numbers
from collections import namedtuple
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

import numpy as np


class ShapeMismatchError(ValueError):
    """Lower and upper bound structures disagree in kind, length, keys or shape."""


class InvalidBoundsError(ValueError):
    """A lower bound exceeds its upper bound."""


@dataclass(frozen=True)
class Uniform:
    """Uniform prior on the closed interval [lower, upper]."""
    lower: float
    upper: float

    size = 1
    shape = ()


@dataclass(frozen=True, eq=False)
class ProductUniform:
    """Independent uniform priors over every element of an array."""
    lower: np.ndarray
    upper: np.ndarray

    @property
    def shape(self) -> tuple:
        return self.lower.shape

    @property
    def size(self) -> int:
        return self.lower.size


def _is_record(value) -> bool:
    """True for namedtuple instances (tuples with _fields)."""
    return isinstance(value, tuple) and hasattr(value, '_fields')


def _is_scalar(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_order(lower, upper, where: str) -> None:
    if np.any(np.asarray(lower) > np.asarray(upper)):
        raise InvalidBoundsError(f"Lower bound exceeds upper bound at {where}")


def distributionize(lower, upper, _path: str = 'bounds'):
    """Build a prior structure matching a pair of bound structures.

    Recursion rules:
        - scalar, scalar -> Uniform
        - namedtuple, namedtuple (same fields) -> namedtuple of priors
        - mapping, mapping (same keys) -> dict of priors
        - tuple, tuple (same length) -> tuple of priors
        - array/list, array/list (same shape) -> ProductUniform

    Args:
        lower: Lower bound structure.
        upper: Upper bound structure of the same shape.

    Returns:
        Prior structure with the same shape as the bounds.

    Raises:
        ShapeMismatchError: If the two structures differ in shape.
        InvalidBoundsError: If any lower bound exceeds its upper bound.
        TypeError: If a bound has an unsupported type.
    """
    if _is_scalar(lower) and _is_scalar(upper):
        _check_order(lower, upper, _path)
        return Uniform(float(lower), float(upper))

    if _is_record(lower) or _is_record(upper):
        if not (_is_record(lower) and _is_record(upper)) or lower._fields != upper._fields:
            raise ShapeMismatchError(
                f"Named bounds at {_path} have different fields: "
                f"{getattr(lower, '_fields', type(lower).__name__)} vs "
                f"{getattr(upper, '_fields', type(upper).__name__)}"
            )
        return type(lower)._make(
            distributionize(lo, hi, f"{_path}.{name}")
            for name, lo, hi in zip(lower._fields, lower, upper)
        )

    if isinstance(lower, Mapping) or isinstance(upper, Mapping):
        if not (isinstance(lower, Mapping) and isinstance(upper, Mapping)):
            raise ShapeMismatchError(f"Only one bound at {_path} is a mapping")
        if set(lower) != set(upper):
            raise ShapeMismatchError(
                f"Named bounds at {_path} have different keys: "
                f"{sorted(map(str, lower))} vs {sorted(map(str, upper))}"
            )
        return {key: distributionize(lower[key], upper[key], f"{_path}.{key}") for key in lower}

    if isinstance(lower, tuple) or isinstance(upper, tuple):
        if not (isinstance(lower, tuple) and isinstance(upper, tuple)):
            raise ShapeMismatchError(f"Only one bound at {_path} is a tuple")
        if len(lower) != len(upper):
            raise ShapeMismatchError(
                f"Tuple bounds at {_path} have lengths {len(lower)} and {len(upper)}"
            )
        return tuple(
            distributionize(lo, hi, f"{_path}[{i}]")
            for i, (lo, hi) in enumerate(zip(lower, upper))
        )

    if isinstance(lower, (np.ndarray, list)) or isinstance(upper, (np.ndarray, list)):
        if not (isinstance(lower, (np.ndarray, list)) and isinstance(upper, (np.ndarray, list))):
            raise ShapeMismatchError(f"Only one bound at {_path} is an array")
        lo = np.asarray(lower, dtype=float)
        hi = np.asarray(upper, dtype=float)
        if lo.shape != hi.shape:
            raise ShapeMismatchError(
                f"Array bounds at {_path} have shapes {lo.shape} and {hi.shape}"
            )
        _check_order(lo, hi, _path)
        return ProductUniform(lo, hi)

    if _is_scalar(lower) or _is_scalar(upper):
        raise ShapeMismatchError(
            f"Bounds at {_path} mix a scalar with {type(upper if _is_scalar(lower) else lower).__name__}"
        )
    raise TypeError(f"Unsupported bound type at {_path}: {type(lower).__name__}")


@lru_cache(maxsize=None)
def _record_type(fields: tuple[str, ...]):
    return namedtuple('Params', fields)


def param_record(**values):
    """Build a namedtuple parameter point, one field per keyword.

    Records built from the same field names share a class, so lower and
    upper bounds built this way always agree on their fields.

    Example:
        >>> p = param_record(scale=1.0)
        >>> p.scale
        1.0
    """
    return _record_type(tuple(values))(**values)
