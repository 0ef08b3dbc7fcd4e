"""Unit tests for vida_lib.optimization.transforms."""

import math

import numpy as np
import pytest
from scipy.special import expit

from vida_lib.config import FLAT_BOUND
from vida_lib.optimization.distributions import distributionize, param_record
from vida_lib.optimization.transforms import (
    FlatTransform,
    HypercubeTransform,
    box_bounds,
    build_transform,
)


@pytest.fixture
def nested_bounds():
    lower = param_record(r0=1.0, weights=np.zeros((2, 2)), pair=(0.0, -1.0))
    upper = param_record(r0=11.0, weights=np.full((2, 2), 4.0), pair=(2.0, 1.0))
    return lower, upper


@pytest.fixture
def nested_prior(nested_bounds):
    return distributionize(*nested_bounds)


class TestHypercubeTransform:
    """Tests for the unit-cube coordinate system."""

    def test_dimension(self, nested_prior):
        assert HypercubeTransform(nested_prior).dimension == 7

    def test_scalar_mapping(self):
        t = HypercubeTransform(distributionize(0.0, 10.0))
        assert t.transform([0.25]) == 2.5
        assert isinstance(t.transform([0.25]), float)
        np.testing.assert_allclose(t.inverse(7.5), [0.75])

    def test_vector_order(self, nested_prior):
        """Record fields in order, arrays in C order, then tuple items."""
        t = HypercubeTransform(nested_prior)
        params = t.transform([0.5, 0.0, 0.25, 0.5, 1.0, 0.5, 1.0])
        assert params.r0 == 6.0
        np.testing.assert_allclose(params.weights, [[0.0, 1.0], [2.0, 4.0]])
        assert params.pair == (1.0, 1.0)
        assert type(params) is type(nested_prior)

    def test_inverse_undoes_transform(self, nested_prior):
        t = HypercubeTransform(nested_prior)
        x = np.array([0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7])
        np.testing.assert_allclose(t.inverse(t.transform(x)), x)

    def test_bounds_map_to_cube_corners(self, nested_bounds, nested_prior):
        t = HypercubeTransform(nested_prior)
        lower, upper = nested_bounds
        np.testing.assert_allclose(t.inverse(lower), np.zeros(7))
        np.testing.assert_allclose(t.inverse(upper), np.ones(7))

    def test_mapping_prior(self):
        t = HypercubeTransform(distributionize({'a': 0.0, 'b': 10.0}, {'a': 1.0, 'b': 20.0}))
        assert t.transform([0.5, 0.5]) == {'a': 0.5, 'b': 15.0}
        np.testing.assert_allclose(t.inverse({'b': 12.0, 'a': 0.25}), [0.25, 0.2])

    def test_zero_width_parameter(self):
        t = HypercubeTransform(distributionize((0.0, 2.0), (1.0, 2.0)))
        np.testing.assert_allclose(t.inverse((0.5, 2.0)), [0.5, 0.5])
        assert t.transform([0.3, 0.9]) == (0.3, 2.0)

    def test_wrong_vector_length(self, nested_prior):
        with pytest.raises(ValueError, match="length 7"):
            HypercubeTransform(nested_prior).transform(np.zeros(6))

    def test_wrong_parameter_shape(self):
        t = HypercubeTransform(distributionize(np.zeros(3), np.ones(3)))
        with pytest.raises(ValueError, match="shape"):
            t.inverse(np.zeros(2))

    def test_wrong_tuple_length(self):
        t = HypercubeTransform(distributionize((0.0, 0.0), (1.0, 1.0)))
        with pytest.raises(ValueError):
            t.inverse((0.5,))

    def test_rejects_non_prior(self):
        with pytest.raises(TypeError):
            HypercubeTransform("not a prior")


class TestFlatTransform:
    """Tests for the logistic coordinate system."""

    def test_midpoint_maps_to_zero(self):
        t = FlatTransform(distributionize(2.0, 6.0))
        np.testing.assert_allclose(t.inverse(4.0), [0.0], atol=1e-12)
        assert t.transform([0.0]) == pytest.approx(4.0)

    def test_logistic_shape(self):
        t = FlatTransform(distributionize(0.0, 1.0))
        assert t.transform([2.0]) == pytest.approx(expit(2.0))
        assert t.inverse(0.75)[0] == pytest.approx(math.log(3.0))

    def test_box_edges_stay_inside_bounds(self):
        t = FlatTransform(distributionize(-1.0, 1.0))
        assert -1.0 < t.transform([-FLAT_BOUND]) < -0.999999
        assert 0.999999 < t.transform([FLAT_BOUND]) < 1.0

    def test_inverse_undoes_transform(self, nested_prior):
        t = FlatTransform(nested_prior)
        x = np.array([-3.0, -1.0, 0.0, 0.5, 1.0, 2.0, 4.0])
        np.testing.assert_allclose(t.inverse(t.transform(x)), x, atol=1e-8)

    def test_zero_width_parameter(self):
        t = FlatTransform(distributionize(3.0, 3.0))
        np.testing.assert_allclose(t.inverse(3.0), [0.0])
        assert t.transform([5.0]) == 3.0


class TestParameterRoundTrip:
    """Parameters drawn from the bounds survive inverse then transform."""

    @pytest.mark.parametrize("cls", [HypercubeTransform, FlatTransform])
    def test_nested_record(self, cls, nested_prior, rng):
        t = cls(nested_prior)
        for _ in range(10):
            params = param_record(
                r0=rng.uniform(1.0, 11.0),
                weights=rng.uniform(0.0, 4.0, size=(2, 2)),
                pair=(rng.uniform(0.0, 2.0), rng.uniform(-1.0, 1.0)),
            )
            rebuilt = t.transform(t.inverse(params))
            assert rebuilt.r0 == pytest.approx(params.r0)
            np.testing.assert_allclose(rebuilt.weights, params.weights)
            assert rebuilt.pair == pytest.approx(params.pair)

    @pytest.mark.parametrize("cls", [HypercubeTransform, FlatTransform])
    def test_mapping(self, cls, rng):
        t = cls(distributionize({'a': -3.0, 'b': 10.0}, {'a': 3.0, 'b': 20.0}))
        for _ in range(10):
            params = {'a': rng.uniform(-3.0, 3.0), 'b': rng.uniform(10.0, 20.0)}
            rebuilt = t.transform(t.inverse(params))
            assert rebuilt == pytest.approx(params)


class TestBuildTransform:
    """Tests for coordinate-system selection and box bounds."""

    def test_selects_cube(self, nested_prior):
        assert isinstance(build_transform(nested_prior), HypercubeTransform)
        assert isinstance(build_transform(nested_prior, unit_cube=True), HypercubeTransform)

    def test_selects_flat(self, nested_prior):
        assert isinstance(build_transform(nested_prior, unit_cube=False), FlatTransform)

    def test_cube_box(self, nested_prior):
        lower, upper = box_bounds(build_transform(nested_prior))
        np.testing.assert_array_equal(lower, np.zeros(7))
        np.testing.assert_array_equal(upper, np.ones(7))

    def test_flat_box(self, nested_prior):
        lower, upper = box_bounds(build_transform(nested_prior, unit_cube=False))
        np.testing.assert_array_equal(lower, np.full(7, -FLAT_BOUND))
        np.testing.assert_array_equal(upper, np.full(7, FLAT_BOUND))
