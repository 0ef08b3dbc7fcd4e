"""Unit tests for vida_lib.divergences."""

import math

import numpy as np
import pytest

from vida_lib.divergences import (
    DIVERGENCES,
    Bhattacharyya,
    Divergence,
    KullbackLeibler,
    LeastSquares,
    Renyi,
)
from vida_lib.templates import Constant, GaussDisk
from vida_lib.utils.rendering import ImageGrid


@pytest.fixture
def empty_template():
    """Disk far outside the grid; renders to exactly zero flux."""
    return GaussDisk.from_physical(0.1, 0.01, 100.0, 100.0)


class TestDivergenceBinding:
    """Tests for binding a divergence to its target image."""

    @pytest.mark.parametrize("cls", [LeastSquares, Bhattacharyya, KullbackLeibler, Renyi])
    def test_rejects_non_2d_image(self, cls, grid):
        with pytest.raises(ValueError, match="2D"):
            cls(np.ones((48, 48, 3)), grid)

    @pytest.mark.parametrize("cls", [LeastSquares, Bhattacharyya, KullbackLeibler, Renyi])
    def test_rejects_grid_mismatch(self, cls, grid):
        with pytest.raises(ValueError, match="does not match"):
            cls(np.ones((48, 40)), grid)

    def test_stores_float_image(self, grid):
        div = LeastSquares(np.ones(grid.shape, dtype=int), grid)
        assert div.image.dtype == float
        assert div.grid is grid

    def test_base_is_abstract(self, grid, flat_image):
        with pytest.raises(TypeError):
            Divergence(flat_image, grid)

    def test_custom_subclass(self, grid, flat_image):
        class MaxAbs(Divergence):
            def compare(self, rendered):
                return float(np.max(np.abs(rendered - self.image)))

        assert MaxAbs(flat_image, grid)(Constant(2.0)) == pytest.approx(0.75)

    def test_registry(self):
        assert DIVERGENCES == {
            'least_squares': LeastSquares,
            'bhattacharyya': Bhattacharyya,
            'kl': KullbackLeibler,
            'renyi': Renyi,
        }


class TestLeastSquares:
    """Tests for the raw-intensity divergence."""

    def test_zero_at_exact_match(self, grid, flat_image):
        assert LeastSquares(flat_image, grid)(Constant(1.0)) == 0.0

    def test_sensitive_to_amplitude(self, grid, flat_image):
        # Constant(2.0) renders 0.25 everywhere
        assert LeastSquares(flat_image, grid)(Constant(2.0)) == pytest.approx(0.5625)

    def test_minimum_at_true_parameter(self, grid, disk_image, disk_alpha):
        div = LeastSquares(disk_image, grid)
        best = div(GaussDisk(disk_alpha))
        assert best == 0.0
        assert div(GaussDisk(disk_alpha - 0.1)) > best
        assert div(GaussDisk(disk_alpha + 0.1)) > best

    def test_zero_flux_template_is_finite(self, grid, flat_image, empty_template):
        assert LeastSquares(flat_image, grid)(empty_template) == pytest.approx(1.0)


class TestNormalizedDivergences:
    """Shared behaviour of the flux-normalized divergences."""

    @pytest.mark.parametrize("cls", [Bhattacharyya, KullbackLeibler, Renyi])
    def test_zero_at_exact_match(self, cls, grid, disk_image, disk_alpha):
        assert cls(disk_image, grid)(GaussDisk(disk_alpha)) == pytest.approx(0.0, abs=1e-10)

    @pytest.mark.parametrize("cls", [Bhattacharyya, KullbackLeibler, Renyi])
    def test_positive_for_mismatch(self, cls, grid, disk_image):
        assert cls(disk_image, grid)(GaussDisk(0.05)) > 1e-4

    @pytest.mark.parametrize("cls", [Bhattacharyya, KullbackLeibler, Renyi])
    def test_invariant_to_flux_scale(self, cls, grid, flat_image):
        div = cls(flat_image, grid)
        assert div(Constant(5.0)) == pytest.approx(0.0, abs=1e-10)
        assert div(Constant(0.2)) == pytest.approx(0.0, abs=1e-10)

    @pytest.mark.parametrize("cls", [Bhattacharyya, KullbackLeibler, Renyi])
    def test_zero_flux_template_scores_inf(self, cls, grid, flat_image, empty_template):
        assert cls(flat_image, grid)(empty_template) == math.inf

    @pytest.mark.parametrize("cls", [Bhattacharyya, KullbackLeibler, Renyi])
    def test_rejects_empty_target(self, cls, grid):
        with pytest.raises(ValueError, match="no positive flux"):
            cls(np.zeros(grid.shape), grid)

    def test_negative_pixels_are_clipped(self, grid, disk_image, disk_alpha):
        noisy = disk_image.copy()
        noisy[0, 0] = -5.0
        div = Bhattacharyya(noisy, grid)
        assert np.all(div.target >= 0.0)
        assert div.target.sum() == pytest.approx(1.0)


class TestRenyi:
    """Tests for the Renyi divergence."""

    @pytest.mark.parametrize("alpha", [0.0, -0.5, 1.0])
    def test_invalid_order(self, alpha, grid, flat_image):
        with pytest.raises(ValueError, match="Renyi order"):
            Renyi(flat_image, grid, alpha=alpha)

    def test_default_order(self, grid, flat_image):
        assert Renyi(flat_image, grid).alpha == 0.75

    def test_half_order_is_twice_bhattacharyya(self, grid, disk_image):
        model = GaussDisk(0.25)
        renyi = Renyi(disk_image, grid, alpha=0.5)(model)
        bhatt = Bhattacharyya(disk_image, grid)(model)
        assert renyi == pytest.approx(2.0 * bhatt, rel=1e-6)

    def test_tends_to_kl(self, grid, disk_image):
        model = GaussDisk(0.25)
        renyi = Renyi(disk_image, grid, alpha=0.999)(model)
        kl = KullbackLeibler(disk_image, grid)(model)
        assert renyi == pytest.approx(kl, rel=0.05)

    def test_small_grid(self):
        g = ImageGrid(2.0, 2.0, 2, 2)
        image = np.array([[1.0, 1.0], [1.0, 1.0]])
        assert Renyi(image, g, alpha=2.0)(Constant(1.0)) == pytest.approx(0.0, abs=1e-12)
