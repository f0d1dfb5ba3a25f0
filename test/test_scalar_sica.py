import numpy as np
import pytest
from pysica.penalties import soft_threshold
from pysica.scalar_sica import sica_threshold, sica_threshold_vec

Z_GRID = np.linspace(-3, 3, 121)


@pytest.mark.parametrize("a", [1e-3, 0.1, 1.0, 10.0])
@pytest.mark.parametrize("lam", [0.0, 0.1, 1.0])
def test_sica_threshold_zero_input(a, lam):
    """Test that a zero correlation always gives a zero coefficient."""
    assert sica_threshold(0.0, a, lam) == 0.0


@pytest.mark.parametrize("a", [1e-3, 0.01, 0.1, 0.5, 1.0, 5.0])
@pytest.mark.parametrize("lam", [0.0, 0.05, 0.3, 1.0])
def test_sica_threshold_sign_and_shrinkage(a, lam):
    """Test that the solution keeps the sign of z and shrinks towards zero."""
    for z in Z_GRID:
        beta = sica_threshold(z, a, lam)
        assert beta * z >= 0
        assert abs(beta) <= abs(z) + 1e-10


@pytest.mark.parametrize("a", [0.1, 0.5, 1.0])
@pytest.mark.parametrize("lam", [0.1, 0.5])
def test_sica_threshold_monotone(a, lam):
    """Test that the solution is non-decreasing in z."""
    betas = sica_threshold_vec(Z_GRID, a, lam)
    assert np.all(np.diff(betas) >= -1e-10)


def test_sica_threshold_odd():
    for z in [0.3, 0.9, 2.5]:
        assert sica_threshold(-z, 0.2, 0.3) == -sica_threshold(z, 0.2, 0.3)


def test_sica_threshold_l1_limit():
    """Test that a very large shape parameter gives soft thresholding."""
    lam = 0.5
    betas = sica_threshold_vec(Z_GRID, 1e6, lam)
    np.testing.assert_allclose(betas, soft_threshold(Z_GRID, lam), atol=1e-6)


def test_sica_threshold_near_l1_limit():
    """Test that the cubic solution is close to soft thresholding for large a."""
    lam = 0.5
    betas = sica_threshold_vec(Z_GRID, 500.0, lam)
    np.testing.assert_allclose(betas, soft_threshold(Z_GRID, lam), atol=2e-2)


@pytest.mark.parametrize("a", [1e-3, 0.1, 1.0])
def test_sica_threshold_zero_lambda(a):
    """Test that no penalty returns z unchanged."""
    for z in [-2.0, 0.5, 3.0]:
        assert np.isclose(sica_threshold(z, a, 0.0), z, atol=1e-8)


def test_sica_threshold_stationarity_above_z0():
    """Test that the interior solution solves the stationarity equation."""
    a, lam = 0.5, 0.2
    z0 = lam * (1 + 1 / a)
    for z in np.linspace(z0, 3.0, 20):
        t = sica_threshold(z, a, lam)
        residual = t - z + lam * (a + 1) * a / (a + t) ** 2
        assert t > 0
        assert abs(residual) < 1e-8


@pytest.mark.parametrize("a", [10.0, 100.0])
@pytest.mark.parametrize("lam", [0.05, 0.1, 0.3])
def test_sica_threshold_exactly_zero_at_z0(a, lam):
    """Test that the boundary z0 gives an exact zero with no root-finder residue."""
    z0 = lam * (1.0 + 1.0 / a)
    assert sica_threshold(z0, a, lam) == 0.0
    assert sica_threshold(-z0, a, lam) == 0.0
    assert sica_threshold(1.5 * z0, a, lam) > 0.0


def test_sica_threshold_small_z_is_zero():
    """Test that a correlation without an interior minimizer gives zero."""
    assert sica_threshold(0.2, 0.1, 0.5) == 0.0
    assert sica_threshold(-0.1, 1e-3, 0.5) == 0.0


def test_sica_threshold_interior_below_z0():
    """Test that the interior root wins the comparison below z0."""
    beta = sica_threshold(0.8, 0.1, 0.1)
    assert 0.78 < beta < 0.8


def test_sica_threshold_nearly_unbiased_for_small_a():
    """Test that a small shape parameter barely shrinks large signals."""
    assert abs(sica_threshold(2.0, 1e-3, 0.5) - 2.0) < 1e-3


def test_sica_threshold_vec_shape():
    z = np.arange(6, dtype=float).reshape(2, 3) - 2.5
    out = sica_threshold_vec(z, 0.1, 0.1)
    assert out.shape == (2, 3)
    assert out[0, 0] == sica_threshold(-2.5, 0.1, 0.1)


if __name__ == "__main__":
    pytest.main()
