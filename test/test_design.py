import numpy as np
import pytest
from pysica.design import (
    ar1_covariance,
    simulate_design,
    simulate_sparse_regression,
)


def test_ar1_covariance():
    """Test the AR(1) covariance entries rho^|i - j|."""
    Sigma = ar1_covariance(4, 0.5)
    assert Sigma.shape == (4, 4)
    np.testing.assert_allclose(np.diag(Sigma), np.ones(4))
    assert np.isclose(Sigma[0, 3], 0.125)
    np.testing.assert_allclose(Sigma, Sigma.T)


def test_ar1_covariance_independent():
    np.testing.assert_array_equal(ar1_covariance(3), np.eye(3))


@pytest.mark.parametrize("p, rho", [(0, 0.5), (3, 1.0), (3, -0.1)])
def test_ar1_covariance_invalid(p, rho):
    with pytest.raises(ValueError):
        ar1_covariance(p, rho)


def test_simulate_design_covariance():
    """Test that the empirical covariance matches the AR(1) design."""
    rng = np.random.default_rng(0)
    X = simulate_design(20000, 3, rho=0.5, rng=rng)
    assert X.shape == (20000, 3)
    np.testing.assert_allclose(np.cov(X, rowvar=False), ar1_covariance(3, 0.5), atol=0.05)


def test_simulate_sparse_regression():
    X, y, beta = simulate_sparse_regression(50, 10, [1, 4], [2.0, -1.0], seed=1)
    assert X.shape == (50, 10)
    assert y.shape == (50,)
    np.testing.assert_array_equal(np.flatnonzero(beta), [1, 4])
    assert beta[4] == -1.0


def test_simulate_sparse_regression_reproducible():
    first = simulate_sparse_regression(30, 5, [0], [1.0], seed=11)
    second = simulate_sparse_regression(30, 5, [0], [1.0], seed=11)
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)


def test_simulate_sparse_regression_noiseless():
    X, y, beta = simulate_sparse_regression(30, 5, [2], [1.5], sigma=0.0, seed=2)
    np.testing.assert_allclose(y, X @ beta)


def test_simulate_sparse_regression_invalid():
    with pytest.raises(ValueError):
        simulate_sparse_regression(30, 5, [0, 1], [1.0])
    with pytest.raises(ValueError):
        simulate_sparse_regression(30, 5, [7], [1.0])
    with pytest.raises(ValueError):
        simulate_sparse_regression(30, 5, [0], [1.0], sigma=-1.0)


if __name__ == "__main__":
    pytest.main()
