"""
Simulation Design Module
========================

Utilities to simulate sparse linear regression problems for testing and
benchmarking the SICA solvers.

1. ar1_covariance: AR(1) covariance matrix with entries rho^|i - j|.
2. simulate_design: Gaussian design matrix with a given covariance.
3. simulate_sparse_regression: design, sparse coefficient vector and response.
"""

from typing import Optional, Sequence

import numpy as np
from scipy.linalg import LinAlgError, cholesky, toeplitz


def ar1_covariance(p: int, rho: float = 0.0) -> np.ndarray:
    """
    Constructs the AR(1) covariance matrix Σ with Σ_{i,j} = ρ^{|i - j|}.

    Parameters:
        p (int): Number of features.
        rho (float, default=0.0): Correlation between adjacent features, in [0, 1).

    Returns:
        np.ndarray: The p × p covariance matrix.

    Raises:
        ValueError: If p is not positive or rho is outside [0, 1).
    """
    if not isinstance(p, (int, np.integer)) or p <= 0:
        raise ValueError("'p' must be a positive integer.")
    if not (0 <= rho < 1):
        raise ValueError("'rho' must be in the interval [0, 1).")
    return toeplitz(rho ** np.arange(p))


def simulate_design(
    n: int, p: int, rho: float = 0.0, rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    Simulates an n × p Gaussian design matrix with AR(1) covariance.

    The rows are computed as X = Z L^T, where Σ = L L^T is the Cholesky
    decomposition of the AR(1) covariance and Z has independent standard
    normal entries.

    Parameters:
        n (int): Number of samples.
        p (int): Number of features.
        rho (float, default=0.0): AR(1) correlation; 0 gives independent columns.
        rng (np.random.Generator, optional): Random number generator.

    Returns:
        np.ndarray: The simulated design matrix.
    """
    if not isinstance(n, (int, np.integer)) or n <= 0:
        raise ValueError("'n' must be a positive integer.")
    if rng is None:
        rng = np.random.default_rng()

    Sigma = ar1_covariance(p, rho)
    try:
        L = cholesky(Sigma, lower=True)
    except LinAlgError:
        raise ValueError("Sigma is not positive definite; Cholesky decomposition failed.")

    Z = rng.standard_normal((n, p))
    return Z @ L.T


def simulate_sparse_regression(
    n: int,
    p: int,
    support: Sequence[int],
    coefficients: Sequence[float],
    rho: float = 0.0,
    sigma: float = 1.0,
    seed: Optional[int] = None,
):
    """
    Simulates y = X β* + ε with a sparse β*.

    Parameters:
        n (int): Number of samples.
        p (int): Number of features.
        support (Sequence[int]): Indices of the nonzero entries of β*.
        coefficients (Sequence[float]): Values of the nonzero entries of β*.
        rho (float, default=0.0): AR(1) correlation between features.
        sigma (float, default=1.0): Noise standard deviation.
        seed (int, optional): Seed of the random number generator.

    Returns:
        tuple: (X, y, beta_true).

    Example:
        >>> X, y, beta = simulate_sparse_regression(100, 20, [0, 5], [2.0, -1.0])
    """
    support = np.asarray(support, dtype=int)
    coefficients = np.asarray(coefficients, dtype=float)
    if support.shape != coefficients.shape:
        raise ValueError("'support' and 'coefficients' must have the same length.")
    if np.any((support < 0) | (support >= p)):
        raise ValueError(f"'support' indices must lie in [0, {p}).")
    if sigma < 0:
        raise ValueError("'sigma' must be non-negative.")

    rng = np.random.default_rng(seed)
    X = simulate_design(n, p, rho, rng)
    beta_true = np.zeros(p)
    beta_true[support] = coefficients
    y = X @ beta_true + sigma * rng.standard_normal(n)
    return X, y, beta_true
