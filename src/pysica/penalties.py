"""Penalty functions and thresholding operators used by the SICA solvers."""

import numpy as np


def sica_penalty(t, a: float):
    r"""Evaluate the SICA penalty :math:`\rho_a(t) = (a + 1) t / (a + t)`.

    Parameters
    ----------
    t : float or ndarray
        Non-negative argument, usually :math:`|\beta_j|`.
    a : float
        Shape parameter, :math:`a > 0`. Small values approach the
        :math:`L_0` penalty, large values the :math:`L_1` penalty.

    Returns
    -------
    float or ndarray
        Penalty value(s), same shape as `t`.
    """
    t = np.abs(t)
    return (a + 1.0) * t / (a + t)


def hard_threshold_penalty(t, s: float):
    r"""Hard-thresholding penalty :math:`\frac{1}{2}(s^2 - (s - t)_+^2)`.

    Used as the penalty surrogate when the scalar SICA rule compares the
    interior critical point against the zero solution.
    """
    return 0.5 * (s**2 - np.maximum(0.0, s - t) ** 2)


def soft_threshold(z, lam: float):
    """Soft-thresholding operator ``sign(z) * max(|z| - lam, 0)``."""
    return np.sign(z) * np.maximum(np.abs(z) - lam, 0.0)


def sica_objective(
    X: np.ndarray, y: np.ndarray, beta: np.ndarray, a: float, lam: float
) -> float:
    r"""Compute the SICA-penalized least-squares objective.

    .. math::
        \frac{1}{2n} \| \mathbf{y} - \mathbf{X} \boldsymbol{\beta} \|_2^2
        + \lambda \sum_j \rho_a(|\beta_j|)

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Design matrix.
    y : ndarray of shape (n_samples,)
        Response vector.
    beta : ndarray of shape (n_features,)
        Coefficient vector.
    a : float
        SICA shape parameter.
    lam : float
        Regularization parameter.

    Returns
    -------
    float
        Objective value.
    """
    n = X.shape[0]
    residual = y - X @ beta
    return float(0.5 * residual @ residual / n + lam * np.sum(sica_penalty(beta, a)))
