"""Compute the maximum lambda value for SICA regularization."""

import numpy as np

from .coordinate_descent import gram_and_correlation, rescale_columns
from .multiscale import stabilization_schedule
from .scalar_sica import sica_threshold
from .sica import A_FLOOR, check_arrays


def lambda_max_sica(
    X: np.ndarray,
    y: np.ndarray,
    a: float = 1e-3,
    rel_tol: float = 1e-8,
    max_iterations: int = 200,
) -> float:
    r"""Compute the maximal lambda for SICA regression.

    The maximal lambda is the smallest value for which a solve started from
    zero returns all coefficients equal to zero.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        Design matrix :math:`\mathbf{X}`.
    y : array-like of shape (n_samples,)
        Target vector :math:`\mathbf{y}`.
    a : float, default=1e-3
        SICA shape parameter, clamped to ``1e-3`` from below.
    rel_tol : float, default=1e-8
        Relative width of the final bisection interval.
    max_iterations : int, default=200
        Maximum number of bisection steps.

    Returns
    -------
    float
        The maximal lambda value, :math:`\lambda_{\text{max}}`.

    Raises
    ------
    InvalidInputError
        If `X` and `y` have incompatible shapes, are empty, or contain NaN or
        infinite values.

    Notes
    -----
    With :math:`z_{\max} = \max_j |c_j|`, where :math:`\mathbf{c}` is the
    correlation vector of the rescaled design, and the scalar rule
    :math:`S_a(z, \lambda)` being monotone in :math:`z`, every coordinate stays
    at zero iff :math:`S_{a_s}(z_{\max}, \lambda) = 0` for the target
    :math:`a` and every stabilization rung :math:`a_s` run at
    :math:`\lambda`. The upper border is doubled until this holds, then the
    interval is bisected. A numeric correction factor is applied as in the
    Lasso case.
    """
    X, y = check_arrays(np.asarray(X, dtype=float), np.asarray(y, dtype=float))

    a0 = max(A_FLOOR, a)
    X_scaled, _ = rescale_columns(X)
    _, corr = gram_and_correlation(X_scaled, y)
    z_max = float(np.max(np.abs(corr)))
    if z_max == 0:
        return 0.0

    def all_zero(lam):
        shapes = stabilization_schedule(a0, lam) + [a0]
        return all(sica_threshold(z_max, a_s, lam) == 0 for a_s in shapes)

    left_border = 0.0
    right_border = z_max
    while not all_zero(right_border):
        left_border = right_border
        right_border *= 2.0

    for _ in range(max_iterations):
        if right_border - left_border <= rel_tol * right_border:
            break
        mid_point = 0.5 * (left_border + right_border)
        if all_zero(mid_point):
            right_border = mid_point
        else:
            left_border = mid_point

    return right_border * 1.00001
