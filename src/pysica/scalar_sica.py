"""Exact scalar minimizer of the SICA-penalized quadratic."""

import numpy as np

from .penalties import hard_threshold_penalty

# Beyond this shape parameter the penalty is treated as the L1 penalty
L1_LIMIT = 1e3
# Margin required for the interior root to beat the zero solution
COMPARISON_TOL = 1e-8
# Roots at most this fraction of |z| + a are rounding noise around zero
ROOT_TOL = 1e-12


def sica_threshold(z: float, a: float, lam: float) -> float:
    r"""Solve the univariate SICA-penalized least-squares problem.

    Returns the global minimizer of

    .. math::
        f(\beta) = \frac{1}{2} (\beta - z)^2 + \lambda \rho_a(|\beta|),
        \qquad \rho_a(t) = \frac{(a + 1) t}{a + t}.

    Parameters
    ----------
    z : float
        Partial residual correlation, :math:`z`.
    a : float
        SICA shape parameter, :math:`a > 0`. Callers clamp it to a positive
        floor before calling.
    lam : float
        Regularization parameter, :math:`\lambda \geq 0`.

    Returns
    -------
    float
        The minimizer :math:`\beta^*`. It is zero or has the sign of `z`, and
        :math:`|\beta^*| \leq |z|`.

    Notes
    -----
    For :math:`t = |\beta| > 0` the stationarity condition is the monic cubic

    .. math::
        t^3 + b t^2 + c t + d = 0

    with :math:`b = 2a - |z|`, :math:`c = a^2 - 2a|z|` and
    :math:`d = \lambda a (a + 1) - a^2 |z|`, i.e.
    :math:`(a + t)^2 (t - |z|) + \lambda a (a + 1) = 0`. Its largest real root
    is the interior local minimizer.

    Above :math:`z_0 = \lambda (1 + 1/a)` the cubic is non-positive at
    :math:`t = 0` and always has three real roots, so the largest root is the
    global minimizer. A largest root that is rounding noise around zero, as at
    :math:`|z| = z_0` for larger :math:`a`, is returned as exactly zero.
    Below :math:`z_0` the zero solution is a local minimum too and the two are
    compared, using the hard-thresholding penalty as the surrogate for the
    interior objective. When the discriminant :math:`D = q^3 + r^2` is
    positive there is no interior minimizer and zero is returned.

    For :math:`a > 10^3` the penalty is numerically the :math:`L_1` penalty
    and the soft-threshold rule is used.
    """
    abs_z = abs(z)
    sign_z = np.sign(z)

    if a > L1_LIMIT:
        return float(sign_z * max(0.0, abs_z - lam))

    b = 2.0 * a - abs_z
    c = a**2 - 2.0 * a * abs_z
    d = lam * a * (a + 1.0) - a**2 * abs_z
    z0 = lam * (1.0 + 1.0 / a)

    if abs_z >= z0:
        t_hat = np.sort(np.roots([1.0, b, c, d]).real)[-1]
        if t_hat <= ROOT_TOL * (abs_z + a):
            return 0.0
        return float(sign_z * t_hat)

    q = (3.0 * c - b**2) / 9.0
    r = (9.0 * b * c - 27.0 * d - 2.0 * b**3) / 54.0
    D = q**3 + r**2
    if D > 0:
        return 0.0

    roots = np.sort(np.roots([1.0, b, c, d]).real)
    t_mid, t_hat = roots[1], roots[2]
    feasible = (t_mid >= 0) and (t_hat <= abs_z) and (t_mid < t_hat)
    if feasible:
        zero_value = 0.5 * z**2
        interior_value = 0.5 * (abs_z - t_hat) ** 2 + lam * hard_threshold_penalty(
            t_hat, a
        )
        if zero_value > interior_value + COMPARISON_TOL:
            return float(sign_z * t_hat)
    return 0.0


def sica_threshold_vec(z, a: float, lam: float) -> np.ndarray:
    """Apply :func:`sica_threshold` elementwise to an array of correlations."""
    z = np.asarray(z, dtype=float)
    out = np.array([sica_threshold(zi, a, lam) for zi in z.ravel()])
    return out.reshape(z.shape)
