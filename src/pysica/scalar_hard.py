"""Two-threshold hard-thresholding rule for a single coefficient."""

import numpy as np

from .penalties import hard_threshold_penalty


def hard_threshold_update(z: float, Lam: float, lambda0: float, lam: float) -> float:
    r"""Legacy scalar update combining soft and hard thresholding.

    The input is first soft-thresholded at :math:`\Lambda \lambda_0`. With
    :math:`\Lambda = 1` the result is hard-thresholded at :math:`\lambda`.
    Otherwise the rescaled soft-threshold solution

    .. math::
        z_0 = \frac{\operatorname{sign}(z) (|z| - \Lambda \lambda)_+}{1 - \Lambda}

    is returned when :math:`|z| \leq \lambda`, or when it attains a lower
    hard-thresholding objective than keeping :math:`z` unchanged.

    Parameters
    ----------
    z : float
        Partial residual correlation.
    Lam : float
        Step scaling, :math:`\Lambda \in (0, 1]`.
    lambda0 : float
        Soft-thresholding level, :math:`\lambda_0 \geq 0`.
    lam : float
        Hard-thresholding level, :math:`\lambda \geq 0`.

    Returns
    -------
    float
        Updated coefficient.

    Raises
    ------
    ValueError
        If `Lam` is not in :math:`(0, 1]`.
    """
    if not (0 < Lam <= 1):
        raise ValueError("Lam must be in the interval (0, 1].")

    z = np.sign(z) * max(0.0, abs(z) - Lam * lambda0)
    if Lam == 1:
        return float(z * (abs(z) > lam))

    z0 = np.sign(z) * max(0.0, abs(z) - Lam * lam) / (1.0 - Lam)
    if abs(z) <= lam:
        return float(z0)
    keep_z0 = (z - z0) ** 2 / 2 + Lam * hard_threshold_penalty(
        abs(z0), lam
    ) <= Lam * hard_threshold_penalty(abs(z), lam)
    if abs(z) <= Lam * lam and keep_z0:
        return float(z0)
    return float(z)
