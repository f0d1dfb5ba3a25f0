"""Active-set coordinate descent for SICA-penalized least squares."""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .scalar_sica import sica_threshold

logger = logging.getLogger(__name__)


def rescale_columns(X: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    r"""Rescale every column of `X` to Euclidean norm :math:`\sqrt{n}`.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Design matrix. It is not modified.

    Returns
    -------
    X_scaled : ndarray of shape (n_samples, n_features)
        Rescaled copy of `X`.
    scale : ndarray of shape (n_features,)
        Per-column factors :math:`\|X_j\|_2 / \sqrt{n}`, so that
        ``X_scaled = X / scale``. All-zero columns keep a factor of one.
    """
    n = X.shape[0]
    scale = np.sqrt(np.sum(X**2, axis=0)) / np.sqrt(n)
    zero_columns = scale == 0
    if np.any(zero_columns):
        logger.warning(
            f"Columns {np.flatnonzero(zero_columns)} are identically zero and "
            "cannot be rescaled."
        )
        scale = np.where(zero_columns, 1.0, scale)
    return X / scale, scale


def gram_and_correlation(
    X_scaled: np.ndarray, y: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """Return the Gram matrix ``X'X / n`` and correlation vector ``X'y / n``."""
    n = X_scaled.shape[0]
    return X_scaled.T @ X_scaled / n, X_scaled.T @ y / n


def ordered_union(*index_groups) -> np.ndarray:
    """Merge index arrays, keeping the first occurrence of every index."""
    merged = []
    for group in index_groups:
        merged.extend(int(i) for i in np.atleast_1d(group))
    return np.fromiter(dict.fromkeys(merged), dtype=int)


def kkt_violations(
    gram: np.ndarray, corr: np.ndarray, beta: np.ndarray, a: float, lam: float
) -> np.ndarray:
    r"""Find zero coordinates violating the optimality condition at zero.

    A zero coordinate :math:`j` is a candidate for inclusion when

    .. math::
        \left| c_j - \sum_{k: \beta_k \neq 0} G_{jk} \beta_k \right|
        > \lambda (1 + 1/a).

    Returns
    -------
    ndarray of int
        Indices of the violating coordinates, in increasing order.
    """
    nonzero = np.flatnonzero(beta)
    zero = np.flatnonzero(beta == 0)
    if zero.size == 0:
        return zero
    residual_corr = corr[zero] - gram[np.ix_(zero, nonzero)] @ beta[nonzero]
    return zero[np.abs(residual_corr) > lam * (1.0 + 1.0 / a)]


def update_active_set(
    gram: np.ndarray,
    corr: np.ndarray,
    beta: np.ndarray,
    a: float,
    lam: float,
    varset: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Active set for the next pass: KKT violators, nonzero indices, `varset`."""
    if varset is None:
        varset = np.array([], dtype=int)
    violators = kkt_violations(gram, corr, beta, a, lam)
    return ordered_union(violators, np.flatnonzero(beta), varset)


def coordinate_pass(
    gram: np.ndarray,
    corr: np.ndarray,
    beta: np.ndarray,
    active: np.ndarray,
    a: float,
    lam: float,
) -> np.ndarray:
    """Update every coordinate of `active` once, in order, in place.

    Each update sees the coordinates already refreshed in the same pass.
    Coordinates outside `active` are left untouched.
    """
    for k, i in enumerate(active):
        others = np.delete(active, k)
        z = corr[i] - gram[i, others] @ beta[others]
        beta[i] = sica_threshold(z, a, lam)
    return beta


def run_stage(
    gram: np.ndarray,
    corr: np.ndarray,
    beta_init: np.ndarray,
    a: float,
    lam: float,
    active: Optional[np.ndarray] = None,
    varset: Optional[np.ndarray] = None,
    max_iter: int = 50,
    tol: float = 1e-4,
) -> Tuple[np.ndarray, np.ndarray, List[float]]:
    r"""Run coordinate-descent passes at a fixed SICA shape parameter.

    Parameters
    ----------
    gram : ndarray of shape (n_features, n_features)
        Gram matrix :math:`\mathbf{G} = \mathbf{X}^T \mathbf{X} / n` of the
        rescaled design.
    corr : ndarray of shape (n_features,)
        Correlation vector :math:`\mathbf{c} = \mathbf{X}^T \mathbf{y} / n`.
    beta_init : ndarray of shape (n_features,)
        Starting coefficients. Not modified.
    a : float
        SICA shape parameter used throughout the stage.
    lam : float
        Regularization parameter, :math:`\lambda`.
    active : ndarray of int, optional
        Coordinates updated in the first pass. Defaults to all coordinates.
    varset : ndarray of int, optional
        Coordinates forced into every subsequent active set.
    max_iter : int, default=50
        Maximum number of passes.
    tol : float, default=1e-4
        The stage stops once the Euclidean norm of the change in
        :math:`\boldsymbol{\beta}` over a pass is at most `tol`.

    Returns
    -------
    beta : ndarray of shape (n_features,)
        Final coefficients.
    active : ndarray of int
        Active set the next pass would use.
    steps : list of float
        Step size of every pass. The stage converged if the last entry is at
        most `tol`.
    """
    p = gram.shape[0]
    beta = np.array(beta_init, dtype=float)
    active = np.arange(p) if active is None else np.asarray(active, dtype=int)
    steps = []

    for _ in range(max_iter):
        beta_old = beta.copy()
        coordinate_pass(gram, corr, beta, active, a, lam)
        active = update_active_set(gram, corr, beta, a, lam, varset)
        step = float(np.linalg.norm(beta - beta_old))
        steps.append(step)
        if step <= tol:
            break

    if steps and steps[-1] > tol:
        logger.debug(
            f"Stage at a={a:.4g} stopped after {max_iter} passes with step "
            f"{steps[-1]:.3e} > tol={tol:.1e}."
        )
    return beta, active, steps
