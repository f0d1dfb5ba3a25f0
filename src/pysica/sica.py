"""SICA-penalized least squares with multi-scale stabilization."""

import logging
import warnings
from typing import Optional, Sequence, Union

import numpy as np

from .coordinate_descent import gram_and_correlation, ordered_union, rescale_columns
from .multiscale import multiscale_stabilization
from .penalties import sica_objective

# Set up logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

A_FLOOR = 1e-3
NONSPARSE_RATIO = 0.5


class SICAError(Exception):
    """Base exception class for SICA-related errors."""

    pass


class InvalidInputError(SICAError):
    """Exception raised for invalid input to the SICA solvers."""

    pass


class NonSparseSolutionWarning(UserWarning):
    """Warning issued when the fitted model selects more than n/2 variables."""

    pass


def sica(
    X: np.ndarray,
    y: np.ndarray,
    a: float = 1e-3,
    lam: float = 1e-2,
    initial_active: Optional[Sequence[int]] = None,
    initial_beta: Optional[np.ndarray] = None,
    max_iter: int = 50,
    tol: float = 1e-4,
    return_info: bool = False,
) -> Union[np.ndarray, tuple]:
    r"""Compute a minimizer of the SICA-penalized least-squares problem.

    Solves

    .. math::
        \min_{\boldsymbol{\beta}} \frac{1}{2n}
        \| \mathbf{y} - \mathbf{X} \boldsymbol{\beta} \|_2^2
        + \lambda \sum_{j} \rho_a(|\beta_j|),
        \qquad \rho_a(t) = \frac{(a + 1) t}{a + t},

    by coordinate descent on a copy of :math:`\mathbf{X}` whose columns have
    :math:`L_2`-norm :math:`\sqrt{n}`. The smooth integration of counting and
    absolute deviation (SICA) penalty connects the :math:`L_0` penalty
    (:math:`a \to 0`) and the :math:`L_1` penalty (:math:`a \to \infty`).

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Design matrix, :math:`\mathbf{X}`.
    y : ndarray of shape (n_samples,)
        Response vector, :math:`\mathbf{y}`.
    a : float, default=1e-3
        SICA shape parameter. Values below ``1e-3`` are clamped to ``1e-3``.
    lam : float, default=1e-2
        Regularization parameter, :math:`\lambda \geq 0`.
    initial_active : sequence of int, optional
        Zero-based indices of variables believed to be important. They are
        updated in every pass of every stage.
    initial_beta : ndarray of shape (n_features,), optional
        Starting coefficients on the scale of `X`. Its nonzero positions are
        added to the important variables. Defaults to zeros.
    max_iter : int, default=50
        Maximum number of coordinate-descent passes per stage.
    tol : float, default=1e-4
        Step-size tolerance of each stage.
    return_info : bool, default=False
        If True, also return a dictionary of diagnostics.

    Returns
    -------
    beta : ndarray of shape (n_features,)
        Estimated coefficients on the scale of `X`.
    info : dict
        Only if `return_info` is True. Keys:

        - `'a'`: clamped target shape parameter
        - `'lambda'`: regularization parameter
        - `'scale'`: per-column rescaling factors
        - `'stages'`: per-stage records (``'a'``, ``'iterations'``,
          ``'steps'``, ``'converged'``)
        - `'varset'`: important variables after stabilization
        - `'df'`: number of nonzero coefficients
        - `'objective'`: objective value on the rescaled problem

    Raises
    ------
    InvalidInputError
        If the inputs have incompatible shapes, contain NaN or infinite
        values, or any parameter is out of range.

    Warns
    -----
    NonSparseSolutionWarning
        If more than ``n / 2`` coefficients are nonzero. The solution is
        likely inaccurate and a larger `lam` should be tried.

    Notes
    -----
    Concave penalties make coordinate descent prone to poor local optima.
    The solver therefore first runs stages with the less concave shape
    parameters :math:`a = 1, 1/3, 0.1` (multi-scale stabilization), each seeded
    with the previous stage's solution, before the final stage at `a`.

    References
    ----------
    Fan, J. and Lv, J. (2011). Nonconcave penalized likelihood with
    NP-dimensionality. IEEE Transactions on Information Theory 57, 5467-5484.

    Lv, J. and Fan, Y. (2009). A unified approach to model selection and sparse
    recovery using regularized least squares. The Annals of Statistics 37,
    3498-3528.
    """
    X, y = _check_inputs(X, y, lam, max_iter)
    n, p = X.shape
    a0 = max(A_FLOOR, a)

    X_scaled, scale = rescale_columns(X)
    gram, corr = gram_and_correlation(X_scaled, y)

    varset = _check_indices(initial_active, p)
    if initial_beta is None:
        beta_init = np.zeros(p)
    else:
        initial_beta = np.asarray(initial_beta, dtype=float)
        if initial_beta.shape != (p,):
            raise InvalidInputError(
                f"initial_beta must have shape ({p},), got {initial_beta.shape}."
            )
        beta_init = initial_beta * scale
        varset = ordered_union(varset, np.flatnonzero(beta_init))

    beta_scaled, varset, stages = multiscale_stabilization(
        gram, corr, a0, lam, beta_init, varset=varset, max_iter=max_iter, tol=tol
    )
    beta = beta_scaled / scale

    df = int(np.count_nonzero(beta))
    if df > NONSPARSE_RATIO * n:
        message = (
            f"The solution found is nonsparse ({df} nonzero coefficients for "
            f"n={n}) and may be inaccurate. Try a larger lambda!"
        )
        logger.warning(message)
        warnings.warn(message, NonSparseSolutionWarning)

    if not return_info:
        return beta
    info = {
        "a": a0,
        "lambda": lam,
        "scale": scale,
        "stages": stages,
        "varset": varset,
        "df": df,
        "objective": sica_objective(X_scaled, y, beta_scaled, a0, lam),
    }
    return beta, info


def check_arrays(X, y):
    """Validate a design matrix and response vector, returning float copies.

    Raises
    ------
    InvalidInputError
        If `X` is not a non-empty 2D array, `y` is not a 1D array of matching
        length, or either contains NaN or infinite values.
    """
    if not isinstance(X, np.ndarray) or not isinstance(y, np.ndarray):
        raise InvalidInputError("X and y must be numpy arrays.")
    if X.ndim != 2:
        raise InvalidInputError("X must be a 2D array.")
    if y.ndim != 1:
        raise InvalidInputError("y must be a 1D array.")
    if X.size == 0:
        raise InvalidInputError("X must not be empty.")
    if X.shape[0] != y.shape[0]:
        raise InvalidInputError(
            f"Incompatible shapes: X has {X.shape[0]} rows, y has {y.shape[0]} "
            "entries."
        )
    if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
        raise InvalidInputError("X and y must not contain NaN or infinite values.")
    return X.astype(float), y.astype(float)


def _check_inputs(X, y, lam: float, max_iter: int):
    X, y = check_arrays(X, y)
    if lam < 0:
        raise InvalidInputError("lam must be non-negative.")
    if max_iter < 0:
        raise InvalidInputError("max_iter must be non-negative.")
    return X, y


def _check_indices(indices, p: int) -> np.ndarray:
    if indices is None:
        return np.array([], dtype=int)
    indices = np.atleast_1d(np.asarray(indices, dtype=int))
    if np.any((indices < 0) | (indices >= p)):
        raise InvalidInputError(f"initial_active indices must lie in [0, {p}).")
    return ordered_union(indices)
