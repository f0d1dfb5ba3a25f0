"""SICA solutions over a grid of regularization parameters."""

from functools import partial
from multiprocessing import cpu_count
from typing import Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from .lambda_max_sica import lambda_max_sica
from .sica import A_FLOOR, InvalidInputError, sica


def sica_path(
    X: np.ndarray,
    y: np.ndarray,
    a: float = 1e-3,
    lambdas: Optional[Sequence[float]] = None,
    lambda_max: Optional[float] = None,
    proportion_xi: float = 0.01,
    num_intervals: int = 10,
    max_iter: int = 50,
    tol: float = 1e-4,
    use_parallel: bool = False,
    trace_progress: bool = False,
) -> dict:
    r"""Compute SICA estimates for a sequence of :math:`\lambda` values.

    Unless `lambdas` is given, the grid is logarithmic, spanning from
    :math:`\lambda_{\text{max}}` down to :math:`\xi \times \lambda_{\text{max}}`
    with :math:`m` values.

    Every grid point is an independent call to :func:`pysica.sica.sica`
    started from zero, so the results do not depend on the order of
    evaluation or on `use_parallel`.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Design matrix.
    y : ndarray of shape (n_samples,)
        Response vector.
    a : float, default=1e-3
        SICA shape parameter.
    lambdas : sequence of float, optional
        Explicit grid. Overrides `lambda_max`, `proportion_xi` and
        `num_intervals`.
    lambda_max : float, optional
        Largest grid value. Computed with
        :func:`pysica.lambda_max_sica.lambda_max_sica` if omitted.
    proportion_xi : float, default=0.01
        Ratio of the smallest to the largest grid value, :math:`\xi`.
    num_intervals : int, default=10
        Number of grid values, :math:`m`.
    max_iter : int, default=50
        Maximum number of passes per stage.
    tol : float, default=1e-4
        Step-size tolerance per stage.
    use_parallel : bool, default=False
        If True and multiple CPUs are available, grid points are solved in
        parallel.
    trace_progress : bool, default=False
        If True, print progress after each finished grid point.

    Returns
    -------
    dict
        Keys:

        - `'beta'`: ndarray of shape (num_intervals, n_features)
        - `'lambda'`: ndarray of shape (num_intervals,)
        - `'df'`: ndarray of shape (num_intervals,), nonzero counts
        - `'iterations'`: ndarray of shape (num_intervals,), total passes
        - `'a'`: float
        - `'rel_acc'`: float
        - `'max_iter'`: int
        - `'loops_lambda'`: int

    Raises
    ------
    InvalidInputError
        If the grid parameters are invalid.
    """
    if lambdas is None:
        if num_intervals < 1:
            raise InvalidInputError("num_intervals must be a positive integer.")
        if not (0 < proportion_xi <= 1):
            raise InvalidInputError("proportion_xi must be in the interval (0, 1].")
        if lambda_max is None:
            lambda_max = lambda_max_sica(X, y, a)
        if num_intervals > 1:
            lambdas = lambda_max * np.exp(
                (np.arange(num_intervals) / (num_intervals - 1)) * np.log(proportion_xi)
            )
        else:
            lambdas = np.array([lambda_max])
    lambdas = np.asarray(lambdas, dtype=float)
    if lambdas.ndim != 1 or lambdas.size == 0:
        raise InvalidInputError("lambdas must be a non-empty 1D sequence.")
    if np.any(lambdas < 0):
        raise InvalidInputError("lambdas must be non-negative.")

    num_lambdas = lambdas.size
    solve_fn = partial(
        sica, X, y, a, max_iter=max_iter, tol=tol, return_info=True
    )

    if use_parallel and cpu_count() > 1 and num_lambdas > 1:
        fits = Parallel(n_jobs=-1)(delayed(solve_fn)(lam=lam) for lam in lambdas)
        if trace_progress:
            print(f"Loop: {num_lambdas} of {num_lambdas} finished.")
    else:
        fits = []
        for interval, lam in enumerate(lambdas):
            fits.append(solve_fn(lam=lam))
            if trace_progress:
                print(f"Loop: {interval + 1} of {num_lambdas} finished.")

    return {
        "beta": np.vstack([beta for beta, _ in fits]),
        "lambda": lambdas,
        "df": np.array([info["df"] for _, info in fits], dtype=int),
        "iterations": np.array(
            [sum(stage["iterations"] for stage in info["stages"]) for _, info in fits],
            dtype=int,
        ),
        "a": max(A_FLOOR, a),
        "rel_acc": tol,
        "max_iter": max_iter,
        "loops_lambda": num_lambdas,
    }
