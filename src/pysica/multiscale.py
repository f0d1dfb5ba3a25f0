"""Multi-scale stabilization: continuation over the SICA shape parameter."""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .coordinate_descent import ordered_union, run_stage

logger = logging.getLogger(__name__)

# (a_rung, activation_constant) pairs. The maximum concavity of lambda * rho_a
# is lambda * 2 * (1/a + 1/a^2), so smaller rungs need larger constants.
STABILIZATION_LADDER = ((1.0, 4.0), (1.0 / 3.0, 24.0), (0.1, 220.0))
ACTIVATION_THRESHOLD = 1e-2


def stabilization_schedule(
    a0: float,
    lam: float,
    ladder: Sequence[Tuple[float, float]] = STABILIZATION_LADDER,
    activation_threshold: float = ACTIVATION_THRESHOLD,
) -> List[float]:
    """Return the intermediate shape parameters run before the final stage.

    A rung ``(a_rung, constant)`` is kept when ``a0 < a_rung`` and
    ``lam * constant > activation_threshold``.
    """
    return [
        a_rung
        for a_rung, constant in ladder
        if a0 < a_rung and lam * constant > activation_threshold
    ]


def multiscale_stabilization(
    gram: np.ndarray,
    corr: np.ndarray,
    a0: float,
    lam: float,
    beta_init: np.ndarray,
    varset: Optional[np.ndarray] = None,
    max_iter: int = 50,
    tol: float = 1e-4,
    ladder: Sequence[Tuple[float, float]] = STABILIZATION_LADDER,
    activation_threshold: float = ACTIVATION_THRESHOLD,
) -> Tuple[np.ndarray, np.ndarray, List[dict]]:
    r"""Solve the rescaled SICA problem with multi-scale stabilization.

    Stages run at the rungs returned by :func:`stabilization_schedule`, in
    decreasing order of :math:`a`, followed by a final stage at `a0`. Every
    stage starts from all coordinates and is seeded with the coefficients of
    the previous stage. Coordinates that are nonzero at the end of a
    stabilization stage join `varset` and are kept in every later active set.

    Parameters
    ----------
    gram : ndarray of shape (n_features, n_features)
        Gram matrix of the rescaled design.
    corr : ndarray of shape (n_features,)
        Correlation vector of the rescaled design.
    a0 : float
        Target shape parameter of the final stage.
    lam : float
        Regularization parameter.
    beta_init : ndarray of shape (n_features,)
        Starting coefficients of the first executed stage.
    varset : ndarray of int, optional
        Coordinates believed to be important.
    max_iter : int, default=50
        Maximum number of passes per stage.
    tol : float, default=1e-4
        Step-size tolerance per stage.
    ladder : sequence of (float, float), optional
        ``(a_rung, activation_constant)`` pairs.
    activation_threshold : float, default=1e-2
        Activation level for a rung.

    Returns
    -------
    beta : ndarray of shape (n_features,)
        Coefficients of the final stage.
    varset : ndarray of int
        Important variables accumulated over the stabilization stages.
    stages : list of dict
        One record per executed stage with keys ``"a"``, ``"iterations"``,
        ``"steps"`` and ``"converged"``.
    """
    varset = ordered_union([] if varset is None else varset)
    beta = np.array(beta_init, dtype=float)
    stages = []

    for a_stage in stabilization_schedule(a0, lam, ladder, activation_threshold):
        logger.debug(f"Stabilization stage at a={a_stage:.4g}, lambda={lam:.4g}.")
        beta, _, steps = run_stage(
            gram, corr, beta, a_stage, lam, varset=varset, max_iter=max_iter, tol=tol
        )
        varset = ordered_union(np.flatnonzero(beta), varset)
        stages.append(_stage_record(a_stage, steps, tol))

    logger.debug(f"Final stage at a={a0:.4g}, lambda={lam:.4g}.")
    beta, _, steps = run_stage(
        gram, corr, beta, a0, lam, varset=varset, max_iter=max_iter, tol=tol
    )
    stages.append(_stage_record(a0, steps, tol))
    return beta, varset, stages


def _stage_record(a: float, steps: List[float], tol: float) -> dict:
    return {
        "a": a,
        "iterations": len(steps),
        "steps": steps,
        "converged": bool(steps) and steps[-1] <= tol,
    }
