# pysica/__init__.py
from .sica import sica, SICAError, InvalidInputError, NonSparseSolutionWarning
from .scalar_sica import sica_threshold, sica_threshold_vec
from .scalar_hard import hard_threshold_update
from .penalties import (
    sica_penalty,
    hard_threshold_penalty,
    soft_threshold,
    sica_objective,
)
from .coordinate_descent import (
    rescale_columns,
    gram_and_correlation,
    update_active_set,
    run_stage,
)
from .multiscale import (
    STABILIZATION_LADDER,
    stabilization_schedule,
    multiscale_stabilization,
)
from .lambda_max_sica import lambda_max_sica
from .sica_path import sica_path
from .design import ar1_covariance, simulate_design, simulate_sparse_regression

__version__ = "0.1.0"
