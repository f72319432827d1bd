"""
Linear, Ridge, LASSO and Elastic Net regression compared on one dataset.

Penalized fits use a from-scratch NumPy coordinate-descent path; lambdas
(and the elastic-net mixing parameter) are chosen by k-fold
cross-validation and every model is scored on a held-out test set.
"""

__version__ = "0.1.0"

from .config import LogConfig, RunConfig
from .dataset import Design, build_design, encode_categorical, load_table, partition
from .errors import (
    DegenerateResponse,
    EmptyInput,
    InvalidProportion,
    LengthMismatch,
    NonConvergent,
    NonNumericColumn,
    ShrinkageError,
)
from .path import PathResult, fit_least_squares, fit_path, lambda_grid, lambda_max, predict
from .report import ModelScore, Report, compare_models, run
from .scoring import Score, score
from .selection import AlphaSearchResult, CVResult, alpha_candidates, search_alpha, select_lambda

__all__ = [
    "LogConfig",
    "RunConfig",
    "Design",
    "build_design",
    "encode_categorical",
    "load_table",
    "partition",
    "DegenerateResponse",
    "EmptyInput",
    "InvalidProportion",
    "LengthMismatch",
    "NonConvergent",
    "NonNumericColumn",
    "ShrinkageError",
    "PathResult",
    "fit_least_squares",
    "fit_path",
    "lambda_grid",
    "lambda_max",
    "predict",
    "ModelScore",
    "Report",
    "compare_models",
    "run",
    "Score",
    "score",
    "AlphaSearchResult",
    "CVResult",
    "alpha_candidates",
    "search_alpha",
    "select_lambda",
]
