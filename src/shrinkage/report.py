"""
Side-by-side comparison of Linear Regression, Ridge, LASSO and Elastic Net.

Every penalized model gets its lambda from cross-validation on the training
set, is refit on the whole training set along the same lambda path, and is
scored once on the held-out test set.
"""

from dataclasses import dataclass
from functools import partial
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from .config import RunConfig
from .dataset import Design, build_design, load_table, partition
from .path import PathFitter, fit_least_squares, fit_path, predict
from .scoring import score
from .selection import CVResult, alpha_candidates, search_alpha, select_lambda

MODEL_NAMES = ("Linear Regression", "Ridge", "LASSO", "Elastic Net")


@dataclass(frozen=True)
class ModelScore:
    name: str
    test_r_squared: float
    test_mse: float
    alpha: Optional[float]
    lambda_: Optional[float]
    coefficients: np.ndarray


@dataclass(frozen=True)
class Report:
    rows: Tuple[ModelScore, ...]
    feature_names: Tuple[str, ...]

    def __getitem__(self, name: str) -> ModelScore:
        for row in self.rows:
            if row.name == name:
                return row
        raise KeyError(name)

    def to_frame(self) -> pd.DataFrame:
        """One row per model: model, alpha, lambda, r_squared, mse."""
        return pd.DataFrame(
            [
                {
                    "model": row.name,
                    "alpha": row.alpha,
                    "lambda": row.lambda_,
                    "r_squared": row.test_r_squared,
                    "mse": row.test_mse,
                }
                for row in self.rows
            ]
        )

    def coefficient_frame(self) -> pd.DataFrame:
        """Coefficients per model, indexed by (Intercept) + feature names."""
        index = ("(Intercept)",) + tuple(self.feature_names)
        return pd.DataFrame(
            {row.name: row.coefficients for row in self.rows}, index=list(index)
        )


def _scored(
    name: str,
    coef: np.ndarray,
    test: Design,
    alpha: Optional[float] = None,
    lambda_: Optional[float] = None,
) -> ModelScore:
    result = score(test.y, predict(coef, test.X))
    logger.info(
        "{}: test R^2 {:.4f}, test MSE {:.4f}", name, result.r_squared, result.mse
    )
    return ModelScore(
        name=name,
        test_r_squared=result.r_squared,
        test_mse=result.mse,
        alpha=alpha,
        lambda_=lambda_,
        coefficients=coef,
    )


def _refit(
    train: Design, cv: CVResult, lambdas, fitter: PathFitter
) -> Tuple[np.ndarray, float]:
    """
    Refit on the whole training set and read off the selected lambda.

    If that lambda fails to converge on the refit, the next lambda by CV
    error (ties toward the larger lambda) that did converge is used.

    Returns:
        (coefficients, lambda actually used)
    """
    path = fitter(train.X, train.y, cv.alpha, lambdas)
    ranked = sorted(cv.errors, key=lambda lam: (cv.errors[lam], -lam))
    for lam in ranked:
        if lam in path.coefficients:
            if lam != cv.best_lambda:
                logger.warning(
                    "alpha={:.4g}: lambda={:.4g} did not converge on the refit, "
                    "using lambda={:.4g}",
                    cv.alpha, cv.best_lambda, lam,
                )
            return path.coef(lam), lam
    return path.coef(cv.best_lambda), cv.best_lambda


def compare_models(
    train: Design,
    test: Design,
    config: RunConfig,
    fitter: Optional[PathFitter] = None,
) -> Report:
    """
    Fit the four models on `train` and score them on `test`.

    Args:
        train: Training design
        test: Test design with the same columns
        config: Run settings (lambda candidates, folds, seed, alpha)
        fitter: Path fitter; defaults to fit_path with config.max_iter/tol

    Returns:
        Report with rows in MODEL_NAMES order
    """
    if fitter is None:
        fitter = partial(fit_path, max_iter=config.max_iter, tol=config.tol)
    lambdas = config.lambda_sequence
    k, seed = config.folds, config.seed

    rows = [_scored("Linear Regression", fit_least_squares(train.X, train.y), test)]

    for name, alpha in (("Ridge", 0.0), ("LASSO", 1.0)):
        cv = select_lambda(train.X, train.y, alpha, lambdas, k, seed, fitter)
        coef, lam = _refit(train, cv, lambdas, fitter)
        rows.append(_scored(name, coef, test, alpha, lam))

    if config.alpha == "search":
        alphas = alpha_candidates(config.alpha_search, config.alpha_candidates, seed)
        cv = search_alpha(train.X, train.y, alphas, lambdas, k, seed, fitter).best
    else:
        cv = select_lambda(train.X, train.y, float(config.alpha), lambdas, k, seed, fitter)
    coef, lam = _refit(train, cv, lambdas, fitter)
    rows.append(_scored("Elastic Net", coef, test, cv.alpha, lam))

    return Report(rows=tuple(rows), feature_names=train.feature_names)


def run(config: RunConfig, fitter: Optional[PathFitter] = None) -> Report:
    """Load, partition, build designs and compare, all from one config."""
    if config.data_path is None:
        raise ValueError("config.data_path is not set")

    table = load_table(
        config.data_path,
        config.response_column,
        drop_columns=config.drop_columns,
        categorical_columns=config.categorical_columns,
    )
    train_table, test_table = partition(table, config.proportion, config.seed)
    train = build_design(train_table, config.response_column)
    test = build_design(test_table, config.response_column)
    logger.info(
        "comparing models on {} train / {} test rows, {} features",
        train.n_samples, test.n_samples, train.n_features,
    )
    return compare_models(train, test, config, fitter)
