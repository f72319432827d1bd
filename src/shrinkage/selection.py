"""
K-fold cross-validation over a regularization path.

select_lambda() picks the penalty strength for a fixed mixing parameter;
search_alpha() wraps it in an outer search over the mixing parameter, which
is how the Elastic Net model gets both of its hyperparameters.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Sequence, Tuple

import numpy as np
from loguru import logger

from .dataset import permutation
from .errors import EmptyInput, LengthMismatch, NonConvergent
from .path import PathFitter, fit_path


@dataclass(frozen=True)
class CVResult:
    """
    Cross-validated error for each lambda that converged in every fold.

    `errors` and `std_errors` are keyed by lambda. `fold_errors` has shape
    (k, len(lambdas)) with columns in the order of `lambdas` (largest first).
    """

    alpha: float
    lambdas: Tuple[float, ...]
    errors: Mapping[float, float]
    std_errors: Mapping[float, float]
    fold_errors: np.ndarray
    best_lambda: float
    lambda_1se: float
    excluded: Tuple[float, ...]

    @property
    def min_error(self) -> float:
        return self.errors[self.best_lambda]


@dataclass(frozen=True)
class AlphaSearchResult:
    best_alpha: float
    best_lambda: float
    results: Mapping[float, CVResult]

    @property
    def best(self) -> CVResult:
        return self.results[self.best_alpha]


def fold_ids(n: int, k: int, seed: int) -> np.ndarray:
    """
    Assign each of n rows to one of k folds.

    Row order[i] of a seeded permutation goes to fold i % k, so fold sizes
    never differ by more than one row.

    Returns:
        Integer fold index per row, shape (n,)
    """
    if k < 2:
        raise ValueError(f"need at least 2 folds, got {k}")
    if k > n:
        raise ValueError(f"cannot split {n} rows into {k} folds")
    order = permutation(n, seed)
    ids = np.empty(n, dtype=int)
    ids[order] = np.arange(n) % k
    return ids


def select_lambda(
    X: np.ndarray,
    y: np.ndarray,
    alpha: float,
    lambdas: Sequence[float],
    k: int = 10,
    seed: int = 0,
    fitter: PathFitter = fit_path,
) -> CVResult:
    """
    Choose lambda by k-fold cross-validated mean squared error.

    Each fold is held out once while the path is fitted on the other k - 1.
    A lambda that fails to converge in any fold is excluded from the
    averages rather than aborting the search.

    Args:
        X: Predictors, shape (n_samples, n_features)
        y: Response, shape (n_samples,)
        alpha: Mixing parameter passed to the fitter
        lambdas: Candidate penalty strengths
        k: Number of folds, 2 <= k <= n_samples
        seed: Seed for the fold assignment
        fitter: Path fitter, fit_path by default

    Returns:
        CVResult with the minimizing lambda (ties go to the larger lambda)
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    if X.shape[0] != y.shape[0]:
        raise LengthMismatch(X.shape[0], y.shape[0], component="selection")
    if X.shape[0] == 0:
        raise EmptyInput("training data", component="selection")

    candidates = sorted({float(lam) for lam in lambdas}, reverse=True)
    if not candidates:
        raise ValueError("lambdas must not be empty")

    folds = fold_ids(X.shape[0], k, seed)
    # NaN marks a lambda that did not converge in that fold
    fold_mse = np.full((k, len(candidates)), np.nan)

    for f in range(k):
        held_out = folds == f
        path = fitter(X[~held_out], y[~held_out], alpha, candidates)
        X_out, y_out = X[held_out], y[held_out]
        for i, lam in enumerate(candidates):
            if lam in path.coefficients:
                resid = y_out - path.predict(lam, X_out)
                fold_mse[f, i] = float(np.mean(resid ** 2))

    converged = ~np.isnan(fold_mse).any(axis=0)
    excluded = tuple(lam for lam, ok in zip(candidates, converged) if not ok)
    if excluded:
        logger.warning(
            "alpha={:.4g}: excluding {} lambda(s) that failed to converge: {}",
            alpha, len(excluded), ", ".join(f"{lam:.4g}" for lam in excluded),
        )
    if not converged.any():
        raise NonConvergent(
            None, 0,
            message=f"alpha={alpha:.4g}: no lambda converged in every fold",
            component="selection",
        )

    kept = tuple(lam for lam, ok in zip(candidates, converged) if ok)
    kept_mse = fold_mse[:, converged]
    mean_err = kept_mse.mean(axis=0)
    std_err = kept_mse.std(axis=0, ddof=1) / np.sqrt(k)

    # candidates are sorted largest first, so argmin resolves ties upward
    best = int(np.argmin(mean_err))
    cutoff = mean_err[best] + std_err[best]
    one_se = int(np.flatnonzero(mean_err <= cutoff)[0])

    errors: Dict[float, float] = {lam: float(e) for lam, e in zip(kept, mean_err)}
    std_errors: Dict[float, float] = {lam: float(s) for lam, s in zip(kept, std_err)}

    logger.info(
        "alpha={:.4g}: best lambda {:.4g} (cv mse {:.4f}), 1se lambda {:.4g}",
        alpha, kept[best], mean_err[best], kept[one_se],
    )
    kept_mse.flags.writeable = False
    return CVResult(
        alpha=float(alpha),
        lambdas=kept,
        errors=MappingProxyType(errors),
        std_errors=MappingProxyType(std_errors),
        fold_errors=kept_mse,
        best_lambda=kept[best],
        lambda_1se=kept[one_se],
        excluded=excluded,
    )


def alpha_candidates(strategy: str, n: int, seed: int = 0) -> np.ndarray:
    """
    Mixing-parameter candidates for search_alpha().

    "grid" spaces n values evenly over [0, 1]; "random" draws n values
    uniformly from a seeded generator and sorts them.
    """
    if n < 1:
        raise ValueError(f"need at least one alpha candidate, got {n}")
    if strategy == "grid":
        return np.linspace(0.0, 1.0, n)
    if strategy == "random":
        rng = np.random.default_rng(seed)
        return np.sort(rng.uniform(0.0, 1.0, n))
    raise ValueError(f"unknown alpha search strategy: {strategy!r}")


def search_alpha(
    X: np.ndarray,
    y: np.ndarray,
    alphas: Sequence[float],
    lambdas: Sequence[float],
    k: int = 10,
    seed: int = 0,
    fitter: PathFitter = fit_path,
) -> AlphaSearchResult:
    """
    Pick (alpha, lambda) jointly by cross-validation.

    Every alpha candidate is evaluated with select_lambda() on the same
    folds; the pair with the lowest CV error wins, the earliest candidate
    on ties. An alpha for which no lambda converged is skipped.
    """
    results: Dict[float, CVResult] = {}
    for alpha in alphas:
        alpha = float(alpha)
        try:
            results[alpha] = select_lambda(X, y, alpha, lambdas, k, seed, fitter)
        except NonConvergent as exc:
            logger.warning("skipping alpha={:.4g}: {}", alpha, exc)

    if not results:
        raise NonConvergent(
            None, 0,
            message="no alpha candidate produced a converged lambda",
            component="selection",
        )

    best_alpha = min(results, key=lambda a: results[a].min_error)
    best = results[best_alpha]
    logger.info(
        "alpha search over {} candidates: alpha={:.4g}, lambda={:.4g}",
        len(results), best_alpha, best.best_lambda,
    )
    return AlphaSearchResult(
        best_alpha=best_alpha,
        best_lambda=best.best_lambda,
        results=MappingProxyType(results),
    )
