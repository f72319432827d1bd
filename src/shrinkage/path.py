"""
Regularization path for penalized linear regression -- from-scratch NumPy.

For every penalty strength lambda on the path, minimizes

    (1/2n) * ||y - b0 - X w||^2 + lambda * ((1 - alpha)/2 * ||w||_2^2 + alpha * ||w||_1)

with cyclic coordinate descent. alpha = 0 is Ridge, alpha = 1 is Lasso and
anything in between is Elastic Net. Predictors are standardized before the
fit so a single lambda penalizes every feature on the same scale; the
returned coefficients are mapped back to the original units.

Lambdas are visited from largest to smallest and each solution warm-starts
the next, which is what makes a whole path about as cheap as a single fit.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np
from loguru import logger

from .errors import EmptyInput, LengthMismatch, NonConvergent
from .penalties import objective, soft_threshold


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PathResult:
    """
    Coefficients along a regularization path.

    `coefficients` maps lambda -> [intercept, w_1, ..., w_p] in original
    units. Lambdas whose solve did not converge are absent from it and
    listed in `failures` instead. `objectives` holds the penalized
    objective reached at each converged lambda, on the standardized scale
    the solver works in.
    """

    alpha: float
    coefficients: Mapping[float, np.ndarray]
    failures: Mapping[float, NonConvergent]
    n_iter: Mapping[float, int]
    objectives: Mapping[float, float] = field(default_factory=dict)

    @property
    def lambdas(self) -> Tuple[float, ...]:
        """Converged lambdas, largest first."""
        return tuple(sorted(self.coefficients, reverse=True))

    def coef(self, lambda_: float) -> np.ndarray:
        if lambda_ in self.failures:
            raise self.failures[lambda_]
        return self.coefficients[lambda_].copy()

    def predict(self, lambda_: float, X: np.ndarray) -> np.ndarray:
        return predict(self.coef(lambda_), X)


class PathFitter(Protocol):
    """Anything that fits a regularization path the way fit_path() does."""

    def __call__(
        self,
        X: np.ndarray,
        y: np.ndarray,
        alpha: float,
        lambdas: Sequence[float],
    ) -> PathResult:
        ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def predict(coefficients: np.ndarray, X: np.ndarray) -> np.ndarray:
    """Predictions for [intercept, w...] coefficients, shape (n_samples,)."""
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    return coefficients[0] + X @ coefficients[1:]


def _validate(X: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.shape[0] != y.shape[0]:
        raise LengthMismatch(X.shape[0], y.shape[0], component="path")
    if X.shape[0] == 0:
        raise EmptyInput("design matrix", component="path")
    return X, y


def _standardize(X: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Center and scale columns to unit population variance.

    Constant columns are only centered (they become all zeros) and their
    scale is reported as 0 so the caller can pin their coefficient at 0.
    """
    mean = X.mean(axis=0)
    scale = X.std(axis=0)
    constant = scale < 1e-12
    safe = np.where(constant, 1.0, scale)
    Xs = (X - mean) / safe
    return Xs, mean, np.where(constant, 0.0, scale)


def fit_least_squares(X: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Unpenalized least squares with intercept.

    Uses np.linalg.lstsq, which also handles rank-deficient designs by
    returning the minimum-norm solution.

    Returns:
        [intercept, w_1, ..., w_p]
    """
    X, y = _validate(X, y)
    X_aug = np.column_stack([np.ones(X.shape[0]), X])
    w_aug, _, _, _ = np.linalg.lstsq(X_aug, y, rcond=None)
    return w_aug


def lambda_max(X: np.ndarray, y: np.ndarray, alpha: float) -> float:
    """
    Smallest lambda at which every coefficient is exactly zero.

    For alpha = 0 no finite lambda zeroes Ridge, so alpha is floored at
    1e-3 to give a usable upper end for the grid.
    """
    X, y = _validate(X, y)
    Xs, _, _ = _standardize(X)
    n = X.shape[0]
    corr = np.abs(Xs.T @ (y - y.mean())) / n
    top = float(corr.max()) if corr.size else 0.0
    return top / max(alpha, 1e-3)


def lambda_grid(
    X: np.ndarray,
    y: np.ndarray,
    alpha: float,
    n_lambdas: int = 100,
    ratio: Optional[float] = None,
) -> np.ndarray:
    """
    Log-spaced lambdas from lambda_max down to lambda_max * ratio.

    ratio defaults to 1e-4 when n > p and 1e-2 otherwise.
    """
    X, y = _validate(X, y)
    if ratio is None:
        ratio = 1e-4 if X.shape[0] > X.shape[1] else 1e-2
    top = lambda_max(X, y, alpha)
    if top <= 0.0:
        raise ValueError("response is uncorrelated with every predictor; no lambda grid")
    return np.logspace(np.log10(top), np.log10(top * ratio), n_lambdas)


# ---------------------------------------------------------------------------
# Coordinate descent
# ---------------------------------------------------------------------------

def _coordinate_descent(
    gram: np.ndarray,
    xty: np.ndarray,
    diag: np.ndarray,
    w: np.ndarray,
    lambda_: float,
    alpha: float,
    max_iter: int,
    threshold: float,
) -> Tuple[np.ndarray, int]:
    """
    Solve one lambda in covariance mode.

    gram = Xs^T Xs / n and xty = Xs^T y / n are precomputed once per path, so
    a sweep costs O(p^2) regardless of n. `q` tracks gram @ w and is updated
    only for coordinates that actually move (gram is symmetric, so row j is
    used in place of column j).

    Returns:
        (w, sweeps) on convergence; raises NonConvergent otherwise
    """
    w = w.copy()
    q = gram @ w
    l1 = lambda_ * alpha
    l2 = lambda_ * (1.0 - alpha)
    p = w.shape[0]

    for sweep in range(1, max_iter + 1):
        max_change = 0.0
        for j in range(p):
            d = diag[j]
            if d == 0.0:
                continue
            old = w[j]
            rho = xty[j] - q[j] + d * old
            new = soft_threshold(rho, l1) / (d + l2)
            delta = new - old
            if delta != 0.0:
                w[j] = new
                q += gram[j] * delta
                change = d * delta * delta
                if change > max_change:
                    max_change = change
        if max_change < threshold:
            return w, sweep

    raise NonConvergent(lambda_, max_iter)


def fit_path(
    X: np.ndarray,
    y: np.ndarray,
    alpha: float,
    lambdas: Sequence[float],
    max_iter: int = 100_000,
    tol: float = 1e-7,
) -> PathResult:
    """
    Fit one coefficient vector per lambda.

    Args:
        X: Predictors, shape (n_samples, n_features)
        y: Response, shape (n_samples,)
        alpha: Mixing parameter in [0, 1]. 0 = Ridge, 1 = Lasso.
        lambdas: Positive penalty strengths, any order
        max_iter: Sweep budget per lambda
        tol: Convergence threshold on the largest squared coefficient
            change in a sweep, relative to the response variance

    Returns:
        PathResult keyed by lambda; non-convergent lambdas are reported in
        `failures` and the remaining lambdas are still fitted
    """
    if not 0.0 <= alpha <= 1.0:
        raise ValueError(f"alpha must be in [0, 1], got {alpha}")
    lambdas = [float(lam) for lam in lambdas]
    if not lambdas:
        raise ValueError("lambdas must not be empty")
    if any(lam <= 0.0 for lam in lambdas):
        raise ValueError("lambdas must be strictly positive")

    X, y = _validate(X, y)
    n = X.shape[0]

    Xs, x_mean, x_scale = _standardize(X)
    y_mean = float(y.mean())
    yc = y - y_mean

    # (n_features, n_samples) @ (n_samples, n_features) -> (n_features, n_features)
    gram = Xs.T @ Xs / n
    xty = Xs.T @ yc / n
    diag = np.diag(gram).copy()
    y_var = float(np.mean(yc ** 2))
    threshold = tol * (y_var if y_var > 0.0 else 1.0)

    coefficients: Dict[float, np.ndarray] = {}
    failures: Dict[float, NonConvergent] = {}
    n_iter: Dict[float, int] = {}
    objectives: Dict[float, float] = {}

    w = np.zeros(X.shape[1])
    for lam in sorted(set(lambdas), reverse=True):
        try:
            w_lam, sweeps = _coordinate_descent(
                gram, xty, diag, w, lam, alpha, max_iter, threshold
            )
        except NonConvergent as exc:
            logger.warning("alpha={:.4g}: {}", alpha, exc)
            failures[lam] = exc
            continue
        w = w_lam
        n_iter[lam] = sweeps
        objectives[lam] = objective(Xs, yc, 0.0, w_lam, lam, alpha)
        logger.trace(
            "lambda={:.4g}: objective {:.6g} after {} sweeps",
            lam, objectives[lam], sweeps,
        )

        slopes = np.divide(
            w_lam, x_scale, out=np.zeros_like(w_lam), where=x_scale > 0.0
        )
        intercept = y_mean - float(x_mean @ slopes)
        coef = np.concatenate([[intercept], slopes])
        coef.flags.writeable = False
        coefficients[lam] = coef

    logger.debug(
        "alpha={:.4g}: fitted {} lambdas ({} failed) on {} rows",
        alpha, len(coefficients), len(failures), n,
    )
    return PathResult(
        alpha=float(alpha),
        coefficients=MappingProxyType(coefficients),
        failures=MappingProxyType(failures),
        n_iter=MappingProxyType(n_iter),
        objectives=MappingProxyType(objectives),
    )
