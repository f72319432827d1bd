"""
Elastic-net penalty, soft-threshold operator and the penalized objective.

glmnet parameterization: `alpha` mixes the two norms and `lambda_` scales
the whole term,

    lambda_ * ((1 - alpha) / 2 * ||w||_2^2 + alpha * ||w||_1)

The intercept is never penalized; callers pass the slope coefficients only.
"""

import numpy as np


def penalty(w: np.ndarray, lambda_: float, alpha: float) -> float:
    """Mixed penalty; alpha = 1 gives the LASSO term, alpha = 0 the Ridge term."""
    ridge = 0.5 * (1.0 - alpha) * float(w @ w)
    lasso = alpha * float(np.abs(w).sum())
    return lambda_ * (ridge + lasso)


def soft_threshold(z: float, gamma: float) -> float:
    """
    Proximal operator of gamma * |w|: sign(z) * max(|z| - gamma, 0).

    This is what drives LASSO coefficients to exactly zero.
    """
    if z > gamma:
        return z - gamma
    if z < -gamma:
        return z + gamma
    return 0.0


def objective(
    X: np.ndarray,
    y: np.ndarray,
    intercept: float,
    w: np.ndarray,
    lambda_: float,
    alpha: float,
) -> float:
    """
    Penalized least-squares objective minimized by the path fitter.

    (1/2n) * ||y - intercept - X w||^2 + penalty(w, lambda_, alpha)
    """
    resid = y - intercept - X @ w
    return 0.5 * float(resid @ resid) / y.shape[0] + penalty(w, lambda_, alpha)
