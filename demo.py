"""
Shrinkage Demo -- Ridge, LASSO and Elastic Net paths, CV selection, sklearn comparison.

Usage:
    python demo.py                      # synthetic data only
    python demo.py life_expectancy.csv  # also runs the four-model comparison on a CSV
"""

import os
import sys

import numpy as np
from sklearn.linear_model import ElasticNet, LinearRegression

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from shrinkage import (
    RunConfig,
    alpha_candidates,
    fit_least_squares,
    fit_path,
    lambda_grid,
    run,
    score,
    search_alpha,
    select_lambda,
)
from shrinkage.logs import configure_logging
from shrinkage.path import predict

SEED = 13


def make_data(n=400, seed=SEED):
    """Correlated predictors on very different scales, three of them irrelevant."""
    rng = np.random.default_rng(seed)
    z = rng.standard_normal((n, 6))
    z[:, 1] = 0.9 * z[:, 0] + np.sqrt(1 - 0.81) * z[:, 1]
    X = z * [1.0, 50.0, 0.2, 3.0, 10.0, 1.0] + [0.0, 500.0, 1.0, -4.0, 0.0, 2.0]
    beta = np.array([2.0, 0.04, 5.0, 0.0, 0.0, 0.0])
    y = 60.0 + X @ beta + rng.normal(0, 1.5, n)
    return X, y


# =========================================================================
# Example 1: LASSO path -- sparsity as lambda grows
# =========================================================================
def example_1_lasso_path(X, y):
    print("=" * 60)
    print("Example 1: LASSO Path (alpha = 1)")
    print("=" * 60)

    lambdas = lambda_grid(X, y, 1.0, n_lambdas=12)
    path = fit_path(X, y, 1.0, lambdas)
    print(f"  {'lambda':>10}  {'nonzero':>7}  {'L1 norm':>10}  sweeps")
    for lam in path.lambdas:
        w = path.coefficients[lam][1:]
        print(f"  {lam:10.4g}  {np.count_nonzero(w):7d}  {np.sum(np.abs(w)):10.4f}  "
              f"{path.n_iter[lam]}")
    print()


# =========================================================================
# Example 2: Ridge at lambda -> 0 recovers least squares
# =========================================================================
def example_2_ridge_limit(X, y):
    print("=" * 60)
    print("Example 2: Ridge as lambda -> 0")
    print("=" * 60)

    ols = fit_least_squares(X, y)
    for lam in (1.0, 1e-2, 1e-4, 1e-6):
        ridge = fit_path(X, y, 0.0, [lam], tol=1e-14).coefficients[lam]
        print(f"  lambda={lam:<8g} max |ridge - ols| = {np.max(np.abs(ridge - ols)):.2e}")
    print()


# =========================================================================
# Example 3: Agreement with sklearn on standardized data
# =========================================================================
def example_3_sklearn(X, y):
    print("=" * 60)
    print("Example 3: Coordinate Descent vs sklearn ElasticNet")
    print("=" * 60)

    Xs = (X - X.mean(axis=0)) / X.std(axis=0)
    for alpha in (0.2, 0.5, 1.0):
        lam = 0.05
        ours = fit_path(Xs, y, alpha, [lam], tol=1e-14).coefficients[lam]
        sk = ElasticNet(alpha=lam, l1_ratio=alpha, tol=1e-12, max_iter=100_000).fit(Xs, y)
        diff = np.max(np.abs(ours[1:] - sk.coef_))
        print(f"  alpha={alpha:.1f} lambda={lam}: max |w_ours - w_sklearn| = {diff:.2e}")

    sk_ols = LinearRegression().fit(X, y)
    diff = np.max(np.abs(fit_least_squares(X, y)[1:] - sk_ols.coef_))
    print(f"  least squares: max |w_ours - w_sklearn| = {diff:.2e}")
    print()


# =========================================================================
# Example 4: Cross-validated lambda and alpha
# =========================================================================
def example_4_cross_validation(X, y):
    print("=" * 60)
    print("Example 4: 10-fold CV for lambda, random search for alpha")
    print("=" * 60)

    lambdas = RunConfig().lambda_sequence
    n_train = int(round(0.8 * len(y)))
    X_tr, y_tr, X_te, y_te = X[:n_train], y[:n_train], X[n_train:], y[n_train:]

    for name, alpha in (("Ridge", 0.0), ("LASSO", 1.0)):
        cv = select_lambda(X_tr, y_tr, alpha, lambdas, k=10, seed=SEED)
        path = fit_path(X_tr, y_tr, alpha, lambdas)
        result = score(y_te, path.predict(cv.best_lambda, X_te))
        print(f"  {name:<6} best lambda {cv.best_lambda:.4g} (1se {cv.lambda_1se:.4g}) "
              f"-> test R^2 {result.r_squared:.4f}, MSE {result.mse:.4f}")

    alphas = alpha_candidates("random", 5, seed=SEED)
    search = search_alpha(X_tr, y_tr, alphas, lambdas, k=10, seed=SEED)
    path = fit_path(X_tr, y_tr, search.best_alpha, lambdas)
    result = score(y_te, predict(path.coef(search.best_lambda), X_te))
    print(f"  EN     alpha {search.best_alpha:.3f}, lambda {search.best_lambda:.4g} "
          f"-> test R^2 {result.r_squared:.4f}, MSE {result.mse:.4f}")
    print()


# =========================================================================
# Example 5: Full comparison on a CSV
# =========================================================================
def example_5_csv(path):
    print("=" * 60)
    print(f"Example 5: Four-model comparison on {path}")
    print("=" * 60)

    report = run(RunConfig(data_path=path))
    print(report.to_frame().to_string(index=False))
    print()


def main():
    configure_logging("WARNING")
    print()
    print("*" * 60)
    print("  SHRINKAGE DEMO")
    print("  Linear, Ridge, LASSO and Elastic Net Regression")
    print(f"  Seed: {SEED}")
    print("*" * 60)
    print()

    X, y = make_data()
    example_1_lasso_path(X, y)
    example_2_ridge_limit(X, y)
    example_3_sklearn(X, y)
    example_4_cross_validation(X, y)

    if len(sys.argv) > 1:
        example_5_csv(sys.argv[1])

    print("Done.")


if __name__ == "__main__":
    main()
