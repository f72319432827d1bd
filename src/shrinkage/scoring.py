"""Held-out scoring: R^2 and mean squared error."""

from typing import NamedTuple

import numpy as np

from .errors import DegenerateResponse, EmptyInput, LengthMismatch


class Score(NamedTuple):
    r_squared: float
    mse: float


def score(y_true: np.ndarray, y_pred: np.ndarray) -> Score:
    """
    Compute R^2 (coefficient of determination) and mean squared error.

    R^2 = 1 - SS_res / SS_tot

    Args:
        y_true: Observed values, shape (n_samples,)
        y_pred: Predicted values, shape (n_samples,)

    Returns:
        Score(r_squared, mse). R^2 is 1.0 for a perfect predictor, 0.0 for
        the mean predictor and can be negative.
    """
    y_true = np.asarray(y_true, dtype=float).ravel()
    y_pred = np.asarray(y_pred, dtype=float).ravel()

    if y_true.shape[0] != y_pred.shape[0]:
        raise LengthMismatch(y_true.shape[0], y_pred.shape[0])
    if y_true.shape[0] == 0:
        raise EmptyInput("response", component="scoring")
    if np.all(y_true == y_true[0]):
        raise DegenerateResponse(float(y_true[0]))

    ss_res = np.sum((y_true - y_pred) ** 2)
    ss_tot = np.sum((y_true - np.mean(y_true)) ** 2)

    return Score(
        r_squared=float(1.0 - ss_res / ss_tot),
        mse=float(ss_res / y_true.shape[0]),
    )
