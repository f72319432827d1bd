"""
Table loading, train/test partitioning and design-matrix construction.

A labeled table is a pandas DataFrame with one response column. Nothing in
this module mutates the frame it is given: partitions and design matrices
are independent copies.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from .errors import EmptyInput, InvalidProportion, NonNumericColumn


@dataclass(frozen=True)
class Design:
    """Numeric predictors X (n, p), response y (n,) and the predictor names."""

    X: np.ndarray
    y: np.ndarray
    feature_names: Tuple[str, ...]

    @property
    def n_samples(self) -> int:
        return self.X.shape[0]

    @property
    def n_features(self) -> int:
        return self.X.shape[1]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def encode_categorical(table: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """
    Replace each categorical column with treatment-coded indicator columns.

    The first level in sorted order is the reference and gets no column;
    every other level becomes a 0/1 column named <column><level>, placed
    where the original column was (e.g. Status -> StatusDeveloping).
    """
    columns = [c for c in columns if c in table.columns]
    if not columns:
        return table.copy()

    parts = []
    for name in table.columns:
        if name in columns:
            dummies = pd.get_dummies(
                table[name], prefix=name, prefix_sep="", drop_first=True, dtype=float
            )
            parts.append(dummies)
        else:
            parts.append(table[[name]])
    return pd.concat(parts, axis=1)


def load_table(
    path: str,
    response_column: str,
    drop_columns: Iterable[str] = ("Country",),
    categorical_columns: Iterable[str] = ("Status",),
) -> pd.DataFrame:
    """
    Read a CSV into a labeled table ready for build_design().

    Column names are stripped of surrounding whitespace, identifier columns
    are dropped, rows with any missing value are removed and categorical
    columns are indicator-encoded.
    """
    table = pd.read_csv(path)
    table.columns = [str(c).strip() for c in table.columns]

    if response_column not in table.columns:
        raise KeyError(f"response column {response_column!r} not found in {path}")

    to_drop = [c for c in drop_columns if c in table.columns]
    table = table.drop(columns=to_drop)

    n_before = len(table)
    table = table.dropna().reset_index(drop=True)
    n_dropped = n_before - len(table)
    if n_dropped:
        logger.warning(
            "dropped {} of {} rows with missing values from {}", n_dropped, n_before, path
        )

    if table.empty:
        raise EmptyInput(f"table loaded from {path}", component="load")

    table = encode_categorical(table, categorical_columns)
    logger.info(
        "loaded {} rows x {} columns from {}", len(table), table.shape[1], path
    )
    return table


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------

def permutation(n: int, seed: int) -> np.ndarray:
    """Seeded permutation of range(n) from an explicit generator."""
    rng = np.random.default_rng(seed)
    return rng.permutation(n)


def partition(
    table: pd.DataFrame, proportion: float, seed: int
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Split a table into disjoint train and test subsets.

    The first round(proportion * n) rows of a seeded permutation form the
    training set; the rest form the test set. The same seed always yields
    the same split.

    Args:
        table: Labeled table with at least one row
        proportion: Training fraction, strictly between 0 and 1
        seed: Seed for the permutation

    Returns:
        (train, test) as independent copies
    """
    if not 0.0 < proportion < 1.0:
        raise InvalidProportion(proportion)
    n = len(table)
    if n == 0:
        raise EmptyInput("table", component="partition")

    order = permutation(n, seed)
    n_train = int(round(proportion * n))
    train = table.iloc[order[:n_train]].copy()
    test = table.iloc[order[n_train:]].copy()

    logger.debug("partitioned {} rows into {} train / {} test", n, len(train), len(test))
    return train, test


# ---------------------------------------------------------------------------
# Design matrix
# ---------------------------------------------------------------------------

def _coerce_numeric(column: pd.Series) -> pd.Series:
    if column.dtype == bool:
        return column.astype(float)
    return pd.to_numeric(column, errors="coerce")


def build_design(table: pd.DataFrame, response_column: str) -> Design:
    """
    Extract the response vector and numeric predictor matrix from a table.

    Every column except the response must be numeric or coercible to
    numeric; otherwise NonNumericColumn lists the offenders.
    """
    if response_column not in table.columns:
        raise KeyError(f"response column {response_column!r} not in table")
    if len(table) == 0:
        raise EmptyInput("table", component="design")

    features = table.drop(columns=[response_column])

    bad = []
    converted = {}
    for name in features.columns:
        original = features[name]
        values = _coerce_numeric(original)
        if (values.isna() & original.notna()).any():
            bad.append(str(name))
        else:
            converted[name] = values
    if bad:
        raise NonNumericColumn(bad)

    response = _coerce_numeric(table[response_column])
    if (response.isna() & table[response_column].notna()).any():
        raise NonNumericColumn([response_column])

    X = pd.DataFrame(converted, index=features.index).to_numpy(dtype=float, copy=True)
    y = response.to_numpy(dtype=float, copy=True)

    # rows with missing values are expected to be dropped at load time
    if np.isnan(X).any() or np.isnan(y).any():
        raise ValueError("design matrix or response contains missing values")

    return Design(X=X, y=y, feature_names=tuple(str(c) for c in features.columns))
