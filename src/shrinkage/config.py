"""
Run configuration: pydantic models loaded from YAML and overridable from the CLI.

Validation failures surface as pydantic ValidationError before any data is
read.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Literal, Optional, Union

import numpy as np
import yaml
from loguru import logger
from pydantic import BaseModel, Field, field_validator


def default_lambdas() -> List[float]:
    """10^2 down to 10^-3 in steps of 0.1 on the log10 scale (51 values)."""
    return [float(v) for v in 10.0 ** np.arange(2.0, -3.05, -0.1)]


class LogConfig(BaseModel):
    level: str = "INFO"
    dir: Optional[str] = None
    rotation: str = "1 day"
    retention: str = "30 days"

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        # raises ValueError for names loguru does not know
        logger.level(v)
        return v


class RunConfig(BaseModel):
    """
    Settings for one comparison run.

    `alpha` is either a fixed elastic-net mixing value in [0, 1] or the
    string "search", in which case it is picked by cross-validation over
    `alpha_candidates` values generated with `alpha_search`.
    """

    data_path: Optional[str] = None
    response_column: str = "Life expectancy"
    drop_columns: List[str] = Field(default_factory=lambda: ["Country"])
    categorical_columns: List[str] = Field(default_factory=lambda: ["Status"])

    proportion: float = Field(0.8, gt=0.0, lt=1.0)
    seed: int = 13

    alpha: Union[float, Literal["search"]] = "search"
    alpha_search: Literal["random", "grid"] = "random"
    alpha_candidates: int = Field(10, ge=1)

    lambda_sequence: List[float] = Field(default_factory=default_lambdas)
    folds: int = Field(10, ge=2)
    max_iter: int = Field(100_000, ge=1)
    tol: float = Field(1e-7, gt=0.0)

    log: LogConfig = Field(default_factory=LogConfig)

    @field_validator("alpha")
    @classmethod
    def _alpha_in_unit_interval(cls, v):
        if isinstance(v, str):
            return v
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"alpha must be in [0, 1] or 'search', got {v}")
        return v

    @field_validator("lambda_sequence")
    @classmethod
    def _positive_lambdas(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("lambda_sequence must not be empty")
        if any(lam <= 0 for lam in v):
            raise ValueError("lambda_sequence values must be strictly positive")
        return v

    @classmethod
    def load(cls, path: str) -> "RunConfig":
        """Read a YAML file; missing keys fall back to the defaults."""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return cls(**raw)

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return a validated copy; None-valued overrides are ignored."""
        data: Dict[str, Any] = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self)(**data)
