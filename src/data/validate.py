from typing import Iterable

import numpy as np
import pandas as pd

from src.config import LIFE_TABLE_AGE_COL, LIFE_TABLE_FECUNDITY_COL, LIFE_TABLE_SURVIVAL_COL


def assert_required_columns(df, required: Iterable[str]) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def assert_projection_inputs(matrix, n0) -> None:
    A = np.asarray(matrix, dtype=float)
    n = np.asarray(n0, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Projection matrix must be square 2-D; got shape {A.shape}")
    if n.ndim != 1 or n.size != A.shape[0]:
        raise ValueError(f"Initial vector of shape {n.shape} does not match projection matrix of shape {A.shape}")
    if np.any(A < 0) or not np.all(np.isfinite(A)):
        raise ValueError("Projection matrix entries must be finite and non-negative.")
    if np.any(n < 0) or not np.all(np.isfinite(n)):
        raise ValueError("Initial class sizes must be finite and non-negative.")


def assert_life_table(df: pd.DataFrame) -> None:
    """Check a cohort life table: ages, survivorship P(x) and fecundity m(x).

    Raises ValueError describing the first problem found.
    """

    cols = [LIFE_TABLE_AGE_COL, LIFE_TABLE_SURVIVAL_COL, LIFE_TABLE_FECUNDITY_COL]
    assert_required_columns(df, cols)

    if df.empty:
        raise ValueError("Life table is empty.")

    nan_cols = [c for c in cols if df[c].isna().any()]
    if nan_cols:
        raise ValueError(f"Life table has missing values in: {nan_cols}")

    x = df[LIFE_TABLE_AGE_COL].to_numpy(dtype=float)
    lx = df[LIFE_TABLE_SURVIVAL_COL].to_numpy(dtype=float)
    mx = df[LIFE_TABLE_FECUNDITY_COL].to_numpy(dtype=float)

    if np.any(x < 0):
        raise ValueError("Ages must be non-negative.")
    if np.any(np.diff(x) <= 0):
        raise ValueError("Ages must be strictly increasing.")
    if np.any(lx < 0) or np.any(lx > 1):
        raise ValueError(f"Survivorship {LIFE_TABLE_SURVIVAL_COL} must lie in [0, 1].")
    if np.any(np.diff(lx) > 0):
        raise ValueError(f"Survivorship {LIFE_TABLE_SURVIVAL_COL} must be non-increasing with age.")
    if np.any(mx < 0):
        raise ValueError(f"Fecundity {LIFE_TABLE_FECUNDITY_COL} must be non-negative.")
