from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm


@dataclass(frozen=True)
class GrowthFit:
    intercept: float
    r: float
    lam: float
    initial_size: float
    r_ci95_low: float
    r_ci95_high: float
    r_squared: float
    n_obs: int


def total_series(N: np.ndarray) -> pd.DataFrame:
    return pd.DataFrame({"t": np.arange(N.shape[1]), "N": N.sum(axis=0)})


def fit_log_linear(df: pd.DataFrame, time_col: str = "t", size_col: str = "N") -> GrowthFit:
    """Fit log(N) = a + r t by ordinary least squares.

    The slope r is the intrinsic rate of increase; exp(r) the per-step
    multiplication factor and exp(a) the fitted size at t = 0.
    """

    t = df[time_col].to_numpy(dtype=float)
    n = df[size_col].to_numpy(dtype=float)
    if t.size < 3:
        raise ValueError(f"Need at least 3 time points to fit a growth rate; got {t.size}")
    if np.any(~np.isfinite(n)) or np.any(n <= 0):
        raise ValueError(f"{size_col} must be finite and positive to fit on the log scale.")

    X = sm.add_constant(t, has_constant="add")
    model = sm.OLS(np.log(n), X).fit()
    intercept, r = (float(v) for v in model.params)
    ci = np.asarray(model.conf_int(alpha=0.05))

    # A constant series has zero total variance, so statsmodels reports nan.
    r_squared = float(model.rsquared) if np.isfinite(model.rsquared) else 1.0

    return GrowthFit(
        intercept=intercept,
        r=r,
        lam=float(np.exp(r)),
        initial_size=float(np.exp(intercept)),
        r_ci95_low=float(ci[1, 0]),
        r_ci95_high=float(ci[1, 1]),
        r_squared=r_squared,
        n_obs=int(t.size),
    )


def predict_sizes(fit: GrowthFit, t) -> np.ndarray:
    return np.exp(fit.intercept + fit.r * np.asarray(t, dtype=float))


def coefficients_table(fit: GrowthFit, label: str) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "start": label,
                "intercept": fit.intercept,
                "r": fit.r,
                "lambda": fit.lam,
                "exp_intercept": fit.initial_size,
                "r_ci95_low": fit.r_ci95_low,
                "r_ci95_high": fit.r_ci95_high,
                "r_squared": fit.r_squared,
                "n_obs": fit.n_obs,
            }
        ]
    )
