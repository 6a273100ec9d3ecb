from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.optimize import brentq

from src.config import (
    LIFE_TABLE_AGE_COL,
    LIFE_TABLE_FECUNDITY_COL,
    LIFE_TABLE_PRODUCT_COL,
    LIFE_TABLE_SURVIVAL_COL,
)
from src.data.coding import add_survival_fecundity_product
from src.data.validate import assert_life_table


@dataclass(frozen=True)
class LifeTableSummary:
    net_reproductive_rate: float
    generation_time: float
    r_approx: float
    r_euler_lotka: float
    lam: float
    doubling_time: float


def _arrays(df: pd.DataFrame):
    assert_life_table(df)
    x = df[LIFE_TABLE_AGE_COL].to_numpy(dtype=float)
    lx = df[LIFE_TABLE_SURVIVAL_COL].to_numpy(dtype=float)
    mx = df[LIFE_TABLE_FECUNDITY_COL].to_numpy(dtype=float)
    return x, lx * mx


def _generation_time(x: np.ndarray, lxmx: np.ndarray) -> float:
    r0 = float(np.sum(lxmx))
    if r0 <= 0:
        raise ValueError("Generation time is undefined when the net reproductive rate is zero.")
    return float(np.sum(x * lxmx) / r0)


def _euler_lotka_residual(r: float, x: np.ndarray, lxmx: np.ndarray) -> float:
    return float(np.sum(np.exp(-r * x) * lxmx) - 1.0)


def _euler_lotka_root(x: np.ndarray, lxmx: np.ndarray, bracket_width: float, max_expansions: int) -> float:
    if np.sum(lxmx) <= 0:
        raise ValueError("Euler-Lotka equation has no root when the net reproductive rate is zero.")
    if not np.any((lxmx > 0) & (x > 0)):
        raise ValueError("Euler-Lotka equation needs reproduction at a positive age.")

    lo, hi = -bracket_width, bracket_width
    for _ in range(max_expansions):
        f_lo = _euler_lotka_residual(lo, x, lxmx)
        f_hi = _euler_lotka_residual(hi, x, lxmx)
        if f_lo >= 0 >= f_hi:
            return float(brentq(_euler_lotka_residual, lo, hi, args=(x, lxmx), xtol=1e-12))
        if f_lo < 0:
            lo *= 2.0
        if f_hi > 0:
            hi *= 2.0
    raise ValueError(f"Could not bracket the Euler-Lotka root within [{lo}, {hi}].")


def net_reproductive_rate(df: pd.DataFrame) -> float:
    """R0 = sum over ages of P(x) m(x): expected offspring per newborn over a lifetime."""

    _, lxmx = _arrays(df)
    return float(np.sum(lxmx))


def generation_time(df: pd.DataFrame) -> float:
    """Cohort generation time T = sum(x P(x) m(x)) / R0."""

    return _generation_time(*_arrays(df))


def approximate_growth_rate(df: pd.DataFrame) -> float:
    """r ~= ln(R0) / T, the usual first approximation to the Euler-Lotka root."""

    x, lxmx = _arrays(df)
    return float(np.log(np.sum(lxmx)) / _generation_time(x, lxmx))


def euler_lotka_rate(df: pd.DataFrame, *, bracket_width: float = 1.0, max_expansions: int = 60) -> float:
    """Solve sum(exp(-r x) P(x) m(x)) = 1 for the intrinsic rate of increase r.

    The left-hand side is strictly decreasing in r whenever some reproduction
    happens at a positive age, so a sign-changing bracket is grown outward from
    [-w, w] and the root found with Brent's method. A newborn contribution
    P(0) m(0) >= 1 keeps the left-hand side above 1 for every r, and no bracket exists.
    """

    x, lxmx = _arrays(df)
    return _euler_lotka_root(x, lxmx, bracket_width, max_expansions)


def summarize_life_table(df: pd.DataFrame) -> LifeTableSummary:
    x, lxmx = _arrays(df)
    r0 = float(np.sum(lxmx))
    T = _generation_time(x, lxmx)
    r = _euler_lotka_root(x, lxmx, 1.0, 60)
    return LifeTableSummary(
        net_reproductive_rate=r0,
        generation_time=T,
        r_approx=float(np.log(r0) / T),
        r_euler_lotka=r,
        lam=float(np.exp(r)),
        doubling_time=float(np.log(2.0) / r) if r > 0 else float("inf"),
    )


def life_table_long(df: pd.DataFrame) -> pd.DataFrame:
    wide = add_survival_fecundity_product(df)
    cols = [LIFE_TABLE_AGE_COL, LIFE_TABLE_SURVIVAL_COL, LIFE_TABLE_FECUNDITY_COL, LIFE_TABLE_PRODUCT_COL]
    return wide[cols].melt(id_vars=[LIFE_TABLE_AGE_COL], var_name="variable", value_name="value")
