from __future__ import annotations

import re
from typing import Dict

import pandas as pd

from src.config import LIFE_TABLE_COLUMNS, LIFE_TABLE_FECUNDITY_COL, LIFE_TABLE_PRODUCT_COL, LIFE_TABLE_SURVIVAL_COL


_NORMALIZE_RE = re.compile(r"[^0-9a-zA-Z]+")


def _normalize_name(name: str) -> str:
    return _NORMALIZE_RE.sub("_", name).strip("_").lower()


def normalize_column_names(df: pd.DataFrame) -> Dict[str, str]:
    """Return a normalized-name -> exact-name mapping for df columns.

    This does not modify the DataFrame. It exists to support resilient lookups
    across files where column casing/spacing might differ ('P(x)', 'p (x)', 'P_x').
    """

    mapping: Dict[str, str] = {}
    collisions: Dict[str, list[str]] = {}

    for col in df.columns.astype(str).tolist():
        norm = _normalize_name(col)
        if norm in mapping and mapping[norm] != col:
            collisions.setdefault(norm, sorted({mapping[norm], col}))
        mapping[norm] = col

    if collisions:
        raise ValueError(f"Normalized column name collisions: {collisions}")

    return mapping


def resolve_life_table_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df with the life-table columns renamed to their canonical spelling.

    Columns that cannot be matched are left alone; validation reports them later.
    """

    mapping = normalize_column_names(df)
    renames = {}
    for canonical in LIFE_TABLE_COLUMNS:
        found = mapping.get(_normalize_name(canonical))
        if found is not None and found != canonical:
            renames[found] = canonical
    return df.rename(columns=renames)


def add_survival_fecundity_product(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out[LIFE_TABLE_PRODUCT_COL] = out[LIFE_TABLE_SURVIVAL_COL] * out[LIFE_TABLE_FECUNDITY_COL]
    return out
