from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
import pandas as pd

from src.data.validate import assert_projection_inputs


def project_population(matrix, n0, tmax: int) -> np.ndarray:
    """Iterate the age-structured projection n(t) = n(t-1) @ matrix.

    Returns a (classes x tmax) array whose first column is n0.
    """

    if tmax < 1:
        raise ValueError(f"tmax must be >= 1; got {tmax}")
    assert_projection_inputs(matrix, n0)

    A = np.asarray(matrix, dtype=float)
    N = np.zeros((A.shape[0], tmax), dtype=float)
    N[:, 0] = np.asarray(n0, dtype=float)
    for t in range(1, tmax):
        N[:, t] = N[:, t - 1] @ A
    return N


def population_frame(N: np.ndarray, age_classes: Iterable[str]) -> pd.DataFrame:
    age_classes = list(age_classes)
    if len(age_classes) != N.shape[0]:
        raise ValueError(f"Expected {N.shape[0]} age class names but got {len(age_classes)}: {age_classes}")

    frame = pd.DataFrame(N.T, columns=age_classes)
    frame["total"] = frame[age_classes].sum(axis=1)
    frame["t"] = np.arange(1, N.shape[1] + 1)
    return frame


def age_proportions_long(frame: pd.DataFrame) -> pd.DataFrame:
    long = frame.melt(id_vars=["t", "total"], var_name="age_class", value_name="value")
    long["proportion"] = long["value"] / long["total"]
    return long.sort_values(["age_class", "t"], kind="mergesort").reset_index(drop=True)


def stable_start(N: np.ndarray, total: float) -> np.ndarray:
    final = N[:, -1]
    s = float(final.sum())
    if s <= 0:
        raise ValueError("Final population is zero; no age distribution to rescale.")
    return total * final / s


def dominant_eigen(matrix) -> Tuple[float, np.ndarray]:
    """Dominant eigenvalue and stable age distribution (sums to 1).

    Under the row-vector convention the stable distribution is the left
    eigenvector of the matrix, i.e. the right eigenvector of its transpose.
    """

    A = np.asarray(matrix, dtype=float)
    values, vectors = np.linalg.eig(A.T)
    i = int(np.argmax(np.abs(values)))
    lam = float(np.real(values[i]))
    w = np.abs(np.real(vectors[:, i]))
    return lam, w / w.sum()
