"""Shared norms and convergence-rate utilities."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.stats import linregress


# -----------------------------------------------------------------------------
# Norms / errors
# -----------------------------------------------------------------------------


def calc_diff(first: np.ndarray, second: np.ndarray) -> float:
    """Maximum absolute difference between two cell fields on the same mesh."""
    return float(np.max(np.abs(first - second)))


# -----------------------------------------------------------------------------
# Convergence rates
# -----------------------------------------------------------------------------


def convergence_orders(num_cells: Sequence[int], errors: Sequence[float]) -> list[float]:
    """Observed order between adjacent refinement levels.

    p_i = log(e_{i-1} / e_i) / log(N_i / N_{i-1})
    """
    orders = []
    for (n0, e0), (n1, e1) in zip(zip(num_cells, errors), zip(num_cells[1:], errors[1:])):
        if e0 <= 0 or e1 <= 0 or n0 == n1:
            orders.append(float("nan"))
        else:
            orders.append(float(np.log(e0 / e1) / np.log(n1 / n0)))
    return orders


def fitted_order(num_cells: Sequence[int], errors: Sequence[float]) -> float:
    """Least-squares slope of log(error) against log(h) ~ -log(N)."""
    # Needs at least two distinct mesh sizes
    if len(set(num_cells)) < 2:
        return float("nan")
    fit = linregress(-np.log(np.asarray(num_cells, dtype=float)),
                     np.log(np.asarray(errors, dtype=float)))
    return float(fit.slope)
