"""
Plots for heat storage runs.

Uses the seaborn darkgrid theme; figures are saved to disk and closed.
"""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from utilities.io import load_frames

log = logging.getLogger(__name__)


def plot_mms_convergence(stats_df: pd.DataFrame, output_path: Path) -> Path:
    """Log-log plot of MMS error against cell count with a first-order guide."""
    if stats_df.empty:
        log.warning("No MMS statistics available for convergence plot")
        return None

    sns.set_theme(style="darkgrid")
    fig, ax = plt.subplots()

    n = stats_df["num_cells"].to_numpy(dtype=float)
    error = stats_df["error"].to_numpy(dtype=float)
    ax.loglog(n, error, "o-", label="max error")

    diff = stats_df["diff"].to_numpy(dtype=float)
    mask = diff > 0
    if mask.any():
        ax.loglog(n[mask], diff[mask], "s--", label="difference to previous level")

    # O(h) reference through the coarsest point
    ax.loglog(n, error[0] * n[0] / n, ":", color="gray", label=r"$\mathcal{O}(h)$")

    ax.set_xlabel("Number of cells")
    ax.set_ylabel("Error")
    ax.set_title("MMS convergence")
    ax.legend(frameon=True)

    output_path = Path(output_path)
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)
    log.info(f"Saved convergence plot to {output_path}")
    return output_path


def plot_fields(field_file: Path, output_path: Path, max_frames: int = 6) -> Path:
    """Fluid and solid temperature profiles for a subset of frames of a field file."""
    frames = load_frames(field_file)
    if not frames:
        log.warning(f"No frames in {field_file}")
        return None

    sns.set_theme(style="darkgrid")
    fig, (ax_f, ax_s) = plt.subplots(1, 2, figsize=(10, 4), sharey=True)

    indices = np.unique(np.linspace(0, len(frames) - 1, min(max_frames, len(frames))).astype(int))
    palette = sns.color_palette("rocket", len(indices))
    for color, i in zip(palette, indices):
        _, t, df = frames[i]
        ax_f.plot(df["x"], df["Tf"], color=color, label=f"t={t:.3g}")
        ax_s.plot(df["x"], df["Ts"], color=color, label=f"t={t:.3g}")

    ax_f.set_title("Fluid temperature")
    ax_s.set_title("Solid temperature")
    for ax in (ax_f, ax_s):
        ax.set_xlabel("x")
    ax_f.set_ylabel("T")
    ax_s.legend(frameon=True)

    output_path = Path(output_path)
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)
    log.info(f"Saved field plot to {output_path}")
    return output_path
