"""Plain-text output for cell fields, scalar time series and statistics tables.

All tables are space separated with a header row naming each column and
floats written with 20 significant digits.
"""

from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import numpy as np
import pandas as pd


FLOAT_FORMAT = "%.20g"

# (column name, function returning a per-cell array or a scalar)
Content = Sequence[Tuple[str, Callable[[], object]]]


def ensure_output_dir(path) -> Path:
    """Create ``path`` (and parents) if needed and return it."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_table(df: pd.DataFrame, filepath, append: bool = False):
    """Write a DataFrame as a space separated table.

    With ``append=True`` the rows are appended without repeating the header.
    """
    df.to_csv(
        filepath,
        sep=" ",
        index=False,
        header=not append,
        mode="a" if append else "w",
        float_format=FLOAT_FORMAT,
    )


def write_field(x: np.ndarray, u: np.ndarray, filepath):
    """Write a cell field as two columns: cell center ``x`` and value ``u``."""
    write_table(pd.DataFrame({"x": np.asarray(x), "u": np.asarray(u)}), filepath)


def load_table(filepath) -> pd.DataFrame:
    """Read a table written by :func:`write_table` or :class:`ScalarSession`."""
    return pd.read_csv(filepath, sep=" ", float_precision="round_trip")


def load_frames(filepath) -> List[Tuple[str, float, pd.DataFrame]]:
    """Read all frames of a :class:`PlainSession` file as (title, time, table)."""
    frames = []
    blocks = Path(filepath).read_text().strip().split("\n\n")
    for block in blocks:
        lines = block.strip().splitlines()
        if not lines:
            continue
        title, time_str = lines[0].lstrip("# ").split(" t=")
        header = lines[1].split()
        rows = [[float(v) for v in line.split()] for line in lines[2:]]
        frames.append((title, float(time_str), pd.DataFrame(rows, columns=header)))
    return frames


class PlainSession:
    """Writes per-cell columns as successive frames to one text file.

    Each frame is a comment line ``# <title> t=<time>``, a header row and
    one row per cell; frames are separated by a blank line. The file is
    truncated when the session is created.
    """

    def __init__(self, content: Content, filename):
        self.content = list(content)
        self.filename = Path(filename)
        self.frames_written = 0
        self.filename.write_text("")

    def write(self, time: float, title: str):
        df = pd.DataFrame({name: np.asarray(func()) for name, func in self.content})
        with open(self.filename, "a") as f:
            if self.frames_written:
                f.write("\n")
            f.write(f"# {title} t={float(time)!r}\n")
            df.to_csv(f, sep=" ", index=False, float_format=FLOAT_FORMAT)
        self.frames_written += 1


class ScalarSession:
    """Writes one row of scalar columns per call, header on the first row."""

    def __init__(self, content: Content, filename):
        self.content = list(content)
        self.filename = Path(filename)
        self.rows_written = 0
        self.filename.write_text("")

    def write(self):
        row = pd.DataFrame([{name: func() for name, func in self.content}])
        write_table(row, self.filename, append=self.rows_written > 0)
        self.rows_written += 1
