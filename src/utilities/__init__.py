"""Cross-project utilities (text output, MLflow tracking)."""

# Keep __init__ lightweight: the MLflow helpers are imported from utilities.mlflow directly.
from utilities.io import (  # noqa: F401
    PlainSession,
    ScalarSession,
    ensure_output_dir,
    load_frames,
    load_table,
    write_field,
    write_table,
)

__all__ = [
    "PlainSession",
    "ScalarSession",
    "ensure_output_dir",
    "load_frames",
    "load_table",
    "write_field",
    "write_table",
]
