from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from ftlab.errors import NotFoundError
from ftlab.schemas import Prediction


def discover_files(root: Path, max_depth: int | None = 1) -> list[Path]:
    """
    Regular files under root, at most max_depth levels down (1 = direct
    children, None = unbounded). Symlinks are neither followed nor returned.
    """
    if not root.is_dir():
        raise NotFoundError(f"folder not found: {root}")

    found: list[Path] = []

    def walk(folder: Path, depth: int) -> None:
        for p in sorted(folder.iterdir()):
            if p.is_symlink():
                continue
            if p.is_file():
                found.append(p)
            elif p.is_dir() and (max_depth is None or depth < max_depth):
                walk(p, depth + 1)

    walk(root, 1)
    return found


def discover_labeled_files(root: Path) -> list[tuple[Path, str]]:
    """
    Recursively find files under root. The ground-truth label is the name of
    the immediate parent directory, ex:
      samples/json/a.json   -> "json"
      samples/python/b.py   -> "python"
    Files directly under root have no label and are skipped.
    """
    pairs: list[tuple[Path, str]] = []
    for p in discover_files(root, max_depth=None):
        if p.parent != root:
            pairs.append((p, p.parent.name.lower()))
    return pairs


def predictions_to_frame(predictions: Mapping[Path, Prediction]) -> pd.DataFrame:
    rows = [
        {"path": str(path), "label": pred.label, "probability": float(pred.probability)}
        for path, pred in sorted(predictions.items(), key=lambda kv: str(kv[0]))
    ]
    return pd.DataFrame(rows, columns=["path", "label", "probability"])


def write_predictions(df: pd.DataFrame, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if out_path.suffix.lower() == ".csv":
        df.to_csv(out_path, index=False)
    else:
        # default to parquet
        df.to_parquet(out_path, index=False)


def read_predictions(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_parquet(path)
