from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
from sklearn.metrics import accuracy_score, classification_report, confusion_matrix


@dataclass(frozen=True)
class LabelReport:
    accuracy: float
    labels: list[str]
    confusion: np.ndarray
    per_label: dict[str, Any]


def report_predictions(y_true: Sequence[str], y_pred: Sequence[str]) -> LabelReport:
    """
    Multi-class summary of predicted labels against ground truth. Labels are
    the sorted union of both sides so unexpected predictions show up as columns.
    """
    if len(y_true) != len(y_pred):
        raise ValueError(f"got {len(y_true)} ground-truth labels and {len(y_pred)} predictions")
    labels = sorted(set(y_true) | set(y_pred))
    acc = accuracy_score(y_true, y_pred) if len(y_true) else 0.0
    cm = confusion_matrix(y_true, y_pred, labels=labels) if len(y_true) else np.zeros((0, 0), dtype=int)
    per_label = (
        classification_report(y_true, y_pred, labels=labels, output_dict=True, zero_division=0)
        if len(y_true)
        else {}
    )
    return LabelReport(accuracy=float(acc), labels=labels, confusion=cm, per_label=per_label)


def misclassified(paths: Sequence[str], y_true: Sequence[str], y_pred: Sequence[str]) -> list[dict[str, str]]:
    return [
        {"path": p, "expected": t, "predicted": y}
        for p, t, y in zip(paths, y_true, y_pred)
        if t != y
    ]
