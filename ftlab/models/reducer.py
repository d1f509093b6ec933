from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ftlab.errors import InvalidInputError
from ftlab.schemas import Prediction


def reduce_probabilities(probabilities, n_labels: int) -> tuple[int, float]:
    """
    Index and value of the largest probability. The first index holding the
    maximum wins; NaN entries are ignored.
    """
    probs = np.asarray(probabilities, dtype=np.float64).reshape(-1)
    if probs.size == 0:
        raise InvalidInputError("probability vector is empty")
    if probs.size != n_labels:
        raise InvalidInputError(
            f"probability vector has {probs.size} entries, label space has {n_labels}"
        )

    best_idx = 0
    best = -np.inf
    for i, p in enumerate(probs):
        if p > best:
            best = p
            best_idx = i
    return best_idx, float(probs[best_idx])


def to_prediction(probabilities, labels: Sequence[str]) -> Prediction:
    idx, value = reduce_probabilities(probabilities, len(labels))
    return Prediction(labels[idx], value)


def top_k(probabilities, labels: Sequence[str], k: int = 3) -> list[dict[str, float | str]]:
    probs = np.asarray(probabilities, dtype=np.float64).reshape(-1)
    # stable sort keeps the first-index tie-break
    order = np.argsort(-np.nan_to_num(probs, nan=-np.inf), kind="stable")[:k]
    return [{"label": labels[i], "probability": float(probs[i])} for i in order]
