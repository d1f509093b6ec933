from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ftlab.errors import ConfigError, NotFoundError

REQUIRED_INT_FIELDS = (
    "beg_size",
    "mid_size",
    "end_size",
    "padding_token",
    "min_file_size_for_dl",
)
LABELS_FIELD = "target_labels_space"


@dataclass(frozen=True)
class SamplingConfig:
    beg_size: int
    mid_size: int
    end_size: int
    padding_token: int
    min_file_size_for_dl: int

    @property
    def vector_size(self) -> int:
        return self.beg_size + self.mid_size + self.end_size


@dataclass(frozen=True)
class ModelConfig:
    sampling: SamplingConfig
    labels: tuple[str, ...]

    @property
    def n_labels(self) -> int:
        return len(self.labels)


def model_config_from_dict(doc: dict[str, Any]) -> ModelConfig:
    """
    Build a ModelConfig from an already parsed configuration document.
    Every field must be present; sizes must be integers.
    """
    if not isinstance(doc, dict):
        raise ConfigError(f"configuration must be a JSON object, got {type(doc).__name__}")

    missing = [f for f in (LABELS_FIELD, *REQUIRED_INT_FIELDS) if f not in doc or doc[f] is None]
    if missing:
        raise ConfigError(f"configuration missing fields: {', '.join(missing)}")

    values: dict[str, int] = {}
    for name in REQUIRED_INT_FIELDS:
        raw = doc[name]
        if isinstance(raw, bool):
            raise ConfigError(f"'{name}' must be an integer, got {raw!r}")
        try:
            values[name] = int(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'{name}' must be an integer, got {raw!r}") from e

    labels = doc[LABELS_FIELD]
    if not isinstance(labels, list):
        raise ConfigError(f"'{LABELS_FIELD}' must be a list of strings")

    return ModelConfig(
        sampling=SamplingConfig(**values),
        labels=tuple(str(label) for label in labels),
    )


def load_model_config(path: Path | str) -> ModelConfig:
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"model config not found: {path}")
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"cannot parse model config {path}: {e}") from e
    return model_config_from_dict(doc)
