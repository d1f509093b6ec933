from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
import pytest

from ftlab.dataio.model_config import ModelConfig, SamplingConfig
from ftlab.serve.predictor import FileTypePredictor

LABELS = ("a", "b", "c", "d")


class StubEngine:
    """Returns a fixed probability vector and records the features it saw."""

    def __init__(self, probabilities, fail: Exception | None = None) -> None:
        self.probabilities = np.asarray(probabilities, dtype=np.float32)
        self.fail = fail
        self.calls: list[np.ndarray] = []

    def run(self, features: np.ndarray) -> np.ndarray:
        self.calls.append(np.array(features, copy=True))
        if self.fail is not None:
            raise self.fail
        return self.probabilities

    def describe(self) -> dict[str, Any]:
        return {"runtime": "stub"}


@pytest.fixture
def sampling() -> SamplingConfig:
    return SamplingConfig(beg_size=2, mid_size=2, end_size=2, padding_token=0, min_file_size_for_dl=3)


@pytest.fixture
def model_config(sampling) -> ModelConfig:
    return ModelConfig(sampling=sampling, labels=LABELS)


@pytest.fixture
def engine() -> StubEngine:
    return StubEngine([0.2, 0.5, 0.5, 0.1])


@pytest.fixture
def predictor(model_config, engine) -> FileTypePredictor:
    return FileTypePredictor(config=model_config, engine=engine)


@pytest.fixture
def config_doc() -> dict[str, Any]:
    return {
        "target_labels_space": list(LABELS),
        "beg_size": 2,
        "mid_size": 2,
        "end_size": 2,
        "padding_token": 0,
        "min_file_size_for_dl": 3,
    }


@pytest.fixture
def config_file(tmp_path: Path, config_doc) -> Path:
    p = tmp_path / "config.json"
    p.write_text(json.dumps(config_doc))
    return p


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """
    root/
      top.bin
      note.txt
      sub/
        nested.bin
    """
    root = tmp_path / "tree"
    (root / "sub").mkdir(parents=True)
    (root / "top.bin").write_bytes(bytes(range(10, 60)))
    (root / "note.txt").write_bytes(b"hello world, this is text")
    (root / "sub" / "nested.bin").write_bytes(bytes(range(100, 150)))
    return root
