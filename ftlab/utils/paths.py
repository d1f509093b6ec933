from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _p(val: str | None, default: Path) -> Path:
    return Path(os.path.expandvars(val)).expanduser().resolve() if val else default.resolve()


ARTIFACTS_DIR = _p(os.getenv("ARTIFACTS_DIR"), Path.cwd() / "artifacts")
OUTPUTS_DIR = _p(os.getenv("OUTPUTS_DIR"), Path.cwd() / "outputs")
SAMPLES_DIR = _p(os.getenv("SAMPLES_DIR"), Path.cwd() / "samples")

MODEL_PATH = _p(os.getenv("MODEL_PATH"), ARTIFACTS_DIR / "model.onnx")
MODEL_CONFIG_PATH = _p(os.getenv("MODEL_CONFIG"), ARTIFACTS_DIR / "config.json")


def ensure_dirs() -> None:
    for d in (ARTIFACTS_DIR, OUTPUTS_DIR):
        d.mkdir(parents=True, exist_ok=True)
