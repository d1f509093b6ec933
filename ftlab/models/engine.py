from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import joblib
import numpy as np

from ftlab.errors import InferenceError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class InferenceEngine(Protocol):
    """run() takes a (1, vector_size) int array and returns one probability per label."""

    def run(self, features: np.ndarray) -> np.ndarray: ...

    def describe(self) -> dict[str, Any]: ...


def _as_batch(features: np.ndarray) -> np.ndarray:
    X = np.asarray(features)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    return X


class OnnxInferenceEngine:
    """
    onnxruntime session over an exported classifier. The session is created
    once; InferenceSession.run is safe to call from several threads.
    """

    def __init__(self, model_path: Path | str, providers: list[str] | None = None) -> None:
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise NotFoundError(f"model not found: {self.model_path}")

        import onnxruntime as ort  # local import, only needed for ONNX models

        try:
            self.session = ort.InferenceSession(
                str(self.model_path), providers=providers or ["CPUExecutionProvider"]
            )
        except Exception as e:
            raise InferenceError(f"cannot load ONNX model {self.model_path}: {e}") from e
        inp = self.session.get_inputs()[0]
        self.input_name: str = inp.name
        self.input_type: str = inp.type
        logger.debug("loaded ONNX model %s (input %s %s)", self.model_path, inp.name, inp.shape)

    def _input_dtype(self) -> Any:
        # onnx tensor types look like "tensor(int32)"
        if "int64" in self.input_type:
            return np.int64
        if "float" in self.input_type:
            return np.float32
        return np.int32

    def run(self, features: np.ndarray) -> np.ndarray:
        X = _as_batch(features).astype(self._input_dtype())
        try:
            outputs = self.session.run(None, {self.input_name: X})
        except Exception as e:
            raise InferenceError(f"ONNX inference failed: {e}") from e
        return np.asarray(outputs[0])[0]

    def describe(self) -> dict[str, Any]:
        return {
            "runtime": "onnxruntime",
            "model_path": str(self.model_path),
            "inputs": [
                {"name": i.name, "shape": list(i.shape), "type": i.type}
                for i in self.session.get_inputs()
            ],
            "outputs": [
                {"name": o.name, "shape": list(o.shape), "type": o.type}
                for o in self.session.get_outputs()
            ],
        }


class JoblibInferenceEngine:
    """Any joblib-saved estimator exposing predict_proba (scikit-learn style)."""

    def __init__(self, model_path: Path | str) -> None:
        self.model_path = Path(model_path)
        if not self.model_path.exists():
            raise NotFoundError(f"model not found: {self.model_path}")
        self.model = joblib.load(self.model_path)
        if not hasattr(self.model, "predict_proba"):
            raise InferenceError(f"{type(self.model).__name__} does not expose predict_proba")
        logger.debug("loaded joblib model %s (%s)", self.model_path, type(self.model).__name__)

    def run(self, features: np.ndarray) -> np.ndarray:
        X = _as_batch(features)
        try:
            proba = self.model.predict_proba(X)
        except Exception as e:
            raise InferenceError(f"predict_proba failed: {e}") from e
        return np.asarray(proba)[0]

    def describe(self) -> dict[str, Any]:
        base: dict[str, Any] = {
            "runtime": "joblib",
            "model_path": str(self.model_path),
            "estimator": type(self.model).__name__,
        }
        classes = getattr(self.model, "classes_", None)
        if classes is not None:
            base["n_outputs"] = int(len(classes))
        return base


def load_engine(model_path: Path | str) -> InferenceEngine:
    model_path = Path(model_path)
    if model_path.suffix.lower() == ".onnx":
        return OnnxInferenceEngine(model_path)
    if model_path.suffix.lower() in (".joblib", ".pkl"):
        return JoblibInferenceEngine(model_path)
    raise InvalidInputError(f"unsupported model file type: {model_path}")
