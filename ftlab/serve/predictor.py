from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ftlab.dataio.dataset import discover_files
from ftlab.dataio.model_config import ModelConfig, load_model_config
from ftlab.errors import InvalidInputError, NotFoundError
from ftlab.features.byte_source import BufferSource, FileSource, SourceLike, open_source
from ftlab.features.fingerprint import extract_features
from ftlab.features.trivial import trivial_prediction
from ftlab.models.engine import InferenceEngine, load_engine
from ftlab.models.reducer import to_prediction, top_k
from ftlab.schemas import Prediction

logger = logging.getLogger(__name__)


@dataclass
class FileTypePredictor:
    """
    Classifies files and buffers from a sampled byte fingerprint.

    config and engine are shared read-only between calls; every call owns its
    own source handle and feature vector, so predict() can run on several
    threads at once.
    """

    config: ModelConfig
    engine: InferenceEngine

    @classmethod
    def from_paths(cls, model_path: Path | str, config_path: Path | str) -> FileTypePredictor:
        config = load_model_config(config_path)
        engine = load_engine(model_path)
        return cls(config=config, engine=engine)

    def predict(self, source: SourceLike) -> Prediction:
        prediction, _ = self._predict(source, debug=False)
        return prediction

    def predict_bytes(self, data: bytes) -> Prediction:
        return self.predict(BufferSource(data))

    def predict_debug(self, source: SourceLike) -> tuple[Prediction, dict[str, Any]]:
        """
        Returns (prediction, debug_dict). debug_dict keys:
          - decision_rule: 'empty', 'min_size' or 'model'
          - size: source length in bytes
          - top: best labels with probabilities (model path only)
        """
        return self._predict(source, debug=True)

    def _predict(self, source: SourceLike, *, debug: bool) -> tuple[Prediction, dict[str, Any]]:
        src = open_source(source)
        owned = src is not source
        try:
            return self._predict_source(src, debug=debug)
        finally:
            if owned and isinstance(src, FileSource):
                src.close()

    def _predict_source(
        self, src: BufferSource | FileSource, *, debug: bool
    ) -> tuple[Prediction, dict[str, Any]]:
        sampling = self.config.sampling
        size = src.size()
        dbg: dict[str, Any] = {"size": size}

        trivial = trivial_prediction(size, sampling)
        if trivial is not None:
            logger.debug("short-circuit %s for %d byte input", trivial.label, size)
            dbg["decision_rule"] = "empty" if size == 0 else "min_size"
            return trivial, dbg

        features = extract_features(src, sampling)
        probabilities = self.engine.run(features.reshape(1, sampling.vector_size))
        prediction = to_prediction(probabilities, self.config.labels)

        dbg["decision_rule"] = "model"
        if debug:
            dbg["top"] = top_k(probabilities, self.config.labels, k=3)
        return prediction, dbg

    def predict_many(
        self, sources: Iterable[SourceLike]
    ) -> dict[Path | BufferSource, Prediction]:
        """
        Predict every source. Paths and open FileSources are keyed by their
        path, in-memory BufferSources by the source object itself. Raw bytes
        have no identity to key on and are rejected; wrap them in a
        BufferSource. Directories are skipped; the first failing source aborts
        the whole batch.
        """
        predictions: dict[Path | BufferSource, Prediction] = {}
        for source in sources:
            if isinstance(source, BufferSource):
                predictions[source] = self.predict(source)
                continue
            if isinstance(source, FileSource):
                predictions[source.path] = self.predict(source)
                continue
            if isinstance(source, (bytes, bytearray, memoryview)):
                raise InvalidInputError("predict_many needs BufferSource objects for in-memory data")
            path = Path(source)
            if path.is_dir():
                continue
            predictions[path] = self.predict(path)
        return predictions

    def predict_from_directory(self, folder: Path | str, recursive: bool = False) -> dict[Path, Prediction]:
        folder = Path(folder)
        check_folder(folder)
        files = discover_files(folder, max_depth=None if recursive else 1)
        return self.predict_many(files)

    def model_info(self) -> dict[str, Any]:
        sampling = self.config.sampling
        base: dict[str, Any] = {
            "sampling": {
                "beg_size": sampling.beg_size,
                "mid_size": sampling.mid_size,
                "end_size": sampling.end_size,
                "padding_token": sampling.padding_token,
                "min_file_size_for_dl": sampling.min_file_size_for_dl,
                "vector_size": sampling.vector_size,
            },
            "n_labels": self.config.n_labels,
        }
        base["engine"] = self.engine.describe()
        return base


def check_folder(folder: Path) -> None:
    if not folder.exists():
        logger.warning("Provided path does not exist: %s", folder.absolute())
        raise InvalidInputError(f"path does not exist: {folder}")
    if not folder.is_dir():
        logger.warning("Provided path is not a folder: %s", folder.absolute())
        raise InvalidInputError(f"path is not a folder: {folder}")


_CACHE: FileTypePredictor | None = None
_CACHE_LOCK = threading.Lock()


def load_predictor() -> FileTypePredictor:
    """Process-wide predictor built from MODEL_PATH / MODEL_CONFIG, created once."""
    global _CACHE
    if _CACHE is not None:
        return _CACHE
    with _CACHE_LOCK:
        if _CACHE is None:
            from ftlab.utils.paths import MODEL_CONFIG_PATH, MODEL_PATH

            _CACHE = FileTypePredictor.from_paths(MODEL_PATH, MODEL_CONFIG_PATH)
    return _CACHE
