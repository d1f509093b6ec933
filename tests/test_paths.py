from __future__ import annotations

import importlib
import threading
import time

import joblib
import numpy as np
import pytest
from sklearn.dummy import DummyClassifier

import ftlab.serve.predictor as predictor_module
import ftlab.utils.paths as paths
from ftlab.serve.predictor import FileTypePredictor, load_predictor


@pytest.fixture
def env_paths(tmp_path, monkeypatch, config_file):
    model_path = tmp_path / "artifacts" / "model.joblib"
    model_path.parent.mkdir()
    clf = DummyClassifier(strategy="prior").fit(np.zeros((4, 6)), np.array([0, 1, 2, 3]))
    joblib.dump(clf, model_path)

    monkeypatch.setenv("ARTIFACTS_DIR", str(tmp_path / "artifacts"))
    monkeypatch.setenv("OUTPUTS_DIR", str(tmp_path / "outputs"))
    monkeypatch.setenv("SAMPLES_DIR", str(tmp_path / "samples"))
    monkeypatch.setenv("MODEL_PATH", "${ARTIFACTS_DIR}/model.joblib")
    monkeypatch.setenv("MODEL_CONFIG", str(config_file))
    importlib.reload(paths)
    monkeypatch.setattr(predictor_module, "_CACHE", None)
    yield model_path
    monkeypatch.undo()
    importlib.reload(paths)


def test_env_paths_are_expanded(env_paths, tmp_path, config_file):
    assert paths.MODEL_PATH == env_paths.resolve()
    assert paths.MODEL_CONFIG_PATH == config_file.resolve()
    assert paths.SAMPLES_DIR == (tmp_path / "samples").resolve()


def test_model_path_defaults_under_artifacts(env_paths, monkeypatch):
    monkeypatch.delenv("MODEL_PATH")
    importlib.reload(paths)
    assert paths.MODEL_PATH == paths.ARTIFACTS_DIR / "model.onnx"


def test_ensure_dirs(env_paths):
    assert not paths.OUTPUTS_DIR.exists()
    paths.ensure_dirs()
    assert paths.OUTPUTS_DIR.is_dir()
    assert paths.ARTIFACTS_DIR.is_dir()


def test_load_predictor_builds_once(env_paths, monkeypatch, config_file):
    original = FileTypePredictor.from_paths.__func__
    calls: list[tuple] = []

    def counting(cls, model_path, config_path):
        calls.append((model_path, config_path))
        # widen the window in which a second thread could slip in
        time.sleep(0.05)
        return original(cls, model_path, config_path)

    monkeypatch.setattr(FileTypePredictor, "from_paths", classmethod(counting))

    n = 8
    barrier = threading.Barrier(n)
    results: list[FileTypePredictor] = []
    results_lock = threading.Lock()

    def work() -> None:
        barrier.wait()
        p = load_predictor()
        with results_lock:
            results.append(p)

    threads = [threading.Thread(target=work) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert calls[0] == (env_paths.resolve(), config_file.resolve())
    assert len(results) == n
    assert all(p is results[0] for p in results)
    assert load_predictor() is results[0]
    assert results[0].predict_bytes(b"0123456789").label == "a"
