from __future__ import annotations

import os

import pytest

from ftlab.dataio.dataset import (
    discover_files,
    discover_labeled_files,
    predictions_to_frame,
    read_predictions,
    write_predictions,
)
from ftlab.errors import NotFoundError
from ftlab.schemas import Prediction


def test_depth_one(tree):
    assert set(discover_files(tree, max_depth=1)) == {tree / "top.bin", tree / "note.txt"}


def test_unbounded(tree):
    (tree / "sub" / "deeper").mkdir()
    (tree / "sub" / "deeper" / "x.dat").write_bytes(b"x")
    found = set(discover_files(tree, max_depth=None))
    assert found == {
        tree / "top.bin",
        tree / "note.txt",
        tree / "sub" / "nested.bin",
        tree / "sub" / "deeper" / "x.dat",
    }


def test_depth_two_stops(tree):
    (tree / "sub" / "deeper").mkdir()
    (tree / "sub" / "deeper" / "x.dat").write_bytes(b"x")
    found = set(discover_files(tree, max_depth=2))
    assert tree / "sub" / "nested.bin" in found
    assert tree / "sub" / "deeper" / "x.dat" not in found


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
def test_symlinks_are_not_regular_files(tree):
    try:
        (tree / "link.bin").symlink_to(tree / "top.bin")
    except OSError:
        pytest.skip("symlinks not permitted")
    assert tree / "link.bin" not in discover_files(tree)


def test_labeled_files(tmp_path):
    (tmp_path / "json").mkdir()
    (tmp_path / "Python").mkdir()
    (tmp_path / "json" / "a.json").write_text("{}")
    (tmp_path / "Python" / "b.py").write_text("print(1)")
    (tmp_path / "loose.txt").write_text("no label")
    pairs = dict(discover_labeled_files(tmp_path))
    assert pairs == {tmp_path / "json" / "a.json": "json", tmp_path / "Python" / "b.py": "python"}


def test_write_and_read_csv(tmp_path):
    preds = {tmp_path / "b": Prediction("json", 0.75), tmp_path / "a": Prediction("txt", 1.0)}
    df = predictions_to_frame(preds)
    assert list(df.columns) == ["path", "label", "probability"]
    assert df["label"].tolist() == ["txt", "json"]

    out = tmp_path / "out" / "preds.csv"
    write_predictions(df, out)
    back = read_predictions(out)
    assert back["label"].tolist() == ["txt", "json"]
    assert back["probability"].tolist() == pytest.approx([1.0, 0.75])


def test_missing_root(tmp_path):
    with pytest.raises(NotFoundError):
        discover_files(tmp_path / "${SAMPLES_DIR}")
    with pytest.raises(NotFoundError):
        discover_labeled_files(tmp_path / "nope")
