from __future__ import annotations

import argparse
import os
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from ftlab.dataio.dataset import discover_labeled_files
from ftlab.metrics.evaluation import misclassified, report_predictions
from ftlab.serve.predictor import FileTypePredictor
from ftlab.utils.paths import ARTIFACTS_DIR, OUTPUTS_DIR, SAMPLES_DIR, ensure_dirs

load_dotenv()


def _expand(s: str) -> Path:
    return Path(os.path.expandvars(s)).expanduser().resolve()


def main():
    parser = argparse.ArgumentParser(
        description="Evaluate predictions on a folder whose subfolders are named after the expected label."
    )
    parser.add_argument("--input-dir", type=str, default=str(SAMPLES_DIR), help="Labeled samples.")
    parser.add_argument("--model", type=str, default=str(ARTIFACTS_DIR / "model.onnx"))
    parser.add_argument("--config", type=str, default=str(ARTIFACTS_DIR / "config.json"))
    parser.add_argument("--out", type=str, default=str(OUTPUTS_DIR / "eval_errors.csv"))
    args = parser.parse_args()

    ensure_dirs()
    input_dir = _expand(args.input_dir)
    pairs = discover_labeled_files(input_dir)
    if not pairs:
        print(f"[eval] no labeled files found under {input_dir}")
        return

    predictor = FileTypePredictor.from_paths(_expand(args.model), _expand(args.config))
    predictions = predictor.predict_many(path for path, _ in pairs)

    paths = [str(path) for path, _ in pairs]
    y_true = [label for _, label in pairs]
    y_pred = [predictions[path].label for path, _ in pairs]

    rep = report_predictions(y_true, y_pred)
    print(f"[eval] files: {len(pairs)}")
    print(f"[eval] accuracy: {rep.accuracy:.4f}")
    print("[eval] per label (precision / recall / f1 / support):")
    for label in rep.labels:
        row = rep.per_label.get(label, {})
        print(
            f"  {label:<16} {row.get('precision', 0.0):.4f} {row.get('recall', 0.0):.4f} "
            f"{row.get('f1-score', 0.0):.4f} {int(row.get('support', 0))}"
        )

    print("[eval] confusion matrix (rows = expected, columns = predicted):")
    print(pd.DataFrame(rep.confusion, index=rep.labels, columns=rep.labels).to_string())

    errors = misclassified(paths, y_true, y_pred)
    out_path = _expand(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(errors, columns=["path", "expected", "predicted"]).to_csv(out_path, index=False)
    print(f"[eval] wrote {len(errors)} misclassified files to {out_path}")


if __name__ == "__main__":
    main()
