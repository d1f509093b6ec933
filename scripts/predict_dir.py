from __future__ import annotations

import argparse
import os
from pathlib import Path

from dotenv import load_dotenv

from ftlab.dataio.dataset import predictions_to_frame, write_predictions
from ftlab.serve.predictor import FileTypePredictor
from ftlab.utils.paths import ARTIFACTS_DIR

load_dotenv()


def _expand(s: str) -> Path:
    return Path(os.path.expandvars(s)).expanduser().resolve()


def main():
    parser = argparse.ArgumentParser(description="Predict the file type of every file in a folder.")
    parser.add_argument("input_dir", type=str, help="Folder to scan.")
    parser.add_argument("--recursive", action="store_true", help="Descend into subfolders.")
    parser.add_argument("--model", type=str, default=str(ARTIFACTS_DIR / "model.onnx"))
    parser.add_argument("--config", type=str, default=str(ARTIFACTS_DIR / "config.json"))
    parser.add_argument(
        "--out", type=str, default=None, help="Optional .csv or .parquet output table."
    )
    args = parser.parse_args()

    predictor = FileTypePredictor.from_paths(_expand(args.model), _expand(args.config))
    predictions = predictor.predict_from_directory(_expand(args.input_dir), recursive=args.recursive)

    for path in sorted(predictions, key=str):
        print(f"[predict] {path}: {predictions[path]}")

    if args.out:
        out_path = _expand(args.out)
        write_predictions(predictions_to_frame(predictions), out_path)
        print(f"[predict] wrote {len(predictions)} rows to {out_path}")


if __name__ == "__main__":
    main()
