from __future__ import annotations

from ftlab.dataio.model_config import SamplingConfig
from ftlab.schemas import Prediction

EMPTY_LABEL = "empty"
SMALL_LABEL = "txt"


def trivial_prediction(size: int, sampling: SamplingConfig) -> Prediction | None:
    """
    Fixed answers for inputs the model is not run on:
      - size == 0                      -> ("empty", 1.0)
      - size <= min_file_size_for_dl   -> ("txt", 1.0)
    Returns None when the input has to go through the model.
    """
    if size == 0:
        return Prediction(EMPTY_LABEL, 1.0)
    if size <= sampling.min_file_size_for_dl:
        return Prediction(SMALL_LABEL, 1.0)
    return None
