from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Prediction:
    label: str
    probability: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "probability": float(self.probability)}

    def __str__(self) -> str:
        return f"{self.label} ({self.probability:.4f})"
