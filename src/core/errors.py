"""Error types raised inside the classification pipeline."""
from __future__ import annotations


class ClassificationError(Exception):
    """Base class for failures raised while classifying an issue."""


class ExtractionError(ClassificationError):
    """A single modality (image, text or metadata) could not be processed."""

    def __init__(self, modality: str, message: str) -> None:
        super().__init__(f"{modality} extraction failed: {message}")
        self.modality = modality


class PredictionError(ClassificationError):
    """A category predictor could not produce a prediction."""


__all__ = ["ClassificationError", "ExtractionError", "PredictionError"]
