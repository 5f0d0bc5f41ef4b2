"""Capabilities shared between the classification layers."""
from __future__ import annotations

from typing import Protocol

from src.core.entities import CategoryPrediction, FeatureBundle


class CategoryPredictor(Protocol):
    """Anything that maps a feature bundle to a category and a confidence.

    Implementations are shared across concurrent calls and must not keep
    per-call mutable state.
    """

    def predict(self, features: FeatureBundle) -> CategoryPrediction:
        ...


__all__ = ["CategoryPredictor"]
