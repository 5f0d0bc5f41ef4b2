"""No-signal baseline predictors."""
from __future__ import annotations

import math
import random
from typing import Sequence

from src.core.entities import Category, CategoryPrediction, FeatureBundle
from src.core.protocols import CategoryPredictor
from src.utils.logger import logger


class UniformRandomPredictor:
    """Draw a category uniformly, with confidence in ``[0.75, 1.0)``."""

    def __init__(
        self,
        rng: random.Random | None = None,
        categories: Sequence[Category] | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._categories = tuple(categories or Category)
        if not self._categories:
            raise ValueError("At least one category is required.")

    def predict(self, features: FeatureBundle) -> CategoryPrediction:
        category = self._rng.choice(self._categories)
        confidence = min(0.75 + self._rng.random() * 0.25, math.nextafter(1.0, 0.0))
        return CategoryPrediction(category=category, confidence=confidence)


class ResilientPredictor:
    """Answer with ``baseline`` whenever ``primary`` raises."""

    def __init__(self, primary: CategoryPredictor, baseline: CategoryPredictor) -> None:
        self._primary = primary
        self._baseline = baseline

    def predict(self, features: FeatureBundle) -> CategoryPrediction:
        try:
            return self._primary.predict(features)
        except Exception as error:  # noqa: BLE001
            logger.warning("Primary predictor failed, using baseline: {}", error)
            return self._baseline.predict(features)


__all__ = ["ResilientPredictor", "UniformRandomPredictor"]
