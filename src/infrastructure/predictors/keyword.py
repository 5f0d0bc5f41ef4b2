"""Keyword-density category predictor."""
from __future__ import annotations

from typing import Mapping

from src.core.entities import Category, CategoryPrediction, FeatureBundle
from src.core.protocols import CategoryPredictor
from src.utils.logger import logger


class KeywordScoringPredictor:
    """Pick the category whose keywords matched most often.

    When the text carries no keyword signal the decision is delegated to
    ``fallback``.
    """

    def __init__(
        self,
        fallback: CategoryPredictor,
        base_confidence: float = 0.6,
        confidence_step: float = 0.15,
        max_confidence: float = 0.95,
    ) -> None:
        self._fallback = fallback
        self._base_confidence = base_confidence
        self._confidence_step = confidence_step
        self._max_confidence = max_confidence

    def predict(self, features: FeatureBundle) -> CategoryPrediction:
        if features.text is not None:
            category, score = self._best_category(features.text.category_scores)
            if score > 0:
                confidence = min(
                    self._max_confidence,
                    self._base_confidence + score * self._confidence_step,
                )
                logger.debug("Keyword prediction '{}' with score {}", category.value, score)
                return CategoryPrediction(category=category, confidence=round(confidence, 4))

        logger.debug("No keyword signal; delegating to fallback predictor")
        return self._fallback.predict(features)

    @staticmethod
    def _best_category(scores: Mapping[Category, int]) -> tuple[Category, int]:
        best_category = Category.OTHER
        best_score = 0
        for category in Category.scored():
            score = scores.get(category, 0)
            # Strict comparison keeps the first-declared category on ties.
            if score > best_score:
                best_category, best_score = category, score
        return best_category, best_score


__all__ = ["KeywordScoringPredictor"]
