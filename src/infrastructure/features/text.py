"""Keyword-driven features extracted from issue descriptions."""
from __future__ import annotations

from src.core.entities import TextFeatures
from src.infrastructure.nlp.keywords import KeywordTables
from src.infrastructure.nlp.urgency import KeywordUrgencyScorer
from src.utils.logger import logger


class TextFeatureExtractor:
    """Score a description against every category keyword list."""

    def __init__(
        self,
        tables: KeywordTables | None = None,
        urgency_scorer: KeywordUrgencyScorer | None = None,
    ) -> None:
        self._tables = tables or KeywordTables.default()
        self._urgency_scorer = urgency_scorer or KeywordUrgencyScorer(self._tables)

    def extract(self, text: str) -> TextFeatures:
        lowered = text.lower()
        category_scores = {
            category: sum(1 for keyword in keywords if keyword in lowered)
            for category, keywords in self._tables.category_keywords.items()
        }
        features = TextFeatures(
            length=len(text),
            word_count=len(text.split()),
            category_scores=category_scores,
            urgency_score=self._urgency_scorer.score(lowered),
        )
        logger.debug("Text features: {}", features)
        return features


__all__ = ["TextFeatureExtractor"]
