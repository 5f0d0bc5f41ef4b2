"""Heuristic urgency scoring for issue descriptions."""
from __future__ import annotations

from src.infrastructure.nlp.keywords import KeywordTables
from src.utils.logger import logger


class KeywordUrgencyScorer:
    """Count how many urgency keywords appear in a text."""

    def __init__(self, tables: KeywordTables | None = None) -> None:
        self._keywords = (tables or KeywordTables.default()).urgency_keywords

    def score(self, text: str | None) -> int:
        """Return the number of distinct urgency keywords present in ``text``.

        Each keyword counts once no matter how often it repeats.
        """

        if not text:
            return 0
        lowered = text.lower()
        matches = sum(1 for keyword in self._keywords if keyword in lowered)
        logger.debug("Urgency score {} for text: {}", matches, text)
        return matches


__all__ = ["KeywordUrgencyScorer"]
