"""Priority assessment for classified civic issues."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from src.core.entities import Category, PriorityAssessment, PriorityLevel
from src.infrastructure.nlp.urgency import KeywordUrgencyScorer
from src.utils.logger import logger

DEFAULT_CATEGORY_WEIGHTS: Mapping[Category, int] = {
    Category.SEWAGE: 3,
    Category.WATER: 3,
    Category.POTHOLE: 2,
    Category.TRAFFIC: 2,
    Category.STREETLIGHT: 1,
    Category.GARBAGE: 1,
    Category.OTHER: 1,
}

DEFAULT_THRESHOLDS: tuple[tuple[int, PriorityLevel], ...] = (
    (7, PriorityLevel.CRITICAL),
    (5, PriorityLevel.HIGH),
    (3, PriorityLevel.MEDIUM),
)


class PriorityEngine:
    """Add up category, urgency and context points and map the total to a level."""

    def __init__(
        self,
        urgency_scorer: KeywordUrgencyScorer | None = None,
        category_weights: Mapping[Category, int] | None = None,
        default_weight: int = 1,
        urgency_cap: int = 3,
        critical_infrastructure_bonus: int = 2,
        duplicate_report_threshold: int = 3,
        duplicate_report_bonus: int = 1,
        thresholds: Sequence[tuple[int, PriorityLevel]] | None = None,
    ) -> None:
        self._urgency_scorer = urgency_scorer or KeywordUrgencyScorer()
        self._category_weights = dict(category_weights or DEFAULT_CATEGORY_WEIGHTS)
        self._default_weight = default_weight
        self._urgency_cap = urgency_cap
        self._critical_infrastructure_bonus = critical_infrastructure_bonus
        self._duplicate_report_threshold = duplicate_report_threshold
        self._duplicate_report_bonus = duplicate_report_bonus
        self._thresholds: tuple[tuple[int, PriorityLevel], ...] = tuple(
            sorted(thresholds or DEFAULT_THRESHOLDS, key=lambda entry: entry[0], reverse=True)
        )

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any] | None,
        urgency_scorer: KeywordUrgencyScorer | None = None,
    ) -> "PriorityEngine":
        if not config:
            return cls(urgency_scorer=urgency_scorer)

        category_weights = dict(DEFAULT_CATEGORY_WEIGHTS)
        for name, weight in (config.get("category_weights") or {}).items():
            try:
                category_weights[Category(str(name).lower())] = int(weight)
            except (TypeError, ValueError) as error:
                raise ValueError(f"Invalid category weight '{name}': {weight!r}") from error

        thresholds = None
        if config.get("thresholds"):
            thresholds = []
            for level_name, minimum in config["thresholds"].items():
                try:
                    level = PriorityLevel(str(level_name).lower())
                except ValueError as error:
                    raise ValueError(f"Unknown priority level '{level_name}'") from error
                if level is PriorityLevel.LOW:
                    raise ValueError("'low' is the fallback level and takes no threshold")
                try:
                    thresholds.append((int(minimum), level))
                except (TypeError, ValueError) as error:
                    raise ValueError(f"Invalid threshold for '{level_name}': {minimum!r}") from error

        return cls(
            urgency_scorer=urgency_scorer,
            category_weights=category_weights,
            default_weight=int(config.get("default_weight", 1)),
            urgency_cap=int(config.get("urgency_cap", 3)),
            critical_infrastructure_bonus=int(config.get("critical_infrastructure_bonus", 2)),
            duplicate_report_threshold=int(config.get("duplicate_report_threshold", 3)),
            duplicate_report_bonus=int(config.get("duplicate_report_bonus", 1)),
            thresholds=thresholds,
        )

    def decide(
        self,
        category: Category,
        confidence: float,
        text: Optional[str],
        metadata: Optional[Mapping[str, Any]],
    ) -> PriorityLevel:
        """Return the priority level; ``confidence`` does not influence the score."""

        return self.assess(category, text, metadata).level

    def assess(
        self,
        category: Category,
        text: Optional[str],
        metadata: Optional[Mapping[str, Any]],
    ) -> PriorityAssessment:
        metadata = metadata or {}
        score = self._category_weights.get(category, self._default_weight)
        score += min(self._urgency_scorer.score(text), self._urgency_cap)

        if metadata.get("nearCriticalInfrastructure"):
            score += self._critical_infrastructure_bonus
        if self._duplicate_count(metadata.get("duplicateReports")) > self._duplicate_report_threshold:
            score += self._duplicate_report_bonus

        level = PriorityLevel.LOW
        for minimum, candidate in self._thresholds:
            if score >= minimum:
                level = candidate
                break

        logger.debug("Priority score {} -> {} for category '{}'", score, level.value, category.value)
        return PriorityAssessment(level=level, score=score)

    @staticmethod
    def _duplicate_count(value: Any) -> float:
        if value is None or isinstance(value, bool):
            return 0
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric duplicateReports value: {!r}", value)
            return 0


__all__ = ["DEFAULT_CATEGORY_WEIGHTS", "DEFAULT_THRESHOLDS", "PriorityEngine"]
