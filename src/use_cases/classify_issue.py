"""Use case classifying civic issue submissions."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Union

from src.core.entities import (
    Category,
    ClassificationResult,
    FeatureBundle,
    IssueReport,
    PriorityLevel,
)
from src.core.protocols import CategoryPredictor
from src.utils.logger import logger

DEFAULT_CONFIDENCE_THRESHOLD = 0.7

BatchItem = Union[IssueReport, Mapping[str, Any]]


class FeatureExtractor(Protocol):
    def extract(
        self,
        image_bytes: Optional[bytes] = None,
        text: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> FeatureBundle:
        ...


class PriorityDecider(Protocol):
    def decide(
        self,
        category: Category,
        confidence: float,
        text: Optional[str],
        metadata: Optional[Mapping[str, Any]],
    ) -> PriorityLevel:
        ...


class ClassifyIssueUseCase:
    """Run extraction, prediction and prioritisation for issue submissions.

    The use case never raises for a single submission: any failure is logged
    and turned into a degraded result (``other``, confidence 0, ``medium``)
    carrying an error note, so callers can route it to manual review.
    """

    def __init__(
        self,
        extractor: FeatureExtractor,
        predictor: CategoryPredictor,
        priority_engine: PriorityDecider,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        now_provider: Callable[[], datetime] | None = None,
        max_workers: int | None = None,
    ) -> None:
        self._extractor = extractor
        self._predictor = predictor
        self._priority_engine = priority_engine
        self._confidence_threshold = confidence_threshold
        self._now_provider = now_provider or (lambda: datetime.now(timezone.utc))
        self._max_workers = max_workers

    def classify(
        self,
        image_bytes: Optional[bytes] = None,
        text: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> ClassificationResult:
        try:
            features = self._extractor.extract(image_bytes, text, metadata)
            prediction = self._predictor.predict(features)
            category = Category(prediction.category)
            confidence = min(1.0, max(0.0, float(prediction.confidence)))
            priority = self._priority_engine.decide(category, confidence, text, metadata or {})
        except Exception as error:  # noqa: BLE001
            logger.exception("Classification failed: {}", error)
            return self._degraded(error)

        result = ClassificationResult(
            category=category,
            confidence=confidence,
            suggested_priority=PriorityLevel(priority),
            processed_at=self._now_provider(),
            features=features,
        )
        logger.debug("Classified issue as '{}' ({})", category.value, result.suggested_priority.value)
        return result

    def execute(self, report: IssueReport) -> ClassificationResult:
        return self.classify(report.image_bytes, report.text, report.metadata)

    def classify_batch(
        self, items: Iterable[BatchItem], max_workers: int | None = None
    ) -> list[ClassificationResult]:
        """Classify ``items`` and return one result per item, in input order."""

        batch = list(items)
        workers = max_workers if max_workers is not None else self._max_workers
        logger.info("Running classification on {} issues", len(batch))
        if workers is None or workers <= 1 or len(batch) <= 1:
            return [self._classify_item(item) for item in batch]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._classify_item, batch))

    def confidence_threshold(self) -> float:
        return self._confidence_threshold

    def needs_manual_review(self, result: ClassificationResult) -> bool:
        return result.is_degraded or result.confidence < self._confidence_threshold

    def _classify_item(self, item: BatchItem) -> ClassificationResult:
        if isinstance(item, IssueReport):
            return self.execute(item)
        try:
            report = IssueReport.from_mapping(item)
        except (AttributeError, TypeError) as error:
            logger.warning("Unreadable batch item {!r}: {}", item, error)
            return self._degraded(error)
        return self.execute(report)

    def _degraded(self, error: BaseException) -> ClassificationResult:
        return ClassificationResult(
            category=Category.OTHER,
            confidence=0.0,
            suggested_priority=PriorityLevel.MEDIUM,
            processed_at=self._now_provider(),
            error=str(error) or type(error).__name__,
        )


__all__ = ["DEFAULT_CONFIDENCE_THRESHOLD", "ClassifyIssueUseCase"]
