"""Use case for classifying the backlog of unclassified issues."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Protocol

from src.core.entities import IssueReport
from src.use_cases.classify_issue import ClassifyIssueUseCase
from src.utils.logger import logger

CLASSIFIED_EVENT = "issue:classified"


@dataclass(frozen=True)
class IssueRecord:
    """Stored issue as seen by the triage flow."""

    issue_id: str
    description: Optional[str]
    image_bytes: Optional[bytes] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


class IssueRepository(Protocol):
    def pending(self) -> Iterable[IssueRecord]:
        ...

    def save_classification(
        self, issue_id: str, classification: Mapping[str, Any], priority: str
    ) -> None:
        ...


class EventPublisher(Protocol):
    def publish(self, event_name: str, payload: Mapping[str, Any]) -> None:
        ...


@dataclass(frozen=True)
class TriageSummary:
    processed: int
    review_ids: tuple[str, ...]
    degraded_ids: tuple[str, ...]


class TriageIssuesUseCase:
    """Classify pending issues, persist the outcome and announce it."""

    def __init__(
        self,
        classifier: ClassifyIssueUseCase,
        repository: IssueRepository,
        publisher: EventPublisher | None = None,
    ) -> None:
        self._classifier = classifier
        self._repository = repository
        self._publisher = publisher

    def execute(self, max_workers: int | None = None) -> TriageSummary:
        issues = list(self._repository.pending())
        logger.info("Triaging {} pending issues", len(issues))
        results = self._classifier.classify_batch(
            [
                IssueReport(text=issue.description, image_bytes=issue.image_bytes, metadata=issue.metadata)
                for issue in issues
            ],
            max_workers=max_workers,
        )

        review_ids: list[str] = []
        degraded_ids: list[str] = []
        for issue, result in zip(issues, results):
            needs_review = self._classifier.needs_manual_review(result)
            if needs_review:
                review_ids.append(issue.issue_id)
            if result.is_degraded:
                degraded_ids.append(issue.issue_id)

            self._repository.save_classification(
                issue.issue_id,
                result.to_document(),
                result.suggested_priority.value,
            )
            self._announce(issue.issue_id, result.category.value, result.suggested_priority.value, needs_review)

        return TriageSummary(
            processed=len(issues),
            review_ids=tuple(review_ids),
            degraded_ids=tuple(degraded_ids),
        )

    def _announce(self, issue_id: str, category: str, priority: str, needs_review: bool) -> None:
        if self._publisher is None:
            return
        payload = {
            "id": issue_id,
            "category": category,
            "priority": priority,
            "needsReview": needs_review,
        }
        try:
            self._publisher.publish(CLASSIFIED_EVENT, payload)
        except Exception as error:  # noqa: BLE001
            logger.warning("Failed to publish '{}' for issue {}: {}", CLASSIFIED_EVENT, issue_id, error)


__all__ = [
    "CLASSIFIED_EVENT",
    "EventPublisher",
    "IssueRecord",
    "IssueRepository",
    "TriageIssuesUseCase",
    "TriageSummary",
]
