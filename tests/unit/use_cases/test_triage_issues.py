"""Tests for the backlog triage use case."""
from __future__ import annotations

import random

from src.interface.factory import build_classifier
from src.use_cases.triage_issues import (
    CLASSIFIED_EVENT,
    IssueRecord,
    TriageIssuesUseCase,
)


class InMemoryIssueRepository:
    def __init__(self, issues: list[IssueRecord]) -> None:
        self._issues = issues
        self.saved: dict[str, tuple[dict, str]] = {}

    def pending(self):
        return list(self._issues)

    def save_classification(self, issue_id, classification, priority) -> None:
        self.saved[issue_id] = (dict(classification), priority)


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def publish(self, event_name, payload) -> None:
        self.events.append((event_name, dict(payload)))


class BrokenPublisher:
    def publish(self, event_name, payload) -> None:
        raise ConnectionError("socket closed")


def _issues() -> list[IssueRecord]:
    return [
        IssueRecord(
            issue_id="a1",
            description="Sewage overflow near the hospital, dangerous and urgent",
            metadata={"nearCriticalInfrastructure": True},
        ),
        IssueRecord(issue_id="b2", description="Streetlight out", image_bytes=b"corrupt"),
    ]


def test_triage_persists_and_publishes_each_issue() -> None:
    repository = InMemoryIssueRepository(_issues())
    publisher = RecordingPublisher()
    use_case = TriageIssuesUseCase(build_classifier(rng=random.Random(0)), repository, publisher)

    summary = use_case.execute()

    assert summary.processed == 2
    assert summary.degraded_ids == ()
    document, priority = repository.saved["a1"]
    assert document["category"] == "sewage"
    assert priority == "critical"
    assert repository.saved["b2"][0]["category"] == "streetlight"
    assert repository.saved["b2"][0]["features"]["imageFeatures"] is None
    assert [name for name, _ in publisher.events] == [CLASSIFIED_EVENT, CLASSIFIED_EVENT]
    assert publisher.events[0][1] == {
        "id": "a1",
        "category": "sewage",
        "priority": "critical",
        "needsReview": False,
    }


def test_triage_survives_publisher_failures() -> None:
    repository = InMemoryIssueRepository(_issues())
    use_case = TriageIssuesUseCase(
        build_classifier(rng=random.Random(0)), repository, BrokenPublisher()
    )

    summary = use_case.execute(max_workers=2)

    assert summary.processed == 2
    assert set(repository.saved) == {"a1", "b2"}


def test_triage_flags_low_confidence_for_review() -> None:
    repository = InMemoryIssueRepository([IssueRecord(issue_id="c3", description="trash")])
    classifier = build_classifier({"classification": {"confidence_threshold": 0.8}})

    summary = TriageIssuesUseCase(classifier, repository).execute()

    assert summary.review_ids == ("c3",)
