"""Tests for the issue classification use case."""
from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from src.core.entities import Category, IssueReport, PriorityLevel
from src.infrastructure.events.priority import PriorityEngine
from src.infrastructure.features.extractor import FeatureExtractor
from src.infrastructure.predictors.factory import build_predictor
from src.interface.factory import build_classifier
from src.use_cases.classify_issue import ClassifyIssueUseCase

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FailingOnTextExtractor:
    """Delegate to the real extractor but blow up on one description."""

    def __init__(self, poison: str) -> None:
        self._poison = poison
        self._delegate = FeatureExtractor()

    def extract(self, image_bytes=None, text=None, metadata=None):
        if text == self._poison:
            raise RuntimeError("extraction exploded")
        return self._delegate.extract(image_bytes, text, metadata)


def build_use_case(extractor=None, seed: int = 5) -> ClassifyIssueUseCase:
    return ClassifyIssueUseCase(
        extractor=extractor or FeatureExtractor(),
        predictor=build_predictor(rng=random.Random(seed)),
        priority_engine=PriorityEngine(),
        now_provider=lambda: FIXED_NOW,
    )


def test_end_to_end_pothole_report() -> None:
    use_case = build_use_case()

    result = use_case.classify(
        None, "There is a large pothole causing danger, urgent repair needed", {}
    )

    assert result.category is Category.POTHOLE
    assert result.confidence == pytest.approx(0.9)
    assert result.suggested_priority >= PriorityLevel.MEDIUM
    assert result.features is not None
    assert result.features.text.category_scores[Category.POTHOLE] >= 1
    assert result.features.text.urgency_score >= 1
    assert result.processed_at == FIXED_NOW
    assert not use_case.needs_manual_review(result)


def test_metadata_flags_raise_priority() -> None:
    use_case = build_use_case()

    result = use_case.classify(
        None,
        "There is a large pothole causing danger, urgent repair needed",
        {"nearCriticalInfrastructure": True},
    )

    assert result.suggested_priority is PriorityLevel.HIGH


def test_no_signal_submission_falls_back_to_baseline() -> None:
    use_case = build_classifier(rng=random.Random(42))

    result = use_case.classify(image_bytes=None, text=None, metadata={})

    assert result.error is None
    assert result.category in set(Category)
    assert 0.75 <= result.confidence < 1.0
    assert result.suggested_priority in set(PriorityLevel)


def test_seeded_fallback_is_reproducible() -> None:
    first = build_use_case(seed=3).classify(None, "nothing to see", None)
    second = build_use_case(seed=3).classify(None, "nothing to see", None)

    assert (first.category, first.confidence) == (second.category, second.confidence)


def test_pipeline_failure_returns_degraded_result() -> None:
    use_case = build_use_case(extractor=FailingOnTextExtractor("boom"))

    result = use_case.classify(None, "boom", {"nearCriticalInfrastructure": True})

    assert result.category is Category.OTHER
    assert result.confidence == 0.0
    assert result.suggested_priority is PriorityLevel.MEDIUM
    assert result.features is None
    assert result.error == "extraction exploded"
    assert use_case.needs_manual_review(result)
    assert result.to_document() == {
        "category": "other",
        "confidence": 0.0,
        "suggestedPriority": "medium",
        "processedAt": FIXED_NOW.isoformat(),
        "error": "extraction exploded",
    }


@pytest.mark.parametrize("max_workers", [None, 4])
def test_batch_preserves_order_and_isolates_failures(max_workers) -> None:
    use_case = build_use_case(extractor=FailingOnTextExtractor("boom"))
    items = [
        {"text": "pothole on main street", "metadata": {}},
        IssueReport(text="boom"),
        {"imageBytes": None, "text": "water leak under the bridge"},
        {"text": "sewer overflow", "metadata": {"duplicateReports": 5}},
    ]

    results = use_case.classify_batch(items, max_workers=max_workers)

    assert [result.category for result in results] == [
        Category.POTHOLE,
        Category.OTHER,
        Category.WATER,
        Category.SEWAGE,
    ]
    assert [result.is_degraded for result in results] == [False, True, False, False]
    assert results[3].suggested_priority is PriorityLevel.MEDIUM


def test_batch_degrades_unreadable_items() -> None:
    use_case = build_use_case()

    results = use_case.classify_batch([42, {"text": "broken streetlight"}])

    assert results[0].is_degraded
    assert results[1].category is Category.STREETLIGHT


def test_confidence_threshold_drives_manual_review() -> None:
    use_case = build_use_case()

    single_keyword = use_case.classify(None, "trash", None)

    assert use_case.confidence_threshold() == 0.7
    assert single_keyword.confidence == pytest.approx(0.75)
    assert not use_case.needs_manual_review(single_keyword)

    strict = ClassifyIssueUseCase(
        extractor=FeatureExtractor(),
        predictor=build_predictor(rng=random.Random(1)),
        priority_engine=PriorityEngine(),
        confidence_threshold=0.8,
    )
    assert strict.needs_manual_review(strict.classify(None, "trash", None))


def test_result_document_includes_features(make_image) -> None:
    use_case = build_use_case()

    document = use_case.classify(
        make_image(), "Dark street, broken light", {"location": "5th Ave"}
    ).to_document()

    assert document["category"] == "streetlight"
    assert document["features"]["imageFeatures"]["dominantColors"]
    assert document["features"]["textFeatures"]["categoryScores"]["streetlight"] == 3
    assert document["features"]["metadataFeatures"]["hasLocation"] is True
