"""Core entities for the civic issue classification domain."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


class Category(str, Enum):
    """Closed set of issue categories.

    Declaration order matters: it is the tie-break order used when two
    categories collect the same keyword score.
    """

    POTHOLE = "pothole"
    STREETLIGHT = "streetlight"
    GARBAGE = "garbage"
    WATER = "water"
    SEWAGE = "sewage"
    TRAFFIC = "traffic"
    OTHER = "other"

    @classmethod
    def scored(cls) -> tuple["Category", ...]:
        """Categories that carry keyword lists (every category but ``other``)."""

        return tuple(category for category in cls if category is not cls.OTHER)


class PriorityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PriorityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PriorityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PriorityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PriorityLevel):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_ORDER: tuple[PriorityLevel, ...] = (
    PriorityLevel.LOW,
    PriorityLevel.MEDIUM,
    PriorityLevel.HIGH,
    PriorityLevel.CRITICAL,
)


@dataclass(frozen=True)
class ImageFeatures:
    dominant_colors: tuple[str, ...]
    brightness: float
    contrast: float
    has_hole: bool
    has_water: bool
    has_debris: bool

    def to_document(self) -> dict[str, Any]:
        return {
            "dominantColors": list(self.dominant_colors),
            "brightness": self.brightness,
            "contrast": self.contrast,
            "hasHole": self.has_hole,
            "hasWater": self.has_water,
            "hasDebris": self.has_debris,
        }


@dataclass(frozen=True)
class TextFeatures:
    length: int
    word_count: int
    category_scores: Mapping[Category, int]
    urgency_score: int

    def to_document(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "wordCount": self.word_count,
            "categoryScores": {
                category.value: score for category, score in self.category_scores.items()
            },
            "urgencyScore": self.urgency_score,
        }


@dataclass(frozen=True)
class MetadataFeatures:
    has_location: bool
    time_of_day: Optional[int] = None
    day_of_week: Optional[int] = None
    reporter_history: int = 0

    def to_document(self) -> dict[str, Any]:
        return {
            "hasLocation": self.has_location,
            "timeOfDay": self.time_of_day,
            "dayOfWeek": self.day_of_week,
            "reporterHistory": self.reporter_history,
        }


@dataclass(frozen=True)
class FeatureBundle:
    """Per-modality features for one submission; any sub-bundle may be absent."""

    image: Optional[ImageFeatures] = None
    text: Optional[TextFeatures] = None
    metadata: Optional[MetadataFeatures] = None

    @property
    def is_empty(self) -> bool:
        return self.image is None and self.text is None and self.metadata is None

    def to_document(self) -> dict[str, Any]:
        return {
            "imageFeatures": self.image.to_document() if self.image else None,
            "textFeatures": self.text.to_document() if self.text else None,
            "metadataFeatures": self.metadata.to_document() if self.metadata else None,
        }


@dataclass(frozen=True)
class CategoryPrediction:
    category: Category
    confidence: float


@dataclass(frozen=True)
class PriorityAssessment:
    """Result of computing a priority label and its underlying score."""

    level: PriorityLevel
    score: int


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one issue submission."""

    category: Category
    confidence: float
    suggested_priority: PriorityLevel
    processed_at: datetime
    features: Optional[FeatureBundle] = None
    error: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        return self.error is not None

    def to_document(self) -> dict[str, Any]:
        """Render the sub-document stored on the issue record."""

        document: dict[str, Any] = {
            "category": self.category.value,
            "confidence": self.confidence,
            "suggestedPriority": self.suggested_priority.value,
            "processedAt": self.processed_at.isoformat(),
        }
        if self.features is not None:
            document["features"] = self.features.to_document()
        if self.error is not None:
            document["error"] = self.error
        return document


@dataclass(frozen=True)
class IssueReport:
    """Raw inputs of one citizen submission."""

    text: Optional[str] = None
    image_bytes: Optional[bytes] = None
    metadata: Optional[Mapping[str, Any]] = field(default=None)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "IssueReport":
        image_bytes = payload.get("imageBytes", payload.get("image_bytes"))
        return cls(
            text=payload.get("text"),
            image_bytes=image_bytes,
            metadata=payload.get("metadata"),
        )


__all__ = [
    "Category",
    "CategoryPrediction",
    "ClassificationResult",
    "FeatureBundle",
    "ImageFeatures",
    "IssueReport",
    "MetadataFeatures",
    "PriorityAssessment",
    "PriorityLevel",
    "TextFeatures",
]
