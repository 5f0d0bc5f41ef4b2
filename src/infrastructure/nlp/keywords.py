"""Keyword tables driving category scoring and urgency detection."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from src.core.entities import Category
from src.utils.logger import logger

# Matched as raw lower-case substrings; downstream thresholds were tuned
# against these exact lists, overlaps included.
DEFAULT_CATEGORY_KEYWORDS: Mapping[Category, tuple[str, ...]] = MappingProxyType(
    {
        Category.POTHOLE: ("pothole", "hole", "road damage", "crater", "pavement"),
        Category.STREETLIGHT: ("light", "lamp", "dark", "broken light", "streetlight"),
        Category.GARBAGE: ("garbage", "trash", "waste", "litter", "dump", "smell"),
        Category.WATER: ("water", "leak", "pipe", "flooding", "burst"),
        Category.SEWAGE: ("sewage", "drain", "sewer", "overflow", "blockage"),
        Category.TRAFFIC: ("signal", "traffic", "sign", "traffic light"),
    }
)

DEFAULT_URGENCY_KEYWORDS: tuple[str, ...] = (
    "urgent",
    "emergency",
    "dangerous",
    "hazard",
    "immediate",
    "critical",
    "severe",
    "accident",
    "injury",
    "blocked",
)


@dataclass(frozen=True)
class KeywordTables:
    """Read-only keyword configuration shared by the extractors and the priority engine."""

    category_keywords: Mapping[Category, tuple[str, ...]]
    urgency_keywords: tuple[str, ...]

    def __post_init__(self) -> None:
        ordered = {
            category: tuple(keyword.lower() for keyword in self.category_keywords[category])
            for category in Category.scored()
            if category in self.category_keywords
        }
        missing = [category.value for category in Category.scored() if category not in ordered]
        if missing:
            raise ValueError("Keyword lists missing for categories: " + ", ".join(missing))
        object.__setattr__(self, "category_keywords", MappingProxyType(ordered))
        object.__setattr__(
            self, "urgency_keywords", tuple(keyword.lower() for keyword in self.urgency_keywords)
        )

    @classmethod
    def default(cls) -> "KeywordTables":
        return cls(
            category_keywords=DEFAULT_CATEGORY_KEYWORDS,
            urgency_keywords=DEFAULT_URGENCY_KEYWORDS,
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> "KeywordTables":
        """Build tables from the ``keywords`` config section.

        Categories omitted from ``config["categories"]`` keep their default list.
        """

        if not config:
            return cls.default()

        category_keywords: dict[Category, tuple[str, ...]] = dict(DEFAULT_CATEGORY_KEYWORDS)
        for name, keywords in (config.get("categories") or {}).items():
            try:
                category = Category(str(name).lower())
            except ValueError as error:
                raise ValueError(f"Unknown category in keyword config: '{name}'") from error
            if category is Category.OTHER:
                raise ValueError("The 'other' category cannot define keywords.")
            category_keywords[category] = _validated_keywords(keywords, f"category '{name}'")

        urgency_config = config.get("urgency")
        urgency_keywords = (
            _validated_keywords(urgency_config, "urgency")
            if urgency_config is not None
            else DEFAULT_URGENCY_KEYWORDS
        )

        logger.debug("Loaded keyword tables for {} categories", len(category_keywords))
        return cls(category_keywords=category_keywords, urgency_keywords=urgency_keywords)

    def keywords_for(self, category: Category) -> tuple[str, ...]:
        return self.category_keywords.get(category, ())


def _validated_keywords(keywords: Sequence[str] | None, label: str) -> tuple[str, ...]:
    if isinstance(keywords, str) or not keywords:
        raise ValueError(f"Keyword list for {label} must be a non-empty list.")
    cleaned = tuple(str(keyword).strip() for keyword in keywords if str(keyword).strip())
    if not cleaned:
        raise ValueError(f"Keyword list for {label} must be a non-empty list.")
    return cleaned


__all__ = ["DEFAULT_CATEGORY_KEYWORDS", "DEFAULT_URGENCY_KEYWORDS", "KeywordTables"]
