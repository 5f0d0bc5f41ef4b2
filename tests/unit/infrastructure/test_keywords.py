"""Unit tests for keyword tables and urgency scoring."""
from __future__ import annotations

import pytest

from src.core.entities import Category
from src.infrastructure.nlp.keywords import DEFAULT_URGENCY_KEYWORDS, KeywordTables
from src.infrastructure.nlp.urgency import KeywordUrgencyScorer


def test_default_tables_cover_every_scored_category_in_declared_order() -> None:
    tables = KeywordTables.default()

    assert tuple(tables.category_keywords) == Category.scored()
    assert Category.OTHER not in tables.category_keywords
    assert tables.keywords_for(Category.TRAFFIC) == ("signal", "traffic", "sign", "traffic light")


def test_tables_are_read_only() -> None:
    tables = KeywordTables.default()

    with pytest.raises(TypeError):
        tables.category_keywords[Category.POTHOLE] = ("bump",)  # type: ignore[index]


def test_from_config_overrides_only_listed_categories() -> None:
    tables = KeywordTables.from_config({"categories": {"Garbage": ["Rubbish", "bin"]}})

    assert tables.keywords_for(Category.GARBAGE) == ("rubbish", "bin")
    assert tables.keywords_for(Category.WATER) == ("water", "leak", "pipe", "flooding", "burst")
    assert tables.urgency_keywords == DEFAULT_URGENCY_KEYWORDS


@pytest.mark.parametrize(
    "config",
    [
        {"categories": {"graffiti": ["paint"]}},
        {"categories": {"other": ["misc"]}},
        {"categories": {"water": []}},
        {"urgency": "urgent"},
    ],
)
def test_from_config_rejects_invalid_sections(config) -> None:
    with pytest.raises(ValueError):
        KeywordTables.from_config(config)


def test_urgency_counts_presence_not_frequency() -> None:
    scorer = KeywordUrgencyScorer()

    assert scorer.score("URGENT urgent urgent") == 1
    assert scorer.score("Dangerous hazard after the accident") == 3
    assert scorer.score("some danger here") == 0
    assert scorer.score(None) == 0
