"""Assemble the classification engine from configuration."""
from __future__ import annotations

import random
from pathlib import Path
from typing import Optional

from src.infrastructure.events.priority import PriorityEngine
from src.infrastructure.features.extractor import FeatureExtractor
from src.infrastructure.features.image import ImageFeatureExtractor, RandomImageSignalDetector
from src.infrastructure.features.text import TextFeatureExtractor
from src.infrastructure.nlp.keywords import KeywordTables
from src.infrastructure.nlp.urgency import KeywordUrgencyScorer
from src.infrastructure.predictors.factory import PredictorStrategy, build_predictor
from src.use_cases.classify_issue import DEFAULT_CONFIDENCE_THRESHOLD, ClassifyIssueUseCase
from src.utils.config import AppConfig
from src.utils.logger import logger


def build_feature_extractor(
    tables: KeywordTables, rng: Optional[random.Random] = None
) -> FeatureExtractor:
    urgency_scorer = KeywordUrgencyScorer(tables)
    return FeatureExtractor(
        image_extractor=ImageFeatureExtractor(signal_detector=RandomImageSignalDetector(rng)),
        text_extractor=TextFeatureExtractor(tables, urgency_scorer),
    )


def build_classifier(
    config: AppConfig | None = None, rng: Optional[random.Random] = None
) -> ClassifyIssueUseCase:
    """Wire extractor, predictor and priority engine into the classification use case."""

    config = config or AppConfig()
    predictor_config = config.get("predictor", {})
    classification_config = config.get("classification", {})

    if rng is None:
        seed = predictor_config.get("seed")
        rng = random.Random(seed) if seed is not None else random.Random()

    tables = KeywordTables.from_config(config.get("keywords"))
    strategy = PredictorStrategy(predictor_config.get("strategy", PredictorStrategy.KEYWORD.value))
    model_path = config.get("paths", {}).get("model_artifact")

    predictor = build_predictor(
        strategy,
        rng=rng,
        model_path=Path(model_path) if model_path else None,
    )
    priority_engine = PriorityEngine.from_config(
        config.get("priority"), urgency_scorer=KeywordUrgencyScorer(tables)
    )

    logger.info("AI classification engine initialised with '{}' strategy", strategy.value)
    return ClassifyIssueUseCase(
        extractor=build_feature_extractor(tables, rng),
        predictor=predictor,
        priority_engine=priority_engine,
        confidence_threshold=float(
            classification_config.get("confidence_threshold", DEFAULT_CONFIDENCE_THRESHOLD)
        ),
        max_workers=classification_config.get("max_workers"),
    )


__all__ = ["build_classifier", "build_feature_extractor"]
