"""Select the category predictor stack from a strategy value."""
from __future__ import annotations

import random
from enum import Enum
from pathlib import Path
from typing import Optional

from src.core.protocols import CategoryPredictor
from src.infrastructure.predictors.baseline import ResilientPredictor, UniformRandomPredictor
from src.infrastructure.predictors.keyword import KeywordScoringPredictor
from src.infrastructure.predictors.trained import TrainedFeaturePredictor


class PredictorStrategy(str, Enum):
    KEYWORD = "keyword"
    TRAINED = "trained"


def build_predictor(
    strategy: PredictorStrategy | str = PredictorStrategy.KEYWORD,
    rng: Optional[random.Random] = None,
    model_path: Optional[Path] = None,
) -> CategoryPredictor:
    """Return the keyword predictor backed by the strategy's no-signal fallback.

    ``keyword`` falls back to the uniform random baseline, ``trained`` to the
    model stored at ``model_path``. Either way a crash in the primary stack is
    answered by the random baseline.
    """

    try:
        strategy = PredictorStrategy(strategy)
    except ValueError as error:
        raise ValueError(f"Unknown predictor strategy: '{strategy}'") from error

    baseline = UniformRandomPredictor(rng=rng)
    if strategy is PredictorStrategy.TRAINED:
        if model_path is None:
            raise ValueError("The 'trained' strategy requires a model artifact path")
        fallback: CategoryPredictor = TrainedFeaturePredictor.load(Path(model_path))
    else:
        fallback = baseline

    return ResilientPredictor(primary=KeywordScoringPredictor(fallback=fallback), baseline=baseline)


__all__ = ["PredictorStrategy", "build_predictor"]
