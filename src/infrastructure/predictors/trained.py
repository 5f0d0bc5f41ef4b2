"""Scikit-learn category model trained on feature bundles."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import joblib
import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    confusion_matrix,
    precision_recall_fscore_support,
)
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from src.core.entities import Category, CategoryPrediction, FeatureBundle
from src.core.errors import PredictionError
from src.utils.logger import logger

FEATURE_COLUMNS: tuple[str, ...] = (
    *(f"score_{category.value}" for category in Category.scored()),
    "urgency_score",
    "text_length",
    "word_count",
    "has_location",
    "time_of_day",
    "day_of_week",
    "reporter_history",
    "brightness",
    "contrast",
    "has_hole",
    "has_water",
    "has_debris",
)


def vectorize(features: FeatureBundle) -> np.ndarray:
    """Flatten a bundle into the fixed column order of ``FEATURE_COLUMNS``.

    Absent modalities contribute zeros.
    """

    values: list[float] = []
    text = features.text
    values.extend(
        float(text.category_scores.get(category, 0)) if text else 0.0
        for category in Category.scored()
    )
    values.extend(
        [
            float(text.urgency_score) if text else 0.0,
            float(text.length) if text else 0.0,
            float(text.word_count) if text else 0.0,
        ]
    )

    metadata = features.metadata
    values.extend(
        [
            float(metadata.has_location) if metadata else 0.0,
            float(metadata.time_of_day or 0) if metadata else 0.0,
            float(metadata.day_of_week or 0) if metadata else 0.0,
            float(metadata.reporter_history) if metadata else 0.0,
        ]
    )

    image = features.image
    values.extend(
        [
            image.brightness if image else 0.0,
            image.contrast if image else 0.0,
            float(image.has_hole) if image else 0.0,
            float(image.has_water) if image else 0.0,
            float(image.has_debris) if image else 0.0,
        ]
    )
    return np.array(values, dtype=np.float64)


def build_feature_pipeline(C: float = 1.0) -> Pipeline:
    logger.info("Building logistic regression pipeline over bundle features")
    return Pipeline(
        steps=[
            ("scaler", StandardScaler()),
            ("classifier", LogisticRegression(C=C, max_iter=1000)),
        ]
    )


@dataclass(frozen=True)
class ModelEvaluation:
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    labels: tuple[str, ...]
    confusion: np.ndarray
    report: str

    def to_dict(self) -> dict[str, float]:
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1Score": self.f1_score,
        }


class TrainedFeaturePredictor:
    """Category predictor backed by a fitted scikit-learn pipeline."""

    def __init__(self, pipeline: Pipeline) -> None:
        self._pipeline = pipeline

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(str(label) for label in self._pipeline.classes_)

    @classmethod
    def fit(
        cls,
        bundles: Sequence[FeatureBundle],
        labels: Sequence[str],
        C: float = 1.0,
    ) -> "TrainedFeaturePredictor":
        if len(bundles) != len(labels):
            raise ValueError("Number of feature bundles must match number of labels")
        normalised = [Category(str(label).strip().lower()).value for label in labels]
        if len(set(normalised)) < 2:
            raise ValueError("Training requires at least two distinct categories")

        matrix = np.vstack([vectorize(bundle) for bundle in bundles])
        pipeline = build_feature_pipeline(C=C)
        pipeline.fit(matrix, normalised)
        logger.info("Trained category model on {} samples", len(normalised))
        return cls(pipeline)

    def predict(self, features: FeatureBundle) -> CategoryPrediction:
        if features.is_empty:
            raise PredictionError("Trained model received an empty feature bundle")

        probabilities = self._pipeline.predict_proba(vectorize(features)[None, :])[0]
        top_index = int(np.argmax(probabilities))
        category = Category(self.classes[top_index])
        return CategoryPrediction(category=category, confidence=float(probabilities[top_index]))

    def evaluate(
        self, bundles: Sequence[FeatureBundle], labels: Sequence[str]
    ) -> ModelEvaluation:
        if not bundles:
            raise ValueError("Evaluation requires at least one sample")
        expected = [str(label).strip().lower() for label in labels]
        matrix = np.vstack([vectorize(bundle) for bundle in bundles])
        predicted = [str(label) for label in self._pipeline.predict(matrix)]

        label_order = tuple(sorted(set(expected) | set(predicted)))
        precision, recall, f1, _ = precision_recall_fscore_support(
            expected, predicted, average="macro", zero_division=0
        )
        return ModelEvaluation(
            accuracy=float(accuracy_score(expected, predicted)),
            precision=float(precision),
            recall=float(recall),
            f1_score=float(f1),
            labels=label_order,
            confusion=confusion_matrix(expected, predicted, labels=list(label_order)),
            report=classification_report(expected, predicted, zero_division=0),
        )

    def save(self, path: Path) -> None:
        logger.info("Saving category model to {}", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self._pipeline, path)

    @classmethod
    def load(cls, path: Path) -> "TrainedFeaturePredictor":
        if not path.exists():
            raise FileNotFoundError(f"Model artifact not found at {path}")
        logger.info("Loading category model from {}", path)
        return cls(joblib.load(path))


__all__ = [
    "FEATURE_COLUMNS",
    "ModelEvaluation",
    "TrainedFeaturePredictor",
    "build_feature_pipeline",
    "vectorize",
]
