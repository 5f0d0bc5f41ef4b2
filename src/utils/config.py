"""Configuration shapes and YAML loading."""
from __future__ import annotations

from pathlib import Path
from typing import TypedDict, cast

import yaml


class PathsConfig(TypedDict, total=False):
    model_artifact: str
    training_data: str
    evaluation_data: str
    metrics_output: str
    figures_dir: str


class KeywordsConfig(TypedDict, total=False):
    categories: dict[str, list[str]]
    urgency: list[str]


class PriorityConfig(TypedDict, total=False):
    category_weights: dict[str, int]
    default_weight: int
    urgency_cap: int
    critical_infrastructure_bonus: int
    duplicate_report_threshold: int
    duplicate_report_bonus: int
    thresholds: dict[str, int]


class PredictorConfig(TypedDict, total=False):
    strategy: str
    seed: int
    C: float


class ClassificationConfig(TypedDict, total=False):
    confidence_threshold: float
    max_workers: int


class LoggingConfig(TypedDict, total=False):
    level: str


class AppConfig(TypedDict, total=False):
    paths: PathsConfig
    keywords: KeywordsConfig
    priority: PriorityConfig
    predictor: PredictorConfig
    classification: ClassificationConfig
    logging: LoggingConfig


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as file:
        data = yaml.safe_load(file)

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ValueError("The configuration file must contain a mapping at the top level.")

    return cast(AppConfig, data)


__all__ = [
    "AppConfig",
    "ClassificationConfig",
    "KeywordsConfig",
    "LoggingConfig",
    "PathsConfig",
    "PredictorConfig",
    "PriorityConfig",
    "load_config",
]
