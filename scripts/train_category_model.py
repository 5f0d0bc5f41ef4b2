"""Train the category model used by the ``trained`` predictor strategy."""
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Optional

if __package__ is None or __package__ == "":
    _SCRIPT_PARENT_STR = str(Path(__file__).resolve().parents[1])
    if _SCRIPT_PARENT_STR not in sys.path:
        sys.path.insert(0, _SCRIPT_PARENT_STR)

from scripts.bootstrap import bootstrap_project, resolve_path

_PROJECT_ROOT = bootstrap_project()

from src.core.entities import FeatureBundle  # noqa: E402
from src.infrastructure.datasets import IssueReportCSVLoader  # noqa: E402
from src.infrastructure.nlp.keywords import KeywordTables  # noqa: E402
from src.infrastructure.predictors.trained import TrainedFeaturePredictor  # noqa: E402
from src.interface.factory import build_feature_extractor  # noqa: E402
from src.utils.config import AppConfig, load_config  # noqa: E402
from src.utils.logger import configure_logging, logger  # noqa: E402


def load_labelled_bundles(
    config: AppConfig, dataset_path: Path
) -> tuple[list[FeatureBundle], list[str]]:
    """Extract feature bundles and category labels from a labelled CSV."""

    loader = IssueReportCSVLoader(dataset_path, required_columns=("text", "category"))
    data = loader.load()
    data = data.dropna(subset=["category"])
    reports = loader.to_reports(data)

    seed = config.get("predictor", {}).get("seed")
    extractor = build_feature_extractor(
        KeywordTables.from_config(config.get("keywords")),
        rng=random.Random(seed),
    )
    bundles = [
        extractor.extract(report.image_bytes, report.text, report.metadata) for report in reports
    ]
    labels = data["category"].astype(str).str.strip().str.lower().tolist()
    return bundles, labels


def train_model(config: AppConfig, dataset_path: Optional[Path] = None) -> TrainedFeaturePredictor:
    paths = config.get("paths", {})
    dataset_path = Path(dataset_path or paths["training_data"])
    model_path = Path(paths["model_artifact"])

    logger.info("Loading training data from {}", dataset_path)
    bundles, labels = load_labelled_bundles(config, dataset_path)

    C = float(config.get("predictor", {}).get("C", 1.0))
    predictor = TrainedFeaturePredictor.fit(bundles, labels, C=C)
    predictor.save(model_path)

    evaluation = predictor.evaluate(bundles, labels)
    logger.info("Training report:\n{}", evaluation.report)
    return predictor


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train the issue category model")
    parser.add_argument("--config", type=Path, default=Path("configs/config.yaml"))
    parser.add_argument("--dataset", type=Path, default=None, help="Labelled CSV with text and category")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config(resolve_path(args.config))
    configure_logging(config.get("logging", {}).get("level", "INFO"))
    train_model(config, resolve_path(args.dataset) if args.dataset else None)


if __name__ == "__main__":
    main()
