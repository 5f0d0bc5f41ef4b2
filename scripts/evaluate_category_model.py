"""Evaluate the trained category model against a labelled dataset."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np

if __package__ is None or __package__ == "":
    _SCRIPT_PARENT_STR = str(Path(__file__).resolve().parents[1])
    if _SCRIPT_PARENT_STR not in sys.path:
        sys.path.insert(0, _SCRIPT_PARENT_STR)

from scripts.bootstrap import bootstrap_project, resolve_path

_PROJECT_ROOT = bootstrap_project()

from scripts.train_category_model import load_labelled_bundles  # noqa: E402
from src.infrastructure.predictors.trained import ModelEvaluation, TrainedFeaturePredictor  # noqa: E402
from src.utils.config import AppConfig, load_config  # noqa: E402
from src.utils.logger import configure_logging, logger  # noqa: E402


def evaluate_model(config: AppConfig, dataset_path: Optional[Path] = None) -> ModelEvaluation:
    paths = config.get("paths", {})
    dataset_path = Path(dataset_path or paths["evaluation_data"])
    predictor = TrainedFeaturePredictor.load(Path(paths["model_artifact"]))

    logger.info("Loading evaluation data from {}", dataset_path)
    bundles, labels = load_labelled_bundles(config, dataset_path)
    evaluation = predictor.evaluate(bundles, labels)
    logger.info("Evaluation report:\n{}", evaluation.report)
    return evaluation


def plot_confusion_matrix(cm: np.ndarray, labels: Sequence[str], output_path: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 6))
    im = ax.imshow(cm, interpolation="nearest", cmap=plt.cm.Blues)
    ax.figure.colorbar(im, ax=ax)
    ax.set(
        xticks=range(len(labels)),
        yticks=range(len(labels)),
        xticklabels=labels,
        yticklabels=labels,
        ylabel="Actual",
        xlabel="Predicted",
        title="Category confusion matrix",
    )
    plt.setp(ax.get_xticklabels(), rotation=45, ha="right", rotation_mode="anchor")

    thresh = cm.max() / 2.0 if cm.size else 0
    for i in range(cm.shape[0]):
        for j in range(cm.shape[1]):
            ax.text(j, i, format(cm[i, j], "d"), ha="center", va="center",
                    color="white" if cm[i, j] > thresh else "black")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate the issue category model")
    parser.add_argument("--config", type=Path, default=Path("configs/config.yaml"))
    parser.add_argument("--dataset", type=Path, default=None, help="Labelled CSV with text and category")
    parser.add_argument(
        "--figure-path",
        type=Path,
        default=Path("reports/figures/confusion_matrix.png"),
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config(resolve_path(args.config))
    configure_logging(config.get("logging", {}).get("level", "INFO"))

    evaluation = evaluate_model(config, resolve_path(args.dataset) if args.dataset else None)
    logger.info("Scores: {}", json.dumps(evaluation.to_dict()))
    plot_confusion_matrix(evaluation.confusion, evaluation.labels, resolve_path(args.figure_path))


if __name__ == "__main__":
    main()
