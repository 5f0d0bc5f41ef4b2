"""Classify a CSV of issue submissions and summarise the outcome."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

if __package__ is None or __package__ == "":
    _SCRIPT_PARENT_STR = str(Path(__file__).resolve().parents[1])
    if _SCRIPT_PARENT_STR not in sys.path:
        sys.path.insert(0, _SCRIPT_PARENT_STR)

from scripts.bootstrap import bootstrap_project, resolve_path

_PROJECT_ROOT = bootstrap_project()

from src.infrastructure.datasets import IssueReportCSVLoader  # noqa: E402
from src.infrastructure.reports import (  # noqa: E402
    ClassificationSummaryAnalyzer,
    FileSystemReportRepository,
    results_to_frame,
)
from src.interface.factory import build_classifier  # noqa: E402
from src.utils.config import AppConfig, load_config  # noqa: E402
from src.utils.logger import configure_logging, logger  # noqa: E402


def classify_reports(
    config: AppConfig,
    input_path: Path,
    output_path: Path,
    metrics_path: Optional[Path] = None,
    figures_dir: Optional[Path] = None,
    max_workers: Optional[int] = None,
) -> pd.DataFrame:
    loader = IssueReportCSVLoader(input_path)
    data = loader.load()
    classifier = build_classifier(config)

    results = classifier.classify_batch(loader.to_reports(data), max_workers=max_workers)
    frame = results_to_frame(results, classifier.needs_manual_review)
    frame.insert(0, "text", data["text"].tolist())

    output_path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output_path, index=False)
    logger.info("Wrote {} classifications to {}", len(frame), output_path)

    if metrics_path is not None:
        analyzer = ClassificationSummaryAnalyzer()
        repository = FileSystemReportRepository(
            metrics_path=metrics_path,
            figures_dir=figures_dir or metrics_path.parent / "figures",
        )
        repository.save_metrics(analyzer.compute_metrics(frame))
        for name, path in repository.save_figures(analyzer.build_figures(frame)).items():
            logger.info("Figure '{}' saved to {}", name, path)

    return frame


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Classify civic issue reports from a CSV file")
    parser.add_argument("--config", type=Path, default=Path("configs/config.yaml"))
    parser.add_argument("--input", type=Path, required=True, help="CSV with a 'text' column")
    parser.add_argument("--output", type=Path, default=Path("reports/classifications.csv"))
    parser.add_argument("--metrics-path", type=Path, default=Path("reports/metrics/classification_summary.json"))
    parser.add_argument("--figures-dir", type=Path, default=None, help="Defaults to <metrics dir>/figures")
    parser.add_argument("--workers", type=int, default=None)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config(resolve_path(args.config))
    configure_logging(config.get("logging", {}).get("level", "INFO"))

    classify_reports(
        config,
        input_path=resolve_path(args.input),
        output_path=resolve_path(args.output),
        metrics_path=resolve_path(args.metrics_path),
        figures_dir=resolve_path(args.figures_dir) if args.figures_dir else None,
        max_workers=args.workers,
    )


if __name__ == "__main__":
    main()
