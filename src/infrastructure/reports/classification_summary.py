"""Summaries and figures for a batch of classification results."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.figure import Figure

from src.core.entities import ClassificationResult, PriorityLevel


def results_to_frame(
    results: Sequence[ClassificationResult],
    needs_review: Callable[[ClassificationResult], bool],
) -> pd.DataFrame:
    """Flatten results into one row each, flagging rows ``needs_review`` accepts."""

    return pd.DataFrame(
        {
            "category": [result.category.value for result in results],
            "confidence": [result.confidence for result in results],
            "priority": [result.suggested_priority.value for result in results],
            "processed_at": [result.processed_at.isoformat() for result in results],
            "needs_review": [bool(needs_review(result)) for result in results],
            "error": [result.error for result in results],
        },
        columns=["category", "confidence", "priority", "processed_at", "needs_review", "error"],
    )


class ClassificationSummaryAnalyzer:
    """Compute distribution metrics and illustrative figures."""

    def compute_metrics(self, data: pd.DataFrame) -> Mapping[str, Any]:
        total = int(len(data))
        category_counts = {
            str(category): int(count)
            for category, count in data["category"].value_counts().items()
        }
        priority_series = data["priority"].value_counts()
        priority_counts = {
            level.value: int(priority_series.get(level.value, 0)) for level in PriorityLevel
        }

        metrics: dict[str, Any] = {
            "total": total,
            "category_counts": category_counts,
            "priority_counts": priority_counts,
            "mean_confidence": round(float(data["confidence"].mean()), 4) if total else 0.0,
            "manual_review_share": round(float(data["needs_review"].mean()), 4) if total else 0.0,
            "degraded": int(data["error"].notna().sum()),
        }
        return metrics

    def build_figures(self, data: pd.DataFrame) -> Mapping[str, Figure]:
        figures: dict[str, Figure] = {}
        if data.empty:
            return figures

        counts = data["category"].value_counts().sort_values(ascending=False)
        fig_categories, ax_categories = plt.subplots(figsize=(8, 4))
        counts.plot(kind="bar", ax=ax_categories, color="#1f77b4")
        ax_categories.set_title("Issues per category")
        ax_categories.set_xlabel("Category")
        ax_categories.set_ylabel("Issues")
        fig_categories.tight_layout()
        figures["category_distribution"] = fig_categories

        priorities = data["priority"].value_counts().reindex(
            [level.value for level in PriorityLevel], fill_value=0
        )
        fig_priorities, ax_priorities = plt.subplots(figsize=(8, 4))
        priorities.plot(kind="bar", ax=ax_priorities, color="#d62728")
        ax_priorities.set_title("Issues per suggested priority")
        ax_priorities.set_xlabel("Priority")
        ax_priorities.set_ylabel("Issues")
        fig_priorities.tight_layout()
        figures["priority_distribution"] = fig_priorities

        fig_confidence, ax_confidence = plt.subplots(figsize=(8, 4))
        ax_confidence.hist(data["confidence"], bins=20, range=(0.0, 1.0), color="#ff7f0e", edgecolor="black")
        ax_confidence.set_title("Confidence distribution")
        ax_confidence.set_xlabel("Confidence")
        ax_confidence.set_ylabel("Issues")
        fig_confidence.tight_layout()
        figures["confidence_histogram"] = fig_confidence

        return figures


class FileSystemReportRepository:
    """Persist metrics and figures to the local filesystem."""

    def __init__(self, metrics_path: Path, figures_dir: Path) -> None:
        self._metrics_path = Path(metrics_path)
        self._figures_dir = Path(figures_dir)

    def save_metrics(self, metrics: Mapping[str, Any]) -> Path:
        self._metrics_path.parent.mkdir(parents=True, exist_ok=True)
        serialisable = json.dumps(metrics, ensure_ascii=False, indent=2)
        self._metrics_path.write_text(serialisable, encoding="utf-8")
        return self._metrics_path

    def save_figures(self, figures: Mapping[str, Figure]) -> Mapping[str, Path]:
        self._figures_dir.mkdir(parents=True, exist_ok=True)
        saved_paths: dict[str, Path] = {}
        for name, figure in figures.items():
            destination = self._figures_dir / f"{name}.png"
            figure.savefig(destination, dpi=150, bbox_inches="tight")
            plt.close(figure)
            saved_paths[name] = destination
        return saved_paths


__all__ = [
    "ClassificationSummaryAnalyzer",
    "FileSystemReportRepository",
    "results_to_frame",
]
