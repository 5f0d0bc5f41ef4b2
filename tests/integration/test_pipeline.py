"""Integration test for training, evaluating and batch-classifying from CSV."""
from __future__ import annotations

import json

import pandas as pd

from scripts.classify_reports import classify_reports
from scripts.evaluate_category_model import evaluate_model
from scripts.train_category_model import train_model
from src.infrastructure.predictors.trained import TrainedFeaturePredictor


def test_full_pipeline(tmp_path, make_image) -> None:
    train_path = tmp_path / "train.csv"
    reports_path = tmp_path / "reports.csv"
    model_path = tmp_path / "model.joblib"
    (tmp_path / "photo.png").write_bytes(make_image(color=(90, 90, 90)))

    base_records = [
        ("Huge pothole on the main road", "pothole"),
        ("Crater in the pavement", "pothole"),
        ("Garbage dump behind the market", "garbage"),
        ("Trash and litter everywhere", "garbage"),
        ("Water leak from a burst pipe", "water"),
        ("Flooding after the pipe burst", "water"),
    ]
    pd.DataFrame(
        {
            "text": [text for text, _ in base_records for _ in range(2)],
            "category": [label for _, label in base_records for _ in range(2)],
            "timestamp": ["2024-02-03T08:15:00Z"] * 12,
            "reporterHistory": [1, 3] * 6,
        }
    ).to_csv(train_path, index=False)

    pd.DataFrame(
        {
            "text": [
                "Deep pothole, dangerous for bikes",
                "Something odd near the park",
                "Sewer overflow, road blocked, urgent",
            ],
            "image_path": ["photo.png", None, None],
            "nearCriticalInfrastructure": [False, False, True],
            "duplicateReports": [0, 0, 5],
        }
    ).to_csv(reports_path, index=False)

    config = {
        "paths": {
            "model_artifact": str(model_path),
            "training_data": str(train_path),
            "evaluation_data": str(train_path),
        },
        "predictor": {"strategy": "trained", "seed": 7},
        "logging": {"level": "INFO"},
    }

    estimator = train_model(config)
    assert isinstance(estimator, TrainedFeaturePredictor)
    assert model_path.exists()

    evaluation = evaluate_model(config)
    assert 0.0 <= evaluation.accuracy <= 1.0
    assert set(evaluation.labels) >= {"pothole", "garbage", "water"}

    output_path = tmp_path / "out" / "classified.csv"
    metrics_path = tmp_path / "out" / "summary.json"
    frame = classify_reports(
        config,
        input_path=reports_path,
        output_path=output_path,
        metrics_path=metrics_path,
        figures_dir=tmp_path / "out" / "figures",
    )

    assert output_path.exists()
    assert frame["category"].tolist()[0] == "pothole"
    assert frame["category"].tolist()[1] in {"pothole", "garbage", "water"}
    assert frame["category"].tolist()[2] == "sewage"
    assert frame["priority"].tolist()[2] == "critical"
    assert json.loads(metrics_path.read_text(encoding="utf-8"))["total"] == 3


def test_figures_default_next_to_metrics(tmp_path) -> None:
    reports_path = tmp_path / "reports.csv"
    pd.DataFrame({"text": ["Garbage pile", "Streetlight flickering"]}).to_csv(reports_path, index=False)
    metrics_path = tmp_path / "out" / "summary.json"

    frame = classify_reports(
        {"predictor": {"seed": 3}},
        input_path=reports_path,
        output_path=tmp_path / "out" / "classified.csv",
        metrics_path=metrics_path,
    )

    assert frame["category"].tolist() == ["garbage", "streetlight"]
    assert frame["needs_review"].tolist() == [False, False]
    assert (tmp_path / "out" / "figures" / "category_distribution.png").exists()
