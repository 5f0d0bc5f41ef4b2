"""Image preprocessing and placeholder visual features."""
from __future__ import annotations

import io
import random
from dataclasses import dataclass
from typing import Mapping, Protocol

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from src.core.entities import ImageFeatures
from src.core.errors import ExtractionError
from src.utils.logger import logger

# Input shape expected by a vision model plugged in behind ImageSignalDetector.
CANONICAL_SIZE: tuple[int, int] = (224, 224)

COLOR_PALETTE: Mapping[str, tuple[int, int, int]] = {
    "black": (0, 0, 0),
    "gray": (128, 128, 128),
    "white": (255, 255, 255),
    "brown": (120, 80, 40),
    "red": (200, 30, 30),
    "orange": (230, 130, 30),
    "yellow": (230, 210, 40),
    "green": (40, 160, 60),
    "blue": (40, 90, 200),
}


@dataclass(frozen=True)
class ImageSignals:
    has_hole: bool
    has_water: bool
    has_debris: bool


class ImageSignalDetector(Protocol):
    def detect(self, pixels: np.ndarray) -> ImageSignals:
        ...


class RandomImageSignalDetector:
    """Stand-in for a vision model: draws each signal from ``rng``."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def detect(self, pixels: np.ndarray) -> ImageSignals:
        return ImageSignals(
            has_hole=self._rng.random() > 0.5,
            has_water=self._rng.random() > 0.7,
            has_debris=self._rng.random() > 0.6,
        )


def preprocess_image(image_bytes: bytes) -> np.ndarray:
    """Decode, resize to the canonical shape and normalise intensities to ``[0, 1]``."""

    try:
        with Image.open(io.BytesIO(image_bytes)) as source:
            rgb = source.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as error:
        raise ExtractionError("image", str(error)) from error

    resized = rgb.resize(CANONICAL_SIZE, Image.Resampling.BILINEAR)
    stretched = ImageOps.autocontrast(resized)
    return np.asarray(stretched, dtype=np.float32) / 255.0


class ImageFeatureExtractor:
    """Derive the image feature record from raw bytes."""

    def __init__(
        self,
        signal_detector: ImageSignalDetector | None = None,
        palette: Mapping[str, tuple[int, int, int]] | None = None,
        n_colors: int = 2,
    ) -> None:
        self._signal_detector = signal_detector or RandomImageSignalDetector()
        palette = palette or COLOR_PALETTE
        self._color_names = tuple(palette)
        self._palette = np.array([palette[name] for name in self._color_names], dtype=np.float32) / 255.0
        self._n_colors = n_colors

    def extract(self, image_bytes: bytes) -> ImageFeatures:
        pixels = preprocess_image(image_bytes)
        signals = self._signal_detector.detect(pixels)
        features = ImageFeatures(
            dominant_colors=self._dominant_colors(pixels),
            brightness=round(float(pixels.mean()), 4),
            contrast=round(min(1.0, float(pixels.std()) * 2.0), 4),
            has_hole=signals.has_hole,
            has_water=signals.has_water,
            has_debris=signals.has_debris,
        )
        logger.debug("Image features: {}", features)
        return features

    def _dominant_colors(self, pixels: np.ndarray) -> tuple[str, ...]:
        flat = pixels.reshape(-1, 3)
        distances = ((flat[:, None, :] - self._palette[None, :, :]) ** 2).sum(axis=2)
        counts = np.bincount(distances.argmin(axis=1), minlength=len(self._color_names))
        ranked = np.argsort(-counts, kind="stable")
        return tuple(
            self._color_names[index] for index in ranked[: self._n_colors] if counts[index] > 0
        )


__all__ = [
    "CANONICAL_SIZE",
    "COLOR_PALETTE",
    "ImageFeatureExtractor",
    "ImageSignalDetector",
    "ImageSignals",
    "RandomImageSignalDetector",
    "preprocess_image",
]
