"""Combine the per-modality extractors into a single feature bundle."""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, TypeVar

from src.core.entities import FeatureBundle
from src.infrastructure.features.image import ImageFeatureExtractor
from src.infrastructure.features.metadata import MetadataFeatureExtractor
from src.infrastructure.features.text import TextFeatureExtractor
from src.utils.logger import logger

_T = TypeVar("_T")


class FeatureExtractor:
    """Turn raw submission inputs into a :class:`FeatureBundle`.

    A failing modality is logged and left empty; the other modalities are
    still extracted. Missing inputs simply produce empty sub-bundles, so an
    all-empty submission yields an all-empty bundle rather than an error.
    """

    def __init__(
        self,
        image_extractor: ImageFeatureExtractor | None = None,
        text_extractor: TextFeatureExtractor | None = None,
        metadata_extractor: MetadataFeatureExtractor | None = None,
    ) -> None:
        self._image_extractor = image_extractor or ImageFeatureExtractor()
        self._text_extractor = text_extractor or TextFeatureExtractor()
        self._metadata_extractor = metadata_extractor or MetadataFeatureExtractor()

    def extract(
        self,
        image_bytes: Optional[bytes] = None,
        text: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> FeatureBundle:
        image_features = None
        if image_bytes:
            image_features = self._safely("image", self._image_extractor.extract, image_bytes)

        text_features = None
        if text:
            text_features = self._safely("text", self._text_extractor.extract, text)

        metadata_features = None
        if metadata is not None:
            metadata_features = self._safely(
                "metadata", self._metadata_extractor.extract, metadata
            )

        return FeatureBundle(image=image_features, text=text_features, metadata=metadata_features)

    @staticmethod
    def _safely(modality: str, extract: Callable[[Any], _T], value: Any) -> Optional[_T]:
        try:
            return extract(value)
        except Exception as error:  # noqa: BLE001
            logger.warning("Skipping {} features: {}", modality, error)
            return None


__all__ = ["FeatureExtractor"]
