"""Pytest configuration for the project."""
from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class SequenceRandom:
    """Fixed-sequence stand-in for ``random.Random``."""

    def __init__(self, values: Sequence[float], choice_index: int = 0) -> None:
        self._values = list(values)
        self._position = 0
        self._choice_index = choice_index

    def random(self) -> float:
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value

    def choice(self, options):
        return options[self._choice_index]


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    from PIL import Image

    def _make(color=(255, 0, 0), size=(64, 48), image_format: str = "PNG") -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", size, color).save(buffer, format=image_format)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sequence_random() -> type[SequenceRandom]:
    return SequenceRandom
