"""Pytest configuration and fixtures for the test suite."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure project root is in path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from faceio import GrayImage
from model.registry import clear_cache

from tests.fixtures import FakeEmotionModel, gray_pixels


@pytest.fixture
def black_image() -> GrayImage:
    """All-black 64x64 grayscale image (every intensity 0)."""
    return GrayImage(np.zeros((64, 64), dtype=np.uint8))


@pytest.fixture
def random_image() -> GrayImage:
    """64x64 grayscale image with reproducible random intensities."""
    return GrayImage(gray_pixels(64, 64, seed=7))


@pytest.fixture
def fake_model() -> FakeEmotionModel:
    """Model whose logits favor "neutral": [2, 0, 0, 0, 0, 0, 0, 0]."""
    return FakeEmotionModel([2.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])


@pytest.fixture(autouse=True)
def _clear_model_cache():
    """Keep registry state from leaking between tests."""
    clear_cache()
    yield
    clear_cache()


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (require an ONNX model file)"
    )
