from __future__ import annotations

from pathlib import Path

import pytest

from segboost.io import load_model, read_lines
from segboost.model import Model

RESOURCES = Path(__file__).parent / "resources"


@pytest.fixture
def resources_dir() -> Path:
    return RESOURCES


@pytest.fixture
def toy_model_path() -> Path:
    """Hand-built model that splits on script changes and the particle 'は'."""
    return RESOURCES / "toy.model"


@pytest.fixture
def toy_model(toy_model_path) -> Model:
    return load_model(toy_model_path)


@pytest.fixture
def alternating_model() -> Model:
    """Model whose decision depends only on the previous boundary tag."""
    return load_model(RESOURCES / "alternating.model")


@pytest.fixture
def corpus_path() -> Path:
    return RESOURCES / "corpus.txt"


@pytest.fixture
def corpus_lines(corpus_path) -> list:
    return read_lines(corpus_path)
