"""SegBoost: AdaBoost word segmentation for unspaced text.

Trains a binary "does a word start here" classifier over character-context
features and applies it greedily, left to right, to split text such as
Japanese into words.

Quick Start:
    >>> from segboost import Segmenter
    >>>
    >>> # Collect instances from a gold corpus and train
    >>> segmenter = Segmenter()
    >>> segmenter.add_corpus(["これ は テスト です 。", "別 の 文 も あり ます 。"])
    >>> result = segmenter.trainer(threshold=0.01, num_iterations=100).train()
    >>>
    >>> # Segment new text
    >>> segmenter.segment("これはテストです。")

Loading a persisted model:
    >>> from segboost import Segmenter, load_model
    >>> segmenter = Segmenter(load_model("./RWCP.model"))
"""

__version__ = "0.4.0"

from .config import get_settings, Settings
from .logging_utils import configure_logging

from .boosting import AdaBoostTrainer, IterationStats, StopReason, TrainingResult
from .chartypes import EXTENDED_PATTERNS, CharClassifier, CharType, classify
from .evaluation import Metrics, SegmentationMetrics, evaluate_segmentation
from .exceptions import (
    EmptyTrainingSetError,
    FeatureFileError,
    ModelFormatError,
    SegBoostError,
    SegBoostIOError,
)
from .features import extract_features
from .instances import InstanceStore
from .io import load_model, save_model
from .model import Model
from .segmenter import Segmenter
from .vocabulary import BIAS_FEATURE, FeatureVocabulary

__all__ = [
    "__version__",
    "get_settings",
    "Settings",
    "configure_logging",
    "AdaBoostTrainer",
    "IterationStats",
    "StopReason",
    "TrainingResult",
    "CharClassifier",
    "CharType",
    "EXTENDED_PATTERNS",
    "classify",
    "Metrics",
    "SegmentationMetrics",
    "evaluate_segmentation",
    "EmptyTrainingSetError",
    "FeatureFileError",
    "ModelFormatError",
    "SegBoostError",
    "SegBoostIOError",
    "extract_features",
    "InstanceStore",
    "load_model",
    "save_model",
    "Model",
    "Segmenter",
    "BIAS_FEATURE",
    "FeatureVocabulary",
]
