"""Custom exceptions for SegBoost."""

from __future__ import annotations


class SegBoostError(Exception):
    """Base exception for all SegBoost errors."""
    pass


class SegBoostIOError(SegBoostError, OSError):
    """Raised when a corpus, feature or model file cannot be read or written."""
    pass


class ModelFormatError(SegBoostError, ValueError):
    """Raised when a model file contains a line that cannot be parsed."""
    pass


class FeatureFileError(SegBoostError, ValueError):
    """Raised when a feature file line has a missing or invalid label."""
    pass


class EmptyTrainingSetError(SegBoostError, ValueError):
    """Raised when training is requested without any instances."""
    pass
