"""Additive boundary model and its textual persistence format.

A model is one weight per vocabulary feature. The decision score of a
feature set ``S`` is ``bias + sum(weight[f] for f in S)`` with
``bias = -sum(all weights) / 2``.

Persisted form, one entry per line::

    <feature>\\t<weight>
    ...
    <bias>

Only non-zero weights are written. The bias feature (vocabulary index 0)
is folded into the trailing bias line and reconstructed on load.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple

import numpy as np

from .exceptions import ModelFormatError
from .vocabulary import BIAS_FEATURE, FeatureVocabulary

logger = logging.getLogger(__name__)

POSITIVE_LABEL = 1
NEGATIVE_LABEL = -1


class Model:
    """Dense weight vector aligned with a ``FeatureVocabulary``."""

    def __init__(
        self,
        vocabulary: Optional[FeatureVocabulary] = None,
        weights: Optional[Sequence[float]] = None,
    ) -> None:
        self.vocabulary = vocabulary if vocabulary is not None else FeatureVocabulary()
        if weights is None:
            weights = [0.0] * len(self.vocabulary)
        if len(weights) != len(self.vocabulary):
            raise ValueError(
                f"Weight count {len(weights)} does not match vocabulary size {len(self.vocabulary)}"
            )
        self.weights: List[float] = [float(w) for w in weights]
        self._bias: Optional[float] = None

    def __len__(self) -> int:
        return len(self.weights)

    # Vocabulary access

    def intern(self, name: str) -> int:
        """Return the index of ``name``, adding a zero weight if it is new."""
        idx = self.vocabulary.intern(name)
        if idx == len(self.weights):
            self.weights.append(0.0)
        return idx

    def resolve(self, names: Iterable[str]) -> List[int]:
        """Map known feature names to indices, dropping unseen ones."""
        indices = []
        for name in names:
            idx = self.vocabulary.get(name)
            if idx is not None:
                indices.append(idx)
        return indices

    def weight(self, name: str) -> float:
        idx = self.vocabulary.get(name)
        return 0.0 if idx is None else self.weights[idx]

    # Weights

    def add_weight(self, idx: int, delta: float) -> None:
        self.weights[idx] += delta
        self._bias = None

    def set_weight(self, idx: int, value: float) -> None:
        self.weights[idx] = value
        self._bias = None

    def weights_array(self) -> np.ndarray:
        return np.asarray(self.weights, dtype=np.float64)

    @property
    def bias(self) -> float:
        if self._bias is None:
            self._bias = -sum(self.weights) / 2.0
        return self._bias

    # Scoring

    def score_indices(self, indices: Iterable[int]) -> float:
        weights = self.weights
        score = self.bias
        for idx in indices:
            score += weights[idx]
        return score

    def score(self, names: Iterable[str]) -> float:
        """Decision score of a feature-name set; unseen names add nothing."""
        return self.score_indices(self.resolve(names))

    def predict(self, names: Iterable[str]) -> int:
        return POSITIVE_LABEL if self.score(names) >= 0.0 else NEGATIVE_LABEL

    def nonzero_features(self) -> Iterator[Tuple[str, float]]:
        """Yield ``(name, weight)`` for every non-bias feature with a non-zero weight."""
        for idx in range(1, len(self.weights)):
            w = self.weights[idx]
            if w != 0.0:
                yield self.vocabulary.name(idx), w

    # Persistence

    def iter_lines(self) -> Iterator[str]:
        """Yield the persisted representation, one line at a time (no newlines)."""
        bias = -self.weights[0]
        for name, w in self.nonzero_features():
            yield f"{name}\t{w!r}"
            bias -= w
        yield repr(bias / 2.0)

    def save(self, stream: TextIO) -> None:
        for line in self.iter_lines():
            stream.write(line)
            stream.write("\n")

    @classmethod
    def load(cls, lines: Iterable[str], source: str = "<model>") -> "Model":
        """Parse a persisted model.

        Raises:
            ModelFormatError: On an unparseable line or a missing bias line.
        """
        parsed: Dict[str, float] = {}
        weight_sum = 0.0
        bias: Optional[float] = None

        for line_num, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            if "\t" in line:
                fields = line.rsplit("\t", 1)
            else:
                fields = line.split()
            if len(fields) == 2:
                name, value_str = fields
                value = _parse_float(value_str, source, line_num)
                parsed[name] = value
                weight_sum += value
            elif len(fields) == 1:
                bias = _parse_float(fields[0], source, line_num)
            else:
                raise ModelFormatError(
                    f"Invalid model line {line_num} in {source}: expected 'feature<TAB>weight' "
                    f"or a single bias value, got {len(fields)} fields"
                )

        if bias is None:
            raise ModelFormatError(f"Model {source} has no trailing bias line")

        parsed[BIAS_FEATURE] = -bias * 2.0 - weight_sum

        names = sorted(parsed)
        model = cls(FeatureVocabulary(names), [parsed[name] for name in names])
        logger.debug("Parsed %d features from %s", len(model) - 1, source)
        return model


def _parse_float(value: str, source: str, line_num: int) -> float:
    try:
        return float(value)
    except ValueError:
        raise ModelFormatError(
            f"Invalid number at line {line_num} in {source}: '{value}'"
        ) from None
