"""Sparse storage of labelled training instances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from .model import NEGATIVE_LABEL, POSITIVE_LABEL, Model


@dataclass
class InstanceArrays:
    """CSR-style numpy view of an ``InstanceStore``.

    Row ``i`` owns ``indices[indptr[i]:indptr[i + 1]]``; ``row_ids`` repeats
    each row number once per active feature.
    """

    indptr: np.ndarray
    indices: np.ndarray
    row_ids: np.ndarray
    labels: np.ndarray
    weights: np.ndarray

    @property
    def num_instances(self) -> int:
        return int(self.labels.shape[0])


class InstanceStore:
    """Feature-index lists, labels and weights for every training instance.

    Feature names are interned through the shared ``Model`` so that the
    vocabulary and the weight vector always grow together.
    """

    def __init__(self, model: Model) -> None:
        self.model = model
        self._indptr: List[int] = [0]
        self._indices: List[int] = []
        self._labels: List[int] = []
        self._weights: List[float] = []

    def __len__(self) -> int:
        return len(self._labels)

    def add(self, names: Iterable[str], label: int, weight: float = 1.0) -> None:
        if label not in (POSITIVE_LABEL, NEGATIVE_LABEL):
            raise ValueError(f"Label must be +1 or -1, got {label}")
        indices = sorted({self.model.intern(name) for name in sorted(set(names))})
        self._indices.extend(indices)
        self._indptr.append(len(self._indices))
        self._labels.append(label)
        self._weights.append(weight)

    def predict(self, names: Iterable[str]) -> int:
        return self.model.predict(names)

    def features(self, i: int) -> Sequence[int]:
        return self._indices[self._indptr[i]:self._indptr[i + 1]]

    def label(self, i: int) -> int:
        return self._labels[i]

    @property
    def labels(self) -> List[int]:
        return list(self._labels)

    @property
    def weights(self) -> List[float]:
        return list(self._weights)

    def set_weights(self, weights: Sequence[float]) -> None:
        if len(weights) != len(self._labels):
            raise ValueError(f"Expected {len(self._labels)} weights, got {len(weights)}")
        self._weights = [float(w) for w in weights]

    def to_arrays(self) -> InstanceArrays:
        indptr = np.asarray(self._indptr, dtype=np.int64)
        lengths = np.diff(indptr)
        return InstanceArrays(
            indptr=indptr,
            indices=np.asarray(self._indices, dtype=np.int64),
            row_ids=np.repeat(np.arange(len(self._labels), dtype=np.int64), lengths),
            labels=np.asarray(self._labels, dtype=np.float64),
            weights=np.asarray(self._weights, dtype=np.float64),
        )
