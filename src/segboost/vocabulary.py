"""Interned feature names with stable integer handles."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

# Never emitted by the extractor; its weight carries the bias through save/load.
BIAS_FEATURE = ""


class FeatureVocabulary:
    """Append-only arena of feature names.

    Index 0 always holds ``BIAS_FEATURE``. Indices are never reused or
    removed, so they stay valid for the lifetime of the vocabulary.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: List[str] = []
        self._index: Dict[str, int] = {}
        self.intern(BIAS_FEATURE)
        for name in names:
            self.intern(name)

    def intern(self, name: str) -> int:
        """Return the index of ``name``, appending it if unseen."""
        idx = self._index.get(name)
        if idx is None:
            idx = len(self._names)
            self._names.append(name)
            self._index[name] = idx
        return idx

    def get(self, name: str) -> Optional[int]:
        return self._index.get(name)

    def name(self, idx: int) -> str:
        return self._names[idx]

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)
