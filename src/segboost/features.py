"""Context features around a candidate word boundary.

A position is described by the three boundary tags before it and by the six
characters (and their categories) at offsets -3..+2. Sequences passed to
``extract_features`` must be padded with ``BEGIN_CHARS`` / ``END_CHARS`` so
that every real position has a full window.
"""

from __future__ import annotations

from typing import FrozenSet, List, Sequence, Tuple

from .chartypes import CharClassifier, CharType

TAG_BEGIN = "B"
TAG_INSIDE = "O"
TAG_UNKNOWN = "U"

BEGIN_CHARS = ("B3", "B2", "B1")
END_CHARS = ("E1", "E2", "E3")
PAD_TYPES = (CharType.OTHER,) * 3

# Index of the first real character in a padded sequence.
FIRST_POSITION = len(BEGIN_CHARS)


def pad_characters(chars: Sequence[str], classifier: CharClassifier) -> Tuple[List[str], List[str]]:
    """Return padded ``(chars, types)`` lists for ``chars``."""
    padded_chars = list(BEGIN_CHARS) + list(chars) + list(END_CHARS)
    padded_types = list(PAD_TYPES) + classifier.classify_all(chars) + list(PAD_TYPES)
    return padded_chars, padded_types


def extract_features(
    i: int,
    tags: Sequence[str],
    chars: Sequence[str],
    types: Sequence[str],
) -> FrozenSet[str]:
    """Return the feature names describing position ``i``."""
    w1, w2, w3, w4, w5, w6 = chars[i - 3:i + 3]
    c1, c2, c3, c4, c5, c6 = types[i - 3:i + 3]
    p1, p2, p3 = tags[i - 3:i]

    return frozenset((
        # previous boundary tags
        "UP1:" + p1,
        "UP2:" + p2,
        "UP3:" + p3,
        "BP1:" + p1 + p2,
        "BP2:" + p2 + p3,
        # characters
        "UW1:" + w1,
        "UW2:" + w2,
        "UW3:" + w3,
        "UW4:" + w4,
        "UW5:" + w5,
        "UW6:" + w6,
        "BW1:" + w2 + w3,
        "BW2:" + w3 + w4,
        "BW3:" + w4 + w5,
        "TW1:" + w1 + w2 + w3,
        "TW2:" + w2 + w3 + w4,
        "TW3:" + w3 + w4 + w5,
        "TW4:" + w4 + w5 + w6,
        # character categories
        "UC1:" + c1,
        "UC2:" + c2,
        "UC3:" + c3,
        "UC4:" + c4,
        "UC5:" + c5,
        "UC6:" + c6,
        "BC1:" + c2 + c3,
        "BC2:" + c3 + c4,
        "BC3:" + c4 + c5,
        "TC1:" + c1 + c2 + c3,
        "TC2:" + c2 + c3 + c4,
        "TC3:" + c3 + c4 + c5,
        "TC4:" + c4 + c5 + c6,
        # tags combined with categories
        "UQ1:" + p1 + c1,
        "UQ2:" + p2 + c2,
        "UQ3:" + p3 + c3,
        "BQ1:" + p2 + c2 + c3,
        "BQ2:" + p2 + c3 + c4,
        "BQ3:" + p3 + c2 + c3,
        "BQ4:" + p3 + c3 + c4,
        "TQ1:" + p2 + c1 + c2 + c3,
        "TQ2:" + p2 + c2 + c3 + c4,
        "TQ3:" + p3 + c1 + c2 + c3,
        "TQ4:" + p3 + c2 + c3 + c4,
    ))
