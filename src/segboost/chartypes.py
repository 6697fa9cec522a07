"""Coarse script categories for single characters."""

from __future__ import annotations

import re
from typing import List, Pattern, Sequence, Tuple


class CharType:
    """Category codes assigned to characters."""

    KANJI_NUMERAL = "M"
    KANJI = "H"
    HIRAGANA = "I"
    KATAKANA = "K"
    LATIN = "A"
    DIGIT = "N"
    HANGUL = "G"
    THAI = "T"
    CJK_IDEOGRAPH = "Z"
    LATIN_EXTENDED = "E"
    OTHER = "O"


class RegularExpressions:
    """Character class patterns for each category."""

    KANJI_NUMERAL = r'[一二三四五六七八九十百千万億兆]'
    KANJI = r'[一-龠々〆ヵヶ]'
    HIRAGANA = r'[ぁ-ん]'
    KATAKANA = r'[ァ-ヴーｱ-ﾝﾞﾟ]'
    LATIN = r'[a-zA-Zａ-ｚＡ-Ｚ]'
    DIGIT = r'[0-9０-９]'
    HANGUL = r'[가-힣]'
    THAI = r'[ก-๛]'
    CJK_IDEOGRAPH = r'[㐀-䶵一-鿿]'
    LATIN_EXTENDED = r'[À-ÿĀ-ſƀ-ƿǍ-ɏ]'


# Priority order matters: kanji numerals are also kanji.
DEFAULT_PATTERNS: Sequence[Tuple[str, str]] = (
    (RegularExpressions.KANJI_NUMERAL, CharType.KANJI_NUMERAL),
    (RegularExpressions.KANJI, CharType.KANJI),
    (RegularExpressions.HIRAGANA, CharType.HIRAGANA),
    (RegularExpressions.KATAKANA, CharType.KATAKANA),
    (RegularExpressions.LATIN, CharType.LATIN),
    (RegularExpressions.DIGIT, CharType.DIGIT),
)

# Adds Korean, Thai, rarer CJK ideographs and accented Latin. Models trained
# with one pattern set must be applied with the same set.
EXTENDED_PATTERNS: Sequence[Tuple[str, str]] = (
    (RegularExpressions.KANJI_NUMERAL, CharType.KANJI_NUMERAL),
    (RegularExpressions.HIRAGANA, CharType.HIRAGANA),
    (RegularExpressions.KATAKANA, CharType.KATAKANA),
    (RegularExpressions.HANGUL, CharType.HANGUL),
    (RegularExpressions.THAI, CharType.THAI),
    (RegularExpressions.KANJI, CharType.KANJI),
    (RegularExpressions.CJK_IDEOGRAPH, CharType.CJK_IDEOGRAPH),
    (RegularExpressions.LATIN_EXTENDED, CharType.LATIN_EXTENDED),
    (RegularExpressions.LATIN, CharType.LATIN),
    (RegularExpressions.DIGIT, CharType.DIGIT),
)


class CharClassifier:
    """Maps a character to its category by ordered pattern matching.

    The first matching pattern wins; characters matching nothing are
    ``CharType.OTHER``.
    """

    def __init__(self, patterns: Sequence[Tuple[str, str]] = DEFAULT_PATTERNS) -> None:
        self.patterns: List[Tuple[Pattern[str], str]] = [
            (re.compile(pattern), code) for pattern, code in patterns
        ]

    def classify(self, ch: str) -> str:
        for pattern, code in self.patterns:
            if pattern.match(ch):
                return code
        return CharType.OTHER

    def classify_all(self, chars: Sequence[str]) -> List[str]:
        return [self.classify(ch) for ch in chars]


_default_classifier = CharClassifier()


def classify(ch: str) -> str:
    """Return the category code of ``ch`` using the default patterns."""
    return _default_classifier.classify(ch)
